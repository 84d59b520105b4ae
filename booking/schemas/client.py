from pydantic import BaseModel


class ClientRecord(BaseModel):
    client_id: str
    business_id: str
    name: str
    phone: str  # canonical 10-digit form
