from __future__ import annotations

import re

_NON_DIGITS = re.compile(r"\D+")


def normalize_phone(phone: str | None) -> str:
    """Reduce a Turkish mobile number to its 10-digit local form (``5XXXXXXXXX``).

    The ``+90`` country code and the trunk ``0`` prefix are removed.
    Anything else is returned as bare digits, an empty string when there are none.
    """
    if not phone:
        return ""
    digits = _NON_DIGITS.sub("", phone)
    if len(digits) == 12 and digits.startswith("90"):
        return digits[-10:]
    if len(digits) == 11 and digits.startswith("0"):
        return digits[-10:]
    return digits
