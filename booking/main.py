from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from booking.config import get_settings
from booking.dependencies.services import get_backend_client_cached
from booking.health import router as health_router
from booking.routers.appointment import router as appointment_router
from booking.routers.business import router as business_router


def configure_logging() -> None:
    """Ensure application logs use the INFO level by default."""
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        )
    else:
        root_logger.setLevel(logging.INFO)

# Configure logging as soon as the module is loaded
configure_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manages application startup and shutdown events.
    """
    settings = get_settings()

    settings_snapshot = settings.model_dump(exclude={"backend_api_key"})
    logger.info("Application settings on startup: %s", settings_snapshot)

    client = get_backend_client_cached()
    logger.info(
        "Application startup complete (mock data: %s).", client.use_mock_data
    )

    try:
        yield
    finally:
        logger.info("Closing backend client connection.")
        await client.close()
        logger.info("Application shutdown complete.")


settings = get_settings()
app = FastAPI(
    title=settings.app_name,
    lifespan=lifespan,
    redirect_slashes=False,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(appointment_router, prefix="/appointments")
app.include_router(business_router, prefix="/businesses")
app.include_router(health_router)
