# Standard library imports
from pathlib import Path
from contextlib import asynccontextmanager
import logging

# External package imports
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Local application imports
from .api.error_handlers import register_exception_handlers
from .api.v1 import users_router
from .core.config import get_settings
from .infrastructure.db.mongo_connection import close_mongo_connection, ensure_user_indexes
from .infrastructure.http_client_factory import close_shared_http_client

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup/shutdown events.

    Ensures the unique user indexes on startup and releases the shared HTTP
    client and the MongoDB client on shutdown.
    """
    if await ensure_user_indexes():
        logger.info("User indexes ensured")

    yield

    try:
        await close_shared_http_client()
    except Exception as e:
        logger.error(f"Error closing HTTP client: {e}", exc_info=True)

    close_mongo_connection()
    logger.info("Application shutdown complete")


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_application() -> FastAPI:
    """
    Create and configure FastAPI application.

    This function sets up the FastAPI application with:
    - Environment variable loading
    - Logging configuration
    - CORS middleware configuration
    - Error envelope handlers
    - API route registration

    Returns:
        Configured FastAPI application instance
    """
    # Load environment variables from .env file
    env_path = Path(__file__).resolve().parent.parent / ".env"
    load_dotenv(env_path)

    settings = get_settings()
    configure_logging(settings.log_level)

    application = FastAPI(
        title="Account Service API",
        version="1.0.0",
        description="User registration, login and session tokens",
        lifespan=lifespan
    )

    # Cookies are used for the session, so credentials must be allowed
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(application)

    application.include_router(users_router, prefix="/api/v1/users")

    return application


# Create application instance
app = create_application()
