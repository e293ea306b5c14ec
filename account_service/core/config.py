# Standard library imports
import os
from typing import Final, List, Optional


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


class Settings:
    """
    Application settings loaded from environment variables.

    This class centralizes all configuration settings for the application.
    All settings are loaded from environment variables with sensible defaults.
    """

    def __init__(self) -> None:
        # Database Configuration
        self.mongo_uri: Final[str] = os.getenv("MONGO_URI", "mongodb://localhost:27017")
        self.mongo_database_name: Final[str] = os.getenv("MONGO_DB_NAME", "accounts")

        # Token Configuration
        self.access_token_secret: Final[str] = os.getenv(
            "ACCESS_TOKEN_SECRET", "change_this_access_secret_in_production"
        )
        self.access_token_expire_minutes: Final[int] = int(
            os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60")
        )
        self.refresh_token_secret: Final[str] = os.getenv(
            "REFRESH_TOKEN_SECRET", "change_this_refresh_secret_in_production"
        )
        self.refresh_token_expire_days: Final[int] = int(
            os.getenv("REFRESH_TOKEN_EXPIRE_DAYS", "10")
        )
        self.jwt_algorithm: Final[str] = os.getenv("JWT_ALGORITHM", "HS256")

        # Media storage (Cloudinary)
        self.cloudinary_cloud_name: Final[str] = os.getenv("CLOUDINARY_CLOUD_NAME", "")
        self.cloudinary_api_key: Final[str] = os.getenv("CLOUDINARY_API_KEY", "")
        self.cloudinary_api_secret: Final[str] = os.getenv("CLOUDINARY_API_SECRET", "")

        # Uploads
        self.upload_temp_dir: Final[str] = os.getenv("UPLOAD_TEMP_DIR", "./public/temp")
        self.upload_max_mb: Final[int] = int(os.getenv("UPLOAD_MAX_MB", "10"))
        self.upload_timeout_seconds: Final[float] = float(os.getenv("UPLOAD_TIMEOUT_SECONDS", "60"))

        # HTTP
        self.cookie_secure: Final[bool] = _env_bool("COOKIE_SECURE", "true")
        self.cors_origins: Final[List[str]] = [
            origin.strip()
            for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:5173").split(",")
            if origin.strip()
        ]
        self.log_level: Final[str] = os.getenv("LOG_LEVEL", "INFO").upper()


# Global settings instance (singleton pattern)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get application settings (singleton pattern)

    Returns:
        Settings instance with all configuration values
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
