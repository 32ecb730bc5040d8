from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional
import logging

logger = logging.getLogger(__name__)

DEV_JWT_SECRET = "dev-secret-change-me"


class Settings(BaseSettings):
    # "development" fails fast on database bootstrap errors and exposes error details
    environment: str = "development"
    database_url: str = "sqlite:///./tic_projects.db"
    # Networked backend pool (ignored for SQLite)
    db_pool_size: int = 5
    db_pool_timeout: int = 30
    db_connect_timeout: int = 30
    db_idle_timeout: int = 30
    # Auth
    jwt_secret_key: Optional[str] = None
    jwt_algorithm: str = "HS256"
    jwt_expiration_hours: int = 24 * 7
    bcrypt_rounds: int = 10
    # Attachments: "local", "memory" or "gcs"
    attachment_backend: str = "local"
    upload_dir: Path = Path("public/uploads")
    upload_url_prefix: str = "/uploads"
    max_project_file_mb: int = 20
    max_avatar_mb: int = 5
    # Google Cloud Storage, uploads become a logged no-op without a bucket
    gcs_bucket_name: Optional[str] = None
    gcs_project_id: Optional[str] = None
    gcs_folder: str = "tic-projects"
    # Logging
    log_level: str = "INFO"
    debug: bool = False
    # CORS
    cors_origins: list = ["http://localhost:3000"]
    # Telemetry
    telemetry_enabled: bool = False
    telemetry_exporter: str = "console"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"


def validate_settings(settings: Settings) -> None:
    """Validate required settings"""
    errors = []

    if settings.environment.lower() not in ("development", "production", "test"):
        errors.append("ENVIRONMENT must be one of: development, production, test")

    # Security
    if not settings.jwt_secret_key:
        if settings.environment.lower() == "production":
            errors.append("JWT_SECRET_KEY is required in production")
        else:
            logger.warning("JWT_SECRET_KEY not set, using the development secret")
            settings.jwt_secret_key = DEV_JWT_SECRET

    if settings.bcrypt_rounds < 4 or settings.bcrypt_rounds > 31:
        errors.append("BCRYPT_ROUNDS must be between 4 and 31")

    # Attachments
    if settings.attachment_backend not in ("local", "memory", "gcs"):
        errors.append("ATTACHMENT_BACKEND must be one of: local, memory, gcs")

    if settings.attachment_backend == "gcs" and not settings.gcs_bucket_name:
        logger.warning("GCS_BUCKET_NAME not set, attachment uploads will be skipped")

    if settings.max_project_file_mb <= 0 or settings.max_avatar_mb <= 0:
        errors.append("Attachment size ceilings must be positive")

    if errors:
        error_message = "Configuration errors:\n" + "\n".join(f"  - {error}" for error in errors)
        raise ValueError(error_message)


settings = Settings()
validate_settings(settings)
logger.info("Settings loaded and validated successfully")
