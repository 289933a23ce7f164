# core/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    PROJECT_NAME: str = "CCTV Task Tracker"

    # ---------- Database ----------
    # default to local sqlite file next to backend/
    database_url: str = Field(
        default="sqlite:///./tasks.db",
        alias="DATABASE_URL",
    )

    # ---------- Storage ----------
    upload_dir: str = Field(default="uploads", alias="UPLOAD_DIR")
    image_bucket: str = Field(default="task-images", alias="IMAGE_BUCKET")
    public_base_url: str = Field(default="http://localhost:8000", alias="PUBLIC_BASE_URL")
    max_image_bytes: int = Field(default=10 * 1024 * 1024, alias="MAX_IMAGE_BYTES")

    # ---------- Sessions ----------
    session_ttl_hours: int = Field(default=24 * 7, alias="SESSION_TTL_HOURS")

    # ---------- HTTP ----------
    cors_origins: list[str] = Field(
        default=["https://localhost:8080", "http://localhost:8080"],
        alias="CORS_ORIGINS",
    )
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # ---------- Seed ----------
    seed_admin_username: str = Field(default="admin", alias="SEED_ADMIN_USERNAME")
    seed_admin_phone: str = Field(default="9000000001", alias="SEED_ADMIN_PHONE")
    seed_admin_password: str = Field(default="admin123", alias="SEED_ADMIN_PASSWORD")
    seed_employee_username: str = Field(default="test_user", alias="SEED_EMPLOYEE_USERNAME")
    seed_employee_phone: str = Field(default="9999999999", alias="SEED_EMPLOYEE_PHONE")
    seed_employee_password: str = Field(default="test@password", alias="SEED_EMPLOYEE_PASSWORD")

    model_config = SettingsConfigDict(
        env_file=(".env",),
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


settings = Settings()
