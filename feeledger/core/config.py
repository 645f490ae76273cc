from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str = Field(..., alias="DATABASE_URL")

    jwt_secret_key: str = Field(..., alias="JWT_SECRET_KEY")
    jwt_algorithm: str = Field("HS256", alias="JWT_ALGORITHM")
    # Mobile client keeps the token for a week
    access_token_expire_minutes: int = Field(60 * 24 * 7, alias="ACCESS_TOKEN_EXPIRE_MINUTES")

    student_email_domain: str = Field("@cambridge.edu.in", alias="STUDENT_EMAIL_DOMAIN")
    payment_description_prefix: str = Field("College fees payment", alias="PAYMENT_DESCRIPTION_PREFIX")

    log_level: str = Field("INFO", alias="LOG_LEVEL")
    debug: bool = Field(False, alias="DEBUG")

    seed_admin_email: Optional[str] = Field(None, alias="SEED_ADMIN_EMAIL")
    seed_admin_password: Optional[str] = Field(None, alias="SEED_ADMIN_PASSWORD")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()
