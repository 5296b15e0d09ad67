from pathlib import Path
from typing import List, Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# BaseSettings pulls each field from the process environment first, then from the .env file next to the process,
# then from the defaults below. A required field with no value anywhere makes Settings() raise, so the server refuses to start.


class Settings(BaseSettings):
    # Stripe keys
    STRIPE_SECRET_KEY: str
    STRIPE_PUBLISHABLE_KEY: str
    STRIPE_WEBHOOK_SECRET: str

    # the recurring plan every new subscription is created against
    SUBSCRIPTION_PLAN_ID: str

    # directory holding the browser client (index.html, js, css)
    STATIC_DIR: str

    # Server settings
    HOST: str = "0.0.0.0"
    PORT: int = 4242
    LOG_LEVEL: str = "INFO"
    CORS_ALLOW_ORIGINS: List[str] = ["*"]

    # seconds; 0 turns the replay window check off
    WEBHOOK_TOLERANCE_SECONDS: Optional[int] = Field(default=300, ge=0)
    STRIPE_API_TIMEOUT_SECONDS: float = 30

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    @field_validator("STRIPE_SECRET_KEY", "STRIPE_PUBLISHABLE_KEY", "STRIPE_WEBHOOK_SECRET", "SUBSCRIPTION_PLAN_ID", "STATIC_DIR")
    @classmethod
    def must_not_be_empty(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("must be set to a non-empty value")
        return value.strip()

    @field_validator("STATIC_DIR")
    @classmethod
    def static_dir_must_exist(cls, value: str) -> str:
        if not Path(value).is_dir():
            raise ValueError(f"static directory does not exist: {value}")
        return value

    @property
    def static_path(self) -> Path:
        return Path(self.STATIC_DIR).resolve()


# Settings() runs once per process on first import; every later `from app.configs.app_settings import settings` reuses it.
settings = Settings()
