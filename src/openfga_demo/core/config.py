from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application
    SERVICE_NAME: str = "openfga-demo"
    PROFILE: str = "dev"  # e.g. dev, prod
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"
    LOG_LEVEL: str = "INFO"

    # Server
    HOST: str = "127.0.0.1"
    PORT: int = 5001

    # CORS
    CORS_ORIGINS: list[str] = ["http://localhost:3000"]

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | list[str]) -> list[str]:
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",")]
        return v

    # OpenFGA Authorization
    OPENFGA_CLIENT_URL: str = "http://localhost:8080"
    OPENFGA_STORE_ID: str | None = None
    OPENFGA_AUTH_MODEL_ID: str | None = None
    OPENFGA_STORE_NAME: str = "openfga-demo"
    # Find or create the store and model when the ids above are unset
    OPENFGA_BOOTSTRAP: bool = True
    OPENFGA_TIMEOUT_SECONDS: float = 5.0

    @field_validator("OPENFGA_STORE_ID", "OPENFGA_AUTH_MODEL_ID", mode="before")
    @classmethod
    def blank_as_unset(cls, v: str | None) -> str | None:
        if isinstance(v, str) and not v.strip():
            return None
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
