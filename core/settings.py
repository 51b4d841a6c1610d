from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field, PostgresDsn, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CustomSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


class AppSettings(CustomSettings):
    ENVIRONMENT: Literal["local", "dev", "prod"] = Field(default="local")
    LOG_LEVEL: str = Field(default="INFO")


class PgDbSettings(CustomSettings):
    POSTGRES_ENGINE: str = Field(default="postgresql+asyncpg")
    POSTGRES_USER: str = Field(default="postgres")
    POSTGRES_PASSWORD: SecretStr = Field(default="postgres")
    POSTGRES_DB: str = Field(default="support_chat")
    POSTGRES_HOST: str = Field(default="localhost")
    POSTGRES_PORT: int = Field(default=5432)
    DATABASE_URL: PostgresDsn | str = Field(default="")

    @model_validator(mode="before")
    def validate_postgres_dsn(cls, data: dict):
        if isinstance(data, dict) and not data.get("DATABASE_URL"):
            _built_uri = PostgresDsn.build(
                scheme=data.get("POSTGRES_ENGINE", "postgresql+asyncpg"),
                username=data.get("POSTGRES_USER", "postgres"),
                password=data.get("POSTGRES_PASSWORD", "postgres"),
                host=data.get("POSTGRES_HOST", "localhost"),
                port=int(data.get("POSTGRES_PORT", 5432)),
                path=data.get("POSTGRES_DB", "support_chat"),
            ).unicode_string()
            data["DATABASE_URL"] = _built_uri
        return data


class GeminiSettings(CustomSettings):
    """Configuration for the Gemini reply generator.

    Env vars:
    - GEMINI_API_KEY (an empty key degrades every reply to the fallback text)
    - GEMINI_MODEL
    - GEMINI_MAX_OUTPUT_TOKENS
    - GEMINI_TIMEOUT (seconds per call, kept below the widget request timeout)
    - GEMINI_MAX_RETRIES
    """

    GEMINI_API_KEY: SecretStr = Field(default="")
    GEMINI_MODEL: str = Field(default="gemini-2.5-flash")
    GEMINI_MAX_OUTPUT_TOKENS: int = Field(default=500)
    GEMINI_TIMEOUT: float = Field(default=30.0)
    GEMINI_MAX_RETRIES: int = Field(default=1)


class UiSettings(CustomSettings):
    """Configuration for the Streamlit widget to reach the chat API.

    Set via env vars:
    - API_BASE_URL
    - REQUEST_TIMEOUT
    """

    API_BASE_URL: str = Field(default="http://localhost:8000")
    REQUEST_TIMEOUT: float = Field(default=60.0)


class Settings(BaseModel):
    APP: AppSettings = Field(default_factory=AppSettings)
    DATABASE: PgDbSettings = Field(default_factory=PgDbSettings)
    GEMINI: GeminiSettings = Field(default_factory=GeminiSettings)
    UI: UiSettings = Field(default_factory=UiSettings)


@lru_cache
def get_settings() -> Settings:
    return Settings()


SETTINGS = get_settings()
