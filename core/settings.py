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
    JSON_LOGS: bool = Field(default=False)


class DbSettings(CustomSettings):
    """Relational store settings.

    Either set DATABASE_URL directly (e.g. ``sqlite+aiosqlite:///rl_chat.db``)
    or provide the POSTGRES_* parts and let the validator assemble it.
    """

    POSTGRES_ENGINE: str = Field(default="postgresql+asyncpg")
    POSTGRES_USER: str = Field(default="postgres")
    POSTGRES_PASSWORD: SecretStr = Field(default="postgres")
    POSTGRES_DB: str = Field(default="rl_chat")
    POSTGRES_HOST: str = Field(default="localhost")
    POSTGRES_PORT: int = Field(default=5432)
    DATABASE_URL: str = Field(default="")

    @model_validator(mode="before")
    def validate_postgres_dsn(cls, data: dict):
        if isinstance(data, dict) and not data.get("DATABASE_URL"):
            _built_uri = PostgresDsn.build(
                scheme=data.get("POSTGRES_ENGINE", "postgresql+asyncpg"),
                username=data.get("POSTGRES_USER", "postgres"),
                password=data.get("POSTGRES_PASSWORD", "postgres"),
                host=data.get("POSTGRES_HOST", "localhost"),
                port=int(data.get("POSTGRES_PORT", 5432)),
                path=data.get("POSTGRES_DB", "rl_chat"),
            ).unicode_string()
            data["DATABASE_URL"] = _built_uri
        return data


class OpenAISettings(CustomSettings):
    OPENAI_API_KEY: SecretStr = Field(default="")
    OPENAI_MODEL: str = Field(default="gpt-4o-mini")
    OPENAI_TEMPERATURE: float = Field(default=0.7)


class ExampleSettings(CustomSettings):
    """Few-shot example selection.

    Env vars:
    - EXAMPLES_LIMIT
    """

    EXAMPLES_LIMIT: int = Field(default=5, ge=0)


class UiSettings(CustomSettings):
    """Configuration for the Streamlit UI to reach API endpoints."""

    API_BASE_URL: str = Field(default="http://localhost:8000")
    ENDPOINT_STATS: str = Field(default="/api/stats")
    ENDPOINT_MESSAGES: str = Field(default="/api/messages")
    ENDPOINT_FEEDBACK: str = Field(default="/api/feedback")
    ENDPOINT_EXAMPLES: str = Field(default="/api/best-examples")
    ENDPOINT_GENERATE: str = Field(default="/api/generate")


class Settings(BaseModel):
    APP: AppSettings = Field(default_factory=AppSettings)
    DATABASE: DbSettings = Field(default_factory=DbSettings)
    OPENAI: OpenAISettings = Field(default_factory=OpenAISettings)
    EXAMPLES: ExampleSettings = Field(default_factory=ExampleSettings)
    UI: UiSettings = Field(default_factory=UiSettings)


@lru_cache
def get_settings() -> Settings:
    return Settings()


SETTINGS = get_settings()
