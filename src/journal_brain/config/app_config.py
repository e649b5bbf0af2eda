# main app settings/configs
import os
from pathlib import Path
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from journal_brain.config.settings_mixins import (
    GoogleGenAISettingsMixin,
    MainDBSettingsMixin,
    AgentSettingsMixin,
    RetrievalSettingsMixin,
)
from journal_brain.common.logging.logger import logger
from functools import lru_cache

# which .env.{APP_ENV} file to read, defaults to dev
APP_ENV = os.getenv("APP_ENV", "dev")

# settings live at the project root, three levels up from src/journal_brain/config/
SERVICE_ROOT = Path(__file__).resolve().parents[3]
env_file_path = SERVICE_ROOT / f".env.{APP_ENV}"
logger.info(f"APP_ENV: {APP_ENV} (env file: {env_file_path.name}, exists: {env_file_path.exists()})")

class DefaultSettings(BaseSettings):
    """
    Baseline settings, passed in last so every mixin can override them.
    """
    model_config = SettingsConfigDict(env_file_encoding="utf-8", extra="ignore")

    APP_ENV: str = APP_ENV

class ServiceSettings(
    MainDBSettingsMixin,
    GoogleGenAISettingsMixin,
    AgentSettingsMixin,
    RetrievalSettingsMixin,
    DefaultSettings # passed in last to set low priority
):
    """
    The main service settings, composed from per-collaborator mixins.
    """

    # FastAPI docs, only enabled in dev
    INCLUDE_DOCS: bool = False

    # origins allowed to call the API (the presentation layer), JSON list in the env file
    CORS_ALLOW_ORIGINS: list[str] = Field(default_factory=lambda: ["*"])

    model_config = SettingsConfigDict(
        env_file=env_file_path, env_file_encoding="utf-8", extra="ignore"
    )

    @field_validator("CORS_ALLOW_ORIGINS")
    @classmethod
    def _non_empty_origins(cls, origins: list[str]) -> list[str]:
        cleaned = [origin.strip() for origin in origins if origin.strip()]
        if not cleaned:
            raise ValueError("CORS_ALLOW_ORIGINS needs at least one origin")
        return cleaned

# cached so settings are read once and available outside request scope
@lru_cache()
def get_service_settings() -> ServiceSettings:
    return ServiceSettings() # type: ignore
