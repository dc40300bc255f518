"""Application settings powered by Pydantic BaseSettings."""

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from gemini_samples.llm.errors import ConfigError
from gemini_samples.llm.gemini_client import DEFAULT_BASE_URL, DEFAULT_TIMEOUT
from gemini_samples.llm.prompts import DEFAULT_MODEL


class AppSettings(BaseSettings):
    """Centralized environment configuration."""

    model_config = SettingsConfigDict(
        env_prefix="", case_sensitive=False, env_file=".env", env_file_encoding="utf-8"
    )

    gemini_api_key: str | None = Field(default=None, validation_alias="GEMINI_API_KEY")
    gemini_model: str = Field(default=DEFAULT_MODEL, validation_alias="GEMINI_MODEL")
    gemini_base_url: str = Field(
        default=DEFAULT_BASE_URL, validation_alias="GEMINI_BASE_URL"
    )
    gemini_timeout_seconds: float = Field(
        default=DEFAULT_TIMEOUT, gt=0, validation_alias="GEMINI_TIMEOUT_SECONDS"
    )


def get_settings() -> AppSettings:
    """Get a settings instance.

    Raises:
        ConfigError: If an environment value fails validation.
    """
    try:
        return AppSettings()
    except ValidationError as exc:
        fields = ", ".join(
            str(err["loc"][0]) for err in exc.errors() if err.get("loc")
        )
        msg = f"Invalid configuration: {fields or exc}"
        raise ConfigError(msg) from exc
