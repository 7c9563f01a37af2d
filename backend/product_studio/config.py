from typing import Any

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
  """Raised when the service is missing required configuration (e.g. the API key)."""


class Settings(BaseSettings):
  model_config = SettingsConfigDict(
    env_file=".env",
    env_file_encoding="utf-8",
    extra="ignore",
    populate_by_name=True,
  )

  gemini_api_key: str = Field("", validation_alias=AliasChoices("GEMINI_API_KEY", "API_KEY"))
  image_model: str = Field("gemini-2.5-flash-image", alias="GEMINI_IMAGE_MODEL")
  text_model: str = Field("gemini-2.5-flash", alias="GEMINI_TEXT_MODEL")
  backend_port: int = Field(8000, alias="BACKEND_PORT")
  log_level: str = Field("INFO", alias="LOG_LEVEL")
  cors_origins: list[str] = Field(["*"], alias="CORS_ORIGINS")

  @field_validator("gemini_api_key", mode="before")
  @classmethod
  def _strip_key(cls, value: Any) -> str:
    return (value or "").strip()

  @field_validator("log_level", mode="before")
  @classmethod
  def _upper_level(cls, value: Any) -> str:
    return str(value).upper()

  @property
  def has_api_key(self) -> bool:
    return bool(self.gemini_api_key)

  def require_api_key(self) -> str:
    if not self.gemini_api_key:
      raise ConfigurationError("API key is missing. Set GEMINI_API_KEY in the environment.")
    return self.gemini_api_key


settings = Settings()
