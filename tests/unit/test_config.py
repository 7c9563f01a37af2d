"""Tests for product_studio.config — environment-driven settings."""

from __future__ import annotations

import pytest

from product_studio.config import ConfigurationError, Settings


@pytest.fixture
def clean_env(monkeypatch):
  for name in ("GEMINI_API_KEY", "API_KEY", "GEMINI_IMAGE_MODEL", "GEMINI_TEXT_MODEL", "LOG_LEVEL"):
    monkeypatch.delenv(name, raising=False)
  return monkeypatch


class TestSettingsDefaults:
  def test_defaults(self, clean_env):
    cfg = Settings(_env_file=None)
    assert cfg.gemini_api_key == ""
    assert cfg.image_model == "gemini-2.5-flash-image"
    assert cfg.text_model == "gemini-2.5-flash"
    assert cfg.backend_port == 8000
    assert cfg.log_level == "INFO"
    assert cfg.cors_origins == ["*"]

  def test_missing_key_is_detectable(self, clean_env):
    cfg = Settings(_env_file=None)
    assert cfg.has_api_key is False
    with pytest.raises(ConfigurationError):
      cfg.require_api_key()


class TestSettingsEnvironment:
  def test_gemini_api_key_from_env(self, clean_env):
    clean_env.setenv("GEMINI_API_KEY", "secret")
    cfg = Settings(_env_file=None)
    assert cfg.has_api_key is True
    assert cfg.require_api_key() == "secret"

  def test_api_key_alias(self, clean_env):
    clean_env.setenv("API_KEY", "legacy-secret")
    assert Settings(_env_file=None).gemini_api_key == "legacy-secret"

  def test_blank_key_counts_as_missing(self, clean_env):
    clean_env.setenv("GEMINI_API_KEY", "   ")
    assert Settings(_env_file=None).has_api_key is False

  def test_model_override(self, clean_env):
    clean_env.setenv("GEMINI_IMAGE_MODEL", "gemini-3-pro-image-preview")
    assert Settings(_env_file=None).image_model == "gemini-3-pro-image-preview"

  def test_log_level_normalised(self, clean_env):
    clean_env.setenv("LOG_LEVEL", "debug")
    assert Settings(_env_file=None).log_level == "DEBUG"

  def test_init_arguments_by_field_name(self, clean_env):
    cfg = Settings(_env_file=None, gemini_api_key=" key ", image_model="m")
    assert cfg.gemini_api_key == "key"
    assert cfg.image_model == "m"
