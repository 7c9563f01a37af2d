"""Shared pytest fixtures for Product Studio tests."""

from __future__ import annotations

import asyncio
import base64
from types import SimpleNamespace
from typing import Any, Generator

import pytest
from fastapi.testclient import TestClient
from google.genai import types

from product_studio.history import AssetHistory
from product_studio.services.gemini import GeminiService

PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDRproduct"
REFERENCE_BYTES = b"\xff\xd8\xff\xe0\x00\x10JFIFreference"
GENERATED_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDRgenerated"


class FakeModels:
  """Stand-in for ``client.aio.models`` that records every request."""

  def __init__(self, response: Any = None, error: Exception | None = None):
    self.response = response
    self.error = error
    self.calls: list[dict[str, Any]] = []

  async def generate_content(self, **kwargs: Any) -> Any:
    self.calls.append(kwargs)
    if self.error is not None:
      raise self.error
    return self.response


class FakeGenaiClient:
  def __init__(self, response: Any = None, error: Exception | None = None):
    self.models = FakeModels(response=response, error=error)
    self.aio = SimpleNamespace(models=self.models)


def make_response(*parts: types.Part) -> types.GenerateContentResponse:
  return types.GenerateContentResponse(
    candidates=[
      types.Candidate(content=types.Content(role="model", parts=list(parts))),
    ]
  )


def image_part(data: bytes = GENERATED_BYTES, mime_type: str = "image/png") -> types.Part:
  return types.Part(inline_data=types.Blob(data=data, mime_type=mime_type))


@pytest.fixture
def product_image() -> str:
  """Product upload as the browser sends it (PNG data URI)."""
  return "data:image/png;base64," + base64.b64encode(PNG_BYTES).decode("ascii")


@pytest.fixture
def reference_image() -> str:
  """Style reference upload (JPEG data URI)."""
  return "data:image/jpeg;base64," + base64.b64encode(REFERENCE_BYTES).decode("ascii")


@pytest.fixture
def generated_data_uri() -> str:
  return "data:image/png;base64," + base64.b64encode(GENERATED_BYTES).decode("ascii")


@pytest.fixture
def image_response() -> types.GenerateContentResponse:
  """Model reply with a text part followed by one image part."""
  return make_response(types.Part(text="Here is your product shot."), image_part())


@pytest.fixture
def text_only_response() -> types.GenerateContentResponse:
  return make_response(types.Part(text="I cannot generate that image."))


@pytest.fixture
def history() -> AssetHistory:
  return AssetHistory()


@pytest.fixture
def make_service():
  """Build a GeminiService wired to a fake client.

  Returns:
    Factory ``(response=None, error=None, api_key="test-key") -> (service, fake_client)``
  """

  def factory(response: Any = None, error: Exception | None = None, api_key: str = "test-key"):
    fake = FakeGenaiClient(response=response, error=error)
    service = GeminiService(
      api_key=api_key,
      image_model="test-image-model",
      text_model="test-text-model",
      client=fake,
    )
    return service, fake

  return factory


@pytest.fixture
def api(monkeypatch, make_service, history) -> Generator[SimpleNamespace, None, None]:
  """TestClient with the module-level Gemini service and history swapped out.

  Yields:
    Namespace with ``client``, ``history`` and ``use(response=..., error=..., api_key=...)``
    which installs a fresh fake service and returns its fake client.
  """
  from product_studio import main

  monkeypatch.setattr(main, "history", history)
  monkeypatch.setattr(main, "generation_lock", asyncio.Lock())

  def use(response: Any = None, error: Exception | None = None, api_key: str = "test-key"):
    service, fake = make_service(response=response, error=error, api_key=api_key)
    monkeypatch.setattr(main, "gemini_service", service)
    return fake

  use()
  with TestClient(main.app) as client:
    yield SimpleNamespace(client=client, history=history, use=use)


@pytest.fixture
def responses() -> SimpleNamespace:
  """Builders for Gemini responses plus the raw bytes used in fixtures."""
  return SimpleNamespace(
    make=make_response,
    image_part=image_part,
    png_bytes=PNG_BYTES,
    reference_bytes=REFERENCE_BYTES,
    generated_bytes=GENERATED_BYTES,
  )
