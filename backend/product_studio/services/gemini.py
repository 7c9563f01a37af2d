from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any

from google import genai
from google.genai import types
from pydantic import ValidationError

from ..config import ConfigurationError
from ..models import AspectRatio, DirectionSuggestion, GenerationSettings
from ..utils.images import parse_data_uri, to_data_uri
from .prompt_compiler import compile_prompt

logger = logging.getLogger(__name__)

OUTPUT_MIME_TYPE = "image/png"

# Closed mapping; a missing member is a programming error, not a runtime fallback.
ASPECT_RATIOS: dict[AspectRatio, str] = {
  AspectRatio.SQUARE: "1:1",
  AspectRatio.LANDSCAPE: "16:9",
  AspectRatio.PORTRAIT: "9:16",
}


class GeminiServiceError(Exception):
  """Raised when a Gemini reply cannot be interpreted."""

  def __init__(self, message: str, original_error: Exception | None = None):
    super().__init__(message)
    self.original_error = original_error


def is_quota_error(error: Exception) -> tuple[bool, float | None]:
  """Check if error is a quota/rate limit error and extract retry delay."""
  if getattr(error, "code", None) == 429:
    is_quota = True
  else:
    error_text = f"{error} {error!r}".lower()
    is_quota = (
      "429" in error_text or
      "quota" in error_text or
      "resource_exhausted" in error_text or
      "rate limit" in error_text
    )

  if not is_quota:
    return False, None

  # e.g. "Please retry in 19.907498206s" or "retryDelay": "19s"
  retry_patterns = [
    r"retry in ([\d.]+)s",
    r"retrydelay['\"]?\s*:\s*['\"]?(\d+)s",
  ]
  full_error_text = f"{error} {error!r}"
  for pattern in retry_patterns:
    match = re.search(pattern, full_error_text, re.IGNORECASE)
    if match:
      try:
        return True, float(match.group(1))
      except ValueError:
        continue

  return True, None


@dataclass
class GeminiService:
  api_key: str
  image_model: str = "gemini-2.5-flash-image"
  text_model: str = "gemini-2.5-flash"
  client: genai.Client | None = None

  def _require_client(self) -> genai.Client:
    if not self.api_key:
      raise ConfigurationError("API key is missing. Set GEMINI_API_KEY in the environment.")
    if self.client is None:
      self.client = genai.Client(api_key=self.api_key)
    return self.client

  async def generate(
    self,
    source_image: str,
    settings: GenerationSettings,
    *,
    reference_image: str | None = None,
    prompt: str | None = None,
  ) -> str | None:
    """Render one product shot for ``settings``.

    Args:
      source_image: Product image as a data URI (or bare base64).
      settings: Selected generation options.
      reference_image: Optional style reference, sent as a second image part.
      prompt: Already-compiled prompt text; compiled from ``settings`` when omitted.

    Returns:
      The first generated image as a PNG data URI, or ``None`` when the model
      answered without any image part.
    """
    client = self._require_client()

    if prompt is None:
      prompt = compile_prompt(settings, has_reference=bool(reference_image))
    parts = [_image_part(source_image)]
    if reference_image:
      parts.append(_image_part(reference_image))
    parts.append(types.Part(text=prompt))

    aspect_ratio = ASPECT_RATIOS[settings.aspect_ratio]
    config = types.GenerateContentConfig(
      image_config=types.ImageConfig(aspect_ratio=aspect_ratio),
    )

    logger.info(
      "Calling Gemini for product shot with model: %s (aspect ratio %s, %s image parts)",
      self.image_model,
      aspect_ratio,
      len(parts) - 1,
    )
    try:
      response = await client.aio.models.generate_content(
        model=self.image_model,
        contents=types.Content(parts=parts),
        config=config,
      )
    except Exception as error:
      logger.error(f"Gemini generation error: {error}", exc_info=True)
      raise

    image_data = _first_inline_image(response)
    if image_data is None:
      logger.warning("Gemini response contained no image part")
      return None

    logger.info(f"Product shot received, {len(image_data)} bytes")
    return to_data_uri(image_data, OUTPUT_MIME_TYPE)

  async def suggest_directions(
    self,
    source_image: str,
    *,
    reference_image: str | None = None,
    count: int = 3,
  ) -> list[DirectionSuggestion]:
    """Ask the text model for short custom-direction ideas for this product."""
    client = self._require_client()

    prompt = (
      "You are an art director for commercial product photography. "
      "The first image is the product"
      + (", the second image is a style reference. " if reference_image else ". ")
      + f"Propose {count} distinct creative directions for a product photo shoot. "
      "Return STRICT JSON only (no markdown): an array of objects with keys "
      "'title' (2-4 words) and 'prompt' (one sentence describing scene, props and mood)."
    )

    parts = [_image_part(source_image)]
    if reference_image:
      parts.append(_image_part(reference_image))
    parts.append(types.Part(text=prompt))

    try:
      response = await client.aio.models.generate_content(
        model=self.text_model,
        contents=types.Content(parts=parts),
        config=types.GenerateContentConfig(response_mime_type="application/json"),
      )
    except Exception as error:
      logger.error(f"Gemini suggestion error: {error}", exc_info=True)
      raise

    text = (response.text or "").strip()
    if not text:
      raise GeminiServiceError("Gemini returned an empty suggestion list")

    return _parse_suggestions(text)[:count]


def _image_part(image: str) -> types.Part:
  inline = parse_data_uri(image)
  return types.Part(
    inline_data=types.Blob(
      data=inline.data,
      mime_type=inline.mime_type,
    )
  )


def _first_inline_image(response: Any) -> bytes | str | None:
  candidates = getattr(response, "candidates", None) or []
  if not candidates:
    return None

  content = getattr(candidates[0], "content", None)
  for part in getattr(content, "parts", None) or []:
    # Empty payloads cannot form a usable data URI.
    inline_data = getattr(part, "inline_data", None)
    if inline_data is not None and inline_data.data:
      return inline_data.data
  return None


def _strip_code_fences(text: str) -> str:
  s = text.strip()
  if s.startswith("```"):
    first_nl = s.find("\n")
    if first_nl != -1:
      s = s[first_nl + 1:]
    if s.rstrip().endswith("```"):
      s = s.rstrip()[:-3]
  return s.strip()


def _parse_suggestions(text: str) -> list[DirectionSuggestion]:
  try:
    payload = json.loads(_strip_code_fences(text))
  except json.JSONDecodeError as error:
    raise GeminiServiceError(f"Unable to parse suggestions from Gemini response: {text}", error) from error

  if isinstance(payload, dict):
    payload = payload.get("suggestions", [])
  if not isinstance(payload, list):
    raise GeminiServiceError(f"Unexpected suggestion payload from Gemini: {text}")

  try:
    return [DirectionSuggestion.model_validate(item) for item in payload]
  except ValidationError as error:
    raise GeminiServiceError(f"Malformed suggestion in Gemini response: {text}", error) from error
