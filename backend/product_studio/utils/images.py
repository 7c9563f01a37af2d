from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass

DEFAULT_MIME_TYPE = "image/png"


class ImageDataError(ValueError):
  """Raised when an uploaded image is not valid base64 / data-URI content."""


@dataclass(frozen=True, slots=True)
class InlineImage:
  data: bytes
  mime_type: str


def parse_data_uri(value: str) -> InlineImage:
  """Decode ``data:<mime>;base64,<payload>`` (or a bare base64 payload) into bytes.

  The MIME type is taken from the prefix when present and defaults to PNG.
  """
  if not value or not value.strip():
    raise ImageDataError("Image data is empty")

  mime_type = DEFAULT_MIME_TYPE
  payload = value.strip()

  if payload.startswith("data:"):
    header, sep, payload = payload.partition(",")
    if not sep:
      raise ImageDataError("Data URI is missing its payload")
    declared = header[len("data:"):].split(";", 1)[0].strip()
    if declared:
      mime_type = declared

  if not mime_type.startswith("image/"):
    raise ImageDataError(f"Unsupported MIME type: {mime_type}")

  try:
    data = base64.b64decode(payload, validate=True)
  except (binascii.Error, ValueError) as error:
    raise ImageDataError("Image data is not valid base64") from error

  if not data:
    raise ImageDataError("Image data is empty")

  return InlineImage(data=data, mime_type=mime_type)


def to_data_uri(data: bytes | str, mime_type: str = DEFAULT_MIME_TYPE) -> str:
  if isinstance(data, bytes):
    data = base64.b64encode(data).decode("ascii")
  return f"data:{mime_type};base64,{data}"
