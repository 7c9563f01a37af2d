from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CameraAngle(str, Enum):
  FRONT = "Front View"
  SIDE = "Side View"
  TOP_DOWN = "Top-Down / Flat Lay"
  EYE_LEVEL = "Eye Level"
  LOW_ANGLE = "Low Angle / Hero View"
  DIAGONAL = "45-Degree Angle"


class LightingType(str, Enum):
  SOFT_STUDIO = "Soft Studio Lighting"
  CINEMATIC = "Cinematic & Moody"
  DRAMATIC = "Dramatic Shadows"
  NATURAL_SUNLIGHT = "Natural Sunlight"
  NEON = "Cyberpunk Neon"
  LUXURY = "Golden Hour Luxury"


class MockupEnvironment(str, Enum):
  SUPERMARKET = "Supermarket Shelf"
  CAFE = "Cafe Table"
  BILLBOARD = "Outdoor Billboard"
  NATURE = "Natural Landscape"
  SUNSET = "Beach Sunset"


class ManipulationEffect(str, Enum):
  SMART_MASKING = "Smart Masking"
  PERSPECTIVE_MATCH = "Perspective Match"
  FOG_PARTICLES = "Fog & Particles"
  LIQUID_SPLASH = "Liquid Splash"


class ProductRetouch(str, Enum):
  CLEAN_UP = "Clean-Up"
  EDGE_REFINEMENT = "Edge Refinement"
  POLISH = "Plastic/Metal Polish"
  COLOR_MASTERING = "Color Mastering"


class PeopleRetouch(str, Enum):
  NATURAL_SKIN = "Natural Skin"
  EYE_ENHANCEMENT = "Eye Enhancement"
  HAIR_CLEANUP = "Hair Cleanup"


class AspectRatio(str, Enum):
  SQUARE = "1:1"
  LANDSCAPE = "16:9"
  PORTRAIT = "9:16"


# Menu values the browser sends for "no selection" in an optional category.
_ABSENT_MARKERS = {"", "none"}


class GenerationSettings(BaseModel):
  """Every option the user picked for one generation.

  Optional categories are ``None`` when nothing is selected; the prompt
  compiler skips their clause entirely.
  """

  model_config = ConfigDict(frozen=True)

  angle: CameraAngle = CameraAngle.FRONT
  lighting: LightingType = LightingType.SOFT_STUDIO
  mockup: Optional[MockupEnvironment] = None
  manipulation: Optional[ManipulationEffect] = None
  product_retouch: Optional[ProductRetouch] = None
  people_retouch: Optional[PeopleRetouch] = None
  aspect_ratio: AspectRatio = AspectRatio.SQUARE
  transparent_background: bool = False
  direction: str = ""

  @field_validator("mockup", "manipulation", "product_retouch", "people_retouch", mode="before")
  @classmethod
  def _absent_marker_to_none(cls, value: Any) -> Any:
    if isinstance(value, str) and value.strip().lower() in _ABSENT_MARKERS:
      return None
    return value

  @field_validator("direction", mode="before")
  @classmethod
  def _direction_default(cls, value: Any) -> str:
    return value or ""


class GeneratedAsset(BaseModel):
  model_config = ConfigDict(frozen=True)

  id: str
  image_data: str
  created_at: datetime


class DirectionSuggestion(BaseModel):
  title: str
  prompt: str


class PromptPreviewRequest(BaseModel):
  settings: GenerationSettings = Field(default_factory=GenerationSettings)
  has_reference: bool = False


class PromptPreviewResponse(BaseModel):
  prompt: str


class GenerateRequest(BaseModel):
  image: str = Field(..., min_length=1)
  reference_image: Optional[str] = None
  settings: GenerationSettings = Field(default_factory=GenerationSettings)


class GenerateResponse(BaseModel):
  status: Literal["success", "error"]
  asset: Optional[GeneratedAsset] = None
  prompt: Optional[str] = None
  processing_time_seconds: Optional[float] = None
  message: Optional[str] = None


class SuggestionsRequest(BaseModel):
  image: str = Field(..., min_length=1)
  reference_image: Optional[str] = None


class SuggestionsResponse(BaseModel):
  suggestions: list[DirectionSuggestion]


class HistoryResponse(BaseModel):
  items: list[GeneratedAsset]


class OptionItem(BaseModel):
  value: Optional[str]
  label: str


class HealthResponse(BaseModel):
  status: Literal["ok"]
  configured: bool
  model: str
