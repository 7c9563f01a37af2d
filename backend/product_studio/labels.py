"""Display labels for the option menus, keyed by enum member.

The prompt compiler always uses the English enum values; these tables exist
only for the browser UI.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from .models import (
  AspectRatio,
  CameraAngle,
  LightingType,
  ManipulationEffect,
  MockupEnvironment,
  OptionItem,
  PeopleRetouch,
  ProductRetouch,
)

SUPPORTED_LOCALES = ("en", "ar")

# category name -> (enum type, whether "nothing selected" is allowed)
CATEGORIES: dict[str, tuple[type[Enum], bool]] = {
  "angle": (CameraAngle, False),
  "lighting": (LightingType, False),
  "mockup": (MockupEnvironment, True),
  "manipulation": (ManipulationEffect, True),
  "product_retouch": (ProductRetouch, True),
  "people_retouch": (PeopleRetouch, True),
  "aspect_ratio": (AspectRatio, False),
}

NONE_LABELS = {"en": "None", "ar": "بدون"}

ARABIC_LABELS: dict[Enum, str] = {
  CameraAngle.FRONT: "منظر أمامي",
  CameraAngle.SIDE: "منظر جانبي",
  CameraAngle.TOP_DOWN: "منظر علوي / مسطح",
  CameraAngle.EYE_LEVEL: "مستوى العين",
  CameraAngle.LOW_ANGLE: "زاوية منخفضة / بطولية",
  CameraAngle.DIAGONAL: "زاوية 45 درجة",
  LightingType.SOFT_STUDIO: "إضاءة استوديو ناعمة",
  LightingType.CINEMATIC: "سينمائي ومزاجي",
  LightingType.DRAMATIC: "ظلال درامية",
  LightingType.NATURAL_SUNLIGHT: "ضوء الشمس الطبيعي",
  LightingType.NEON: "نيون سايبربانك",
  LightingType.LUXURY: "فخامة الساعة الذهبية",
  MockupEnvironment.SUPERMARKET: "رف سوبرماركت",
  MockupEnvironment.CAFE: "طاولة مقهى",
  MockupEnvironment.BILLBOARD: "لوحة إعلانية خارجية",
  MockupEnvironment.NATURE: "منظر طبيعي",
  MockupEnvironment.SUNSET: "غروب على الشاطئ",
  ManipulationEffect.SMART_MASKING: "إخفاء ذكي",
  ManipulationEffect.PERSPECTIVE_MATCH: "مطابقة المنظور",
  ManipulationEffect.FOG_PARTICLES: "ضباب وجزيئات",
  ManipulationEffect.LIQUID_SPLASH: "رذاذ سائل",
  ProductRetouch.CLEAN_UP: "تنظيف",
  ProductRetouch.EDGE_REFINEMENT: "تحسين الحواف",
  ProductRetouch.POLISH: "تلميع البلاستيك/المعدن",
  ProductRetouch.COLOR_MASTERING: "ضبط الألوان",
  PeopleRetouch.NATURAL_SKIN: "بشرة طبيعية",
  PeopleRetouch.EYE_ENHANCEMENT: "تحسين العيون",
  PeopleRetouch.HAIR_CLEANUP: "تنظيف الشعر",
  AspectRatio.SQUARE: "مربع 1:1",
  AspectRatio.LANDSCAPE: "أفقي 16:9",
  AspectRatio.PORTRAIT: "عمودي 9:16",
}


class UnsupportedLocaleError(ValueError):
  """Raised when labels are requested for a locale without a table."""


def display_label(member: Optional[Enum], locale: str = "en") -> str:
  if locale not in SUPPORTED_LOCALES:
    raise UnsupportedLocaleError(locale)
  if member is None:
    return NONE_LABELS[locale]
  if locale == "ar":
    return ARABIC_LABELS[member]
  return str(member.value)


def option_catalog(locale: str = "en") -> dict[str, list[OptionItem]]:
  """Menu entries for every category; optional categories start with a ``None`` entry."""
  if locale not in SUPPORTED_LOCALES:
    raise UnsupportedLocaleError(locale)

  catalog: dict[str, list[OptionItem]] = {}
  for name, (enum_type, optional) in CATEGORIES.items():
    entries: list[OptionItem] = []
    if optional:
      entries.append(OptionItem(value=None, label=display_label(None, locale)))
    for member in enum_type:
      entries.append(OptionItem(value=member.value, label=display_label(member, locale)))
    catalog[name] = entries
  return catalog
