from __future__ import annotations

from ..models import GenerationSettings

PREAMBLE = "Professional commercial product photography."

TRANSPARENT_BACKGROUND_CLAUSE = (
  "Background: Place the product on a perfectly clean, solid white background "
  "for easy cutout (mimic transparent PNG style)."
)

STYLE_REFERENCE_CLAUSE = (
  "Style Reference: Match the lighting, color palette and mood of the second image "
  "while keeping the product from the first image unchanged."
)

CLOSING_CLAUSE = (
  "Maintain the original product's key identifiers and shape perfectly. "
  "High-end retouching, 8k resolution, photorealistic."
)


def compile_prompt(settings: GenerationSettings, *, has_reference: bool = False) -> str:
  lines = [
    PREAMBLE,
    f"Camera Angle: {settings.angle.value}.",
    f"Lighting: {settings.lighting.value}.",
    f"Aspect Ratio: {settings.aspect_ratio.value}.",
  ]

  if settings.mockup is not None:
    lines.append(f"Environment: Place the product in a {settings.mockup.value} setting.")
  if settings.manipulation is not None:
    lines.append(f"Special Effects: Apply {settings.manipulation.value} effects to the scene.")
  if settings.product_retouch is not None:
    lines.append(
      f"Product Refinement: Apply {settings.product_retouch.value} to the main product "
      "for a premium look."
    )
  if settings.people_retouch is not None:
    lines.append(
      f"People Enhancement: If any people are present, apply {settings.people_retouch.value}."
    )

  # Transparency wins over free-text direction.
  if settings.transparent_background:
    lines.append(TRANSPARENT_BACKGROUND_CLAUSE)
  elif settings.direction:
    lines.append(f"Custom Instructions: {settings.direction}")

  if has_reference:
    lines.append(STYLE_REFERENCE_CLAUSE)

  lines.append(CLOSING_CLAUSE)
  return "\n".join(lines)
