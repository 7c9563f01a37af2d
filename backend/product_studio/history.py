from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

from .models import GeneratedAsset

logger = logging.getLogger(__name__)


class AssetNotFoundError(KeyError):
  """Raised when a history lookup references an unknown asset id."""


class AssetHistory:
  """In-memory, most-recent-first list of generated assets.

  Assets are never mutated once recorded; the only way to drop them is
  ``clear()`` or process exit.
  """

  def __init__(self) -> None:
    self._items: list[GeneratedAsset] = []

  def add(self, image_data: str) -> GeneratedAsset:
    asset = GeneratedAsset(
      id=uuid.uuid4().hex,
      image_data=image_data,
      created_at=datetime.now(timezone.utc),
    )
    self._items.insert(0, asset)
    logger.info("Recorded asset %s (history size: %s)", asset.id, len(self._items))
    return asset

  def entries(self) -> list[GeneratedAsset]:
    return list(self._items)

  def get(self, asset_id: str) -> GeneratedAsset:
    for asset in self._items:
      if asset.id == asset_id:
        return asset
    raise AssetNotFoundError(asset_id)

  def clear(self) -> int:
    count = len(self._items)
    self._items.clear()
    logger.info("Cleared %s assets from history", count)
    return count

  def __len__(self) -> int:
    return len(self._items)
