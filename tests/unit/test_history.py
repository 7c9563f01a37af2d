"""Tests for product_studio.history — in-memory asset history."""

from __future__ import annotations

import pytest

from product_studio.history import AssetHistory, AssetNotFoundError


class TestAssetHistory:
  def test_starts_empty(self, history: AssetHistory):
    assert len(history) == 0
    assert history.entries() == []

  def test_add_returns_new_asset(self, history: AssetHistory, generated_data_uri):
    asset = history.add(generated_data_uri)
    assert asset.image_data == generated_data_uri
    assert asset.id
    assert asset.created_at.tzinfo is not None
    assert len(history) == 1

  def test_ids_are_unique(self, history: AssetHistory, generated_data_uri):
    first = history.add(generated_data_uri)
    second = history.add(generated_data_uri)
    assert first.id != second.id

  def test_most_recent_first(self, history: AssetHistory):
    first = history.add("data:image/png;base64,AQ==")
    second = history.add("data:image/png;base64,Ag==")
    third = history.add("data:image/png;base64,Aw==")
    assert [a.id for a in history.entries()] == [third.id, second.id, first.id]

  def test_entries_is_a_snapshot(self, history: AssetHistory):
    history.add("data:image/png;base64,AQ==")
    snapshot = history.entries()
    history.add("data:image/png;base64,Ag==")
    assert len(snapshot) == 1

  def test_get_returns_same_object(self, history: AssetHistory):
    asset = history.add("data:image/png;base64,AQ==")
    assert history.get(asset.id) is asset

  def test_get_unknown_raises(self, history: AssetHistory):
    with pytest.raises(AssetNotFoundError):
      history.get("missing")

  def test_clear(self, history: AssetHistory):
    history.add("data:image/png;base64,AQ==")
    history.add("data:image/png;base64,Ag==")
    assert history.clear() == 2
    assert history.entries() == []
    assert history.clear() == 0
