"""Tests for folio.config — PagesConfig defaults and derived values."""

import dataclasses
from pathlib import Path

import pytest

from folio.config import PagesConfig


class TestPagesConfig:
    def test_defaults(self) -> None:
        config = PagesConfig()
        assert config.pages_root == "pages"
        assert config.markdown_extensions == (".md",)
        assert config.debug is False
        assert config.autoescape is True
        assert config.log_level == "info"

    def test_frozen(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            PagesConfig().debug = True  # type: ignore[misc]

    def test_root_resolved(self, tmp_path: Path) -> None:
        assert PagesConfig(pages_root=str(tmp_path / "a" / ".." / "b")).root == (tmp_path / "b").resolve()


class TestAssetCacheBust:
    def test_follows_debug_by_default(self) -> None:
        assert PagesConfig().cache_bust_assets is False
        assert PagesConfig(debug=True).cache_bust_assets is True

    def test_explicit_setting_wins(self) -> None:
        assert PagesConfig(debug=True, asset_cache_bust=False).cache_bust_assets is False
        assert PagesConfig(asset_cache_bust=True).cache_bust_assets is True
