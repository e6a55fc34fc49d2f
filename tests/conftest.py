# tests/conftest.py

"""Shared pytest fixtures for all game tests."""

from collections.abc import Generator
from pathlib import Path
from unittest.mock import patch

import pytest

from egg_game.config.settings import Settings


@pytest.fixture(autouse=True)
def isolated_exports(tmp_path: Path) -> Generator[Path, None, None]:
    """Redirect every export (JSON, CSV, charts) into a temp directory."""
    with patch.object(Settings, "EXPORTS_DIR", tmp_path), patch(
        "egg_game.storage.chart_exporter._CHARTS_DIR", tmp_path / "charts"
    ), patch("egg_game.storage.chart_exporter.webbrowser"):
        yield tmp_path
