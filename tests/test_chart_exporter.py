# tests/test_chart_exporter.py

"""Tests for the Plotly chart exporter."""

import unittest
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, patch

import pytest

from egg_game.models.price_event import PriceAction, PriceEvent
from egg_game.services.price_predictor import PricePrediction
from egg_game.storage import chart_exporter
from egg_game.storage.chart_exporter import (
    build_session_chart,
    export_session_chart,
)

_T0 = datetime(2026, 1, 1, 12, 0, 0)


def _sample_history() -> list[PriceEvent]:
    """A start, two updates and a purchase with its marked-up quote."""
    return [
        PriceEvent(_T0, 10.0, PriceAction.START),
        PriceEvent(_T0 + timedelta(seconds=5), 11.5, PriceAction.UPDATE),
        PriceEvent(_T0 + timedelta(seconds=10), 9.25, PriceAction.UPDATE),
        PriceEvent(_T0 + timedelta(seconds=12), 9.25, PriceAction.PURCHASE),
        PriceEvent(_T0 + timedelta(seconds=13), 11.25, PriceAction.UPDATE),
    ]


def _sample_prediction() -> PricePrediction:
    return PricePrediction(
        timestamp=_T0 + timedelta(seconds=14),
        centre=10.0,
        samples=(9.0, 10.0, 11.0, 18.0),
    )


class TestBuildSessionChart(unittest.TestCase):
    """Figure contents."""

    def test_history_trace_colours_by_action(self) -> None:
        fig: Any = build_session_chart(_sample_history())
        trace = fig.data[0]
        self.assertEqual(
            list(trace.marker.color),
            ["black", "steelblue", "steelblue", "red", "steelblue"],
        )
        self.assertEqual(trace.mode, "lines+markers")

    def test_purchase_gets_buy_annotation(self) -> None:
        fig: Any = build_session_chart(_sample_history())
        buys = [a for a in fig.layout.annotations if a.text == "Buy"]
        self.assertEqual(len(buys), 1)
        self.assertEqual(buys[0].y, 9.25)

    def test_y_range_has_headroom(self) -> None:
        fig: Any = build_session_chart(_sample_history())
        self.assertEqual(list(fig.layout.yaxis.range), [0, 11.5 + 5])

    def test_prediction_rug_panel(self) -> None:
        fig: Any = build_session_chart(
            _sample_history(), _sample_prediction()
        )
        self.assertEqual(len(fig.data), 2)
        rug = fig.data[1]
        self.assertEqual(list(rug.y), [9.0, 10.0, 11.0, 18.0])
        self.assertEqual(len(set(rug.x)), 1)
        # The outlying sample raises the shared ceiling
        self.assertEqual(list(fig.layout.yaxis.range), [0, 23.0])

    def test_empty_history_rejected(self) -> None:
        with self.assertRaises(ValueError):
            build_session_chart([])


class TestExportSessionChart(unittest.TestCase):
    """HTML export to the charts directory."""

    @pytest.fixture(autouse=True)
    def _charts_dir(self, isolated_exports: Path) -> None:
        self.charts_dir = isolated_exports / "charts"

    def test_generates_html_file(self) -> None:
        path = export_session_chart(
            _sample_history(), _sample_prediction(), open_browser=False
        )
        assert path is not None
        self.assertTrue(path.exists())
        self.assertEqual(path.parent, self.charts_dir)
        self.assertEqual(path.suffix, ".html")
        self.assertIn("plotly", path.read_text(encoding="utf-8").lower())

    def test_opens_browser_when_requested(self) -> None:
        with patch.object(chart_exporter, "webbrowser") as mock_wb:
            path = export_session_chart(_sample_history())
        assert path is not None
        mock_wb.open.assert_called_once_with(path.as_uri())

    def test_empty_history_returns_none(self) -> None:
        mock_wb = MagicMock()
        with patch.object(chart_exporter, "webbrowser", mock_wb):
            self.assertIsNone(export_session_chart([]))
        mock_wb.open.assert_not_called()


if __name__ == "__main__":
    unittest.main()
