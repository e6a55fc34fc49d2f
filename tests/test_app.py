# tests/test_app.py

"""Smoke tests for the TUI application using Textual's Pilot."""

import random
import unittest
from pathlib import Path
from typing import Any, cast
from unittest.mock import patch

import pytest
from helpers import FixedRandom, StepClock
from textual.widgets import DataTable, ProgressBar, Sparkline, Static

from egg_game.models.game_config import GameConfig
from egg_game.services.game_loop import GameLoop
from egg_game.services.price_predictor import PricePredictor
from egg_game.ui.app import EggGameApp, GameOverScreen, health_status


def _make_app(auto_tick: bool = False, **overrides: Any) -> EggGameApp:
    """Build an app around a deterministic game loop."""
    config = GameConfig(**overrides)
    game = GameLoop(config, rng=FixedRandom(1.0), clock=StepClock())
    predictor = PricePredictor(config, random.Random(0))
    return EggGameApp(game=game, predictor=predictor, auto_tick=auto_tick)


class TestHealthStatus(unittest.TestCase):
    """Progress bar status thresholds."""

    def test_thresholds(self) -> None:
        self.assertEqual(health_status(0), "danger")
        self.assertEqual(health_status(29), "danger")
        self.assertEqual(health_status(30), "warning")
        self.assertEqual(health_status(69), "warning")
        self.assertEqual(health_status(70), "success")
        self.assertEqual(health_status(100), "success")


class TestEggGameApp(unittest.IsolatedAsyncioTestCase):
    """Smoke tests for the Textual TUI."""

    @pytest.fixture(autouse=True)
    def _exports_dir(self, isolated_exports: Path) -> None:
        self.exports_dir = isolated_exports

    async def test_app_composes_without_crash(self) -> None:
        """Verify the app starts and renders all widgets."""
        app = _make_app()
        async with app.run_test() as pilot:
            app.query_one("#buy_btn")
            app.query_one("#points_value", Static)
            app.query_one("#health_value", Static)
            app.query_one("#current_price", Static)
            app.query_one("#health_bar", ProgressBar)
            app.query_one("#price_spark", Sparkline)
            app.query_one("#prediction_spark", Sparkline)
            app.query_one("#history_table", DataTable)
            await pilot.pause()

    async def test_initial_view(self) -> None:
        """The start entry is listed and the bar shows full health."""
        app = _make_app()
        async with app.run_test() as pilot:
            await pilot.pause()
            table = cast(
                DataTable[str], app.query_one("#history_table", DataTable)
            )
            self.assertEqual(table.row_count, 1)
            bar = app.query_one("#health_bar", ProgressBar)
            self.assertEqual(bar.progress, 100)
            self.assertTrue(bar.has_class("success"))
            self.assertIsNotNone(app.prediction)

    async def test_buy_without_points_changes_nothing(self) -> None:
        app = _make_app()
        async with app.run_test(notifications=True) as pilot:
            await pilot.click("#buy_btn")
            await pilot.pause()
            self.assertEqual(app.game.player.points, 5)
            self.assertEqual(app.game.player.health, 100)
            self.assertEqual(len(app.game.history), 1)

    async def test_buy_binding_purchases_egg(self) -> None:
        app = _make_app(initial_points=50, initial_health=40)
        async with app.run_test(notifications=True) as pilot:
            await pilot.press("b")
            await pilot.pause()
            self.assertEqual(app.game.player.points, 40)
            self.assertEqual(app.game.player.health, 50)
            table = cast(
                DataTable[str], app.query_one("#history_table", DataTable)
            )
            self.assertEqual(table.row_count, 3)
            bar = app.query_one("#health_bar", ProgressBar)
            self.assertTrue(bar.has_class("warning"))

    async def test_tick_refreshes_view(self) -> None:
        app = _make_app()
        async with app.run_test() as pilot:
            app.game.tick()
            app.game.tick()
            await pilot.pause()
            table = cast(
                DataTable[str], app.query_one("#history_table", DataTable)
            )
            self.assertEqual(table.row_count, 3)
            bar = app.query_one("#health_bar", ProgressBar)
            self.assertEqual(bar.progress, 90)
            spark = app.query_one("#price_spark", Sparkline)
            self.assertEqual(len(list(spark.data or [])), 3)

    async def test_history_table_is_windowed(self) -> None:
        app = _make_app(history_window=4, health_decay_rate=0)
        async with app.run_test() as pilot:
            for _ in range(10):
                app.game.tick()
            await pilot.pause()
            table = cast(
                DataTable[str], app.query_one("#history_table", DataTable)
            )
            self.assertEqual(table.row_count, 4)

    async def test_timer_drives_ticks(self) -> None:
        app = _make_app(
            auto_tick=True, tick_interval_ms=50, health_decay_rate=0
        )
        async with app.run_test() as pilot:
            await pilot.pause(0.4)
            self.assertGreater(len(app.game.history), 1)
            self.assertGreater(app.game.player.points, 5)

    async def test_game_over_modal_and_restart(self) -> None:
        app = _make_app(health_decay_rate=100)
        async with app.run_test() as pilot:
            app.game.tick()
            await pilot.pause()
            self.assertTrue(app.game.game_over)
            self.assertIsInstance(app.screen, GameOverScreen)

            await pilot.click("#restart_btn")
            await pilot.pause()
            self.assertFalse(app.game.game_over)
            self.assertEqual(app.game.player.health, 100)
            self.assertEqual(app.game.player.points, 5)
            self.assertNotIsInstance(app.screen, GameOverScreen)

    async def test_buy_refused_while_game_over(self) -> None:
        app = _make_app(health_decay_rate=100, initial_points=100)
        async with app.run_test(notifications=True) as pilot:
            app.game.tick()
            await pilot.pause()
            app.action_buy()
            await pilot.pause()
            self.assertEqual(app.game.player.health, 0)
            self.assertEqual(app.game.player.points, 105)

    async def test_export_chart_writes_html(self) -> None:
        app = _make_app()
        async with app.run_test(notifications=True) as pilot:
            app.game.tick()
            app.action_export_chart()
            await pilot.pause()
            charts = list((self.exports_dir / "charts").glob("*.html"))
            self.assertEqual(len(charts), 1)

    async def test_export_chart_failure_is_reported(self) -> None:
        app = _make_app()
        async with app.run_test(notifications=True) as pilot:
            with patch(
                "egg_game.ui.app.export_session_chart",
                side_effect=OSError("disk full"),
            ):
                app.action_export_chart()
            await pilot.pause()

    async def test_save_and_export_history(self) -> None:
        app = _make_app()
        async with app.run_test(notifications=True) as pilot:
            app.game.tick()
            app.action_save()
            app.action_export()
            await pilot.pause()
            self.assertEqual(
                len(list(self.exports_dir.glob("history_*.json"))), 1
            )
            self.assertEqual(
                len(list(self.exports_dir.glob("history_*.csv"))), 1
            )


if __name__ == "__main__":
    unittest.main()
