# egg_game/ui/app.py

"""Terminal UI for The Game of Eggs."""

import logging
from typing import Any, cast

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, Vertical
from textual.screen import ModalScreen, Screen
from textual.timer import Timer
from textual.widgets import (
    Button,
    DataTable,
    Footer,
    Header,
    ProgressBar,
    Sparkline,
    Static,
)

from egg_game.config.settings import Settings
from egg_game.models.price_event import PriceAction
from egg_game.services.game_loop import (
    SIGNAL_GAME_OVER,
    SIGNAL_STATE_CHANGED,
    SIGNAL_TICK,
    GameLoop,
)
from egg_game.services.price_predictor import PricePrediction, PricePredictor
from egg_game.storage.chart_exporter import export_session_chart
from egg_game.storage.file_manager import FileManager

logger = logging.getLogger("egg_game.ui")

_INSTRUCTIONS = (
    "1. You earn points on every tick\n"
    "2. Your health decreases over time\n"
    "3. Buy eggs to restore health\n"
    "4. Egg prices fluctuate over time\n"
    "5. If your health reaches 0, game over!"
)

_HEALTH_CLASSES = ("danger", "warning", "success")


def health_status(health: float) -> str:
    """Map a health value to its progress bar status class."""
    if health < 30:
        return "danger"
    if health < 70:
        return "warning"
    return "success"


class GameOverScreen(ModalScreen[bool]):
    """Modal shown when health reaches zero."""

    BINDINGS = [Binding("r", "restart", "Restart")]

    def compose(self) -> ComposeResult:
        """Build the game over dialog."""
        yield Container(
            Static("Game Over!", id="game_over_title"),
            Static("Your health reached zero. Game over!"),
            Button("Restart Game", variant="primary", id="restart_btn"),
            id="game_over_dialog",
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Dismiss with a restart request."""
        if event.button.id == "restart_btn":
            self.dismiss(True)

    def action_restart(self) -> None:
        """Keyboard shortcut for the restart button."""
        self.dismiss(True)


class EggGameApp(App[object]):
    """Terminal UI for The Game of Eggs."""

    CSS_PATH = "styles.css"
    TITLE = "The Game of Eggs"

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("b", "buy", "Buy Eggs"),
        Binding("c", "export_chart", "Chart"),
        Binding("s", "save", "Save"),
        Binding("e", "export", "Export CSV"),
    ]

    def __init__(
        self,
        game: GameLoop | None = None,
        predictor: PricePredictor | None = None,
        auto_tick: bool = True,
    ) -> None:
        super().__init__()
        self.game = game or GameLoop()
        self.predictor = predictor or PricePredictor(self.game.config)
        self.prediction: PricePrediction | None = None
        self.auto_tick = auto_tick
        self.file_manager = FileManager()
        self._tick_timer: Timer | None = None

    def compose(self) -> ComposeResult:
        """Build the widget tree for the TUI."""
        yield Header()
        yield Horizontal(
            Vertical(
                Static("Game Controls", classes="card_header"),
                Button("Buy Eggs", variant="primary", id="buy_btn"),
                Static("Current Egg Price:", classes="label"),
                Static("", id="current_price"),
                Static("Game Instructions:", classes="label"),
                Static(_INSTRUCTIONS, id="instructions"),
                id="sidebar",
            ),
            Vertical(
                Horizontal(
                    Static("", id="points_value", classes="value_box"),
                    Vertical(
                        Static("", id="health_value"),
                        ProgressBar(
                            total=self.game.config.max_health,
                            show_eta=False,
                            id="health_bar",
                        ),
                        classes="value_box",
                    ),
                    id="value_boxes",
                ),
                Static("Egg Price History", classes="card_header"),
                Horizontal(
                    Sparkline([], summary_function=max, id="price_spark"),
                    Sparkline(
                        [], summary_function=max, id="prediction_spark"
                    ),
                    id="charts",
                ),
                Static("", id="prediction_summary"),
                cast(
                    DataTable[str | Text],
                    DataTable(
                        id="history_table",
                        zebra_stripes=True,
                        cursor_type="row",
                    ),
                ),
                id="main_panel",
            ),
            id="main_container",
        )
        yield Footer()

    def on_mount(self) -> None:
        """Wire game signals, start the tick timer and draw state."""
        table = cast(
            DataTable[str | Text],
            self._main.query_one("#history_table", DataTable),
        )
        table.add_columns("Time", "Price", "Action")

        self.game.subscribe(SIGNAL_STATE_CHANGED, self._on_state_changed)
        self.game.subscribe(SIGNAL_TICK, self._on_tick)
        self.game.subscribe(SIGNAL_GAME_OVER, self._on_game_over)

        self.prediction = self.predictor.predict(
            self.game.state.last_update
        )
        if self.auto_tick:
            self._tick_timer = self.set_interval(
                self.game.config.tick_interval_seconds, self.game.tick
            )
            logger.info(
                "Tick timer started every %d ms",
                self.game.config.tick_interval_ms,
            )
        self.refresh_view()

    def on_unmount(self) -> None:
        """Detach from the game loop."""
        self.game.unsubscribe(SIGNAL_STATE_CHANGED, self._on_state_changed)
        self.game.unsubscribe(SIGNAL_TICK, self._on_tick)
        self.game.unsubscribe(SIGNAL_GAME_OVER, self._on_game_over)

    # ── Signal handlers ──────────────────────────────────

    def _on_state_changed(self, _name: str, _data: dict[str, Any]) -> None:
        self.refresh_view()

    def _on_tick(self, _name: str, data: dict[str, Any]) -> None:
        self.prediction = self.predictor.predict(data["event"].timestamp)

    def _on_game_over(self, _name: str, _data: dict[str, Any]) -> None:
        self.push_screen(GameOverScreen(), self._on_game_over_dismissed)

    def _on_game_over_dismissed(self, restart: bool | None) -> None:
        if restart:
            self.game.restart()
            self.notify("New game started")

    # ── Rendering ────────────────────────────────────────

    @property
    def _main(self) -> Screen[Any]:
        """The base game screen, even while a modal is on top."""
        return self.screen_stack[0]

    def refresh_view(self) -> None:
        """Redraw every widget from a fresh game snapshot."""
        snap = self.game.snapshot()
        main = self._main

        main.query_one("#points_value", Static).update(
            f"Points: {snap.points:.2f}"
        )
        main.query_one("#health_value", Static).update(
            f"Health: {round(snap.health)}%"
        )
        main.query_one("#current_price", Static).update(
            f"{snap.current_price:.2f} points"
        )

        bar = main.query_one("#health_bar", ProgressBar)
        bar.update(progress=snap.health)
        bar.remove_class(*_HEALTH_CLASSES)
        bar.add_class(health_status(snap.health))

        main.query_one("#price_spark", Sparkline).data = [
            e.price for e in snap.recent_history
        ]
        if self.prediction is not None:
            main.query_one("#prediction_spark", Sparkline).data = (
                self.prediction.histogram(Settings.PREDICTION_BINS)
            )
            stats = self.prediction.summary()
            main.query_one("#prediction_summary", Static).update(
                f"Prediction: {stats['min']:.2f} to {stats['max']:.2f} "
                f"(mean {stats['mean']:.2f})"
            )

        self.populate_table()

    def populate_table(self) -> None:
        """Fill the DataTable with the recent price history."""
        table = cast(
            DataTable[str | Text],
            self._main.query_one("#history_table", DataTable),
        )
        table.clear()
        snap = self.game.snapshot()
        for e in reversed(snap.recent_history):
            is_purchase = e.action is PriceAction.PURCHASE
            style = "bold red" if is_purchase else ""
            table.add_row(
                e.timestamp.strftime("%H:%M:%S"),
                Text(f"{e.price:.2f}", style=style),
                Text("Buy" if is_purchase else e.action.value, style=style),
            )

    # ── Actions ──────────────────────────────────────────

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button click events."""
        if event.button.id == "buy_btn":
            self.action_buy()

    def action_buy(self) -> None:
        """Buy an egg at the current price."""
        result = self.game.buy()
        severity = "information" if result.success else "error"
        self.notify(result.message, severity=severity)

    def action_export_chart(self) -> None:
        """Export the recent history and prediction to a Plotly chart."""
        snap = self.game.snapshot()
        try:
            path = export_session_chart(
                snap.recent_history, self.prediction
            )
            if path is not None:
                self.notify(f"Chart saved to {path}")
        except Exception as e:
            logger.error("Failed to export chart", exc_info=True)
            self.notify(f"Chart export failed: {e}", severity="error")

    def action_save(self) -> None:
        """Save the full price history to a JSON file."""
        try:
            path = self.file_manager.save_history(list(self.game.history))
            self.notify(f"Saved to {path}")
        except Exception as e:
            logger.error("Failed to save history", exc_info=True)
            self.notify(f"Save failed: {e}", severity="error")

    def action_export(self) -> None:
        """Export the full price history to a CSV file."""
        try:
            path = self.file_manager.export_csv(list(self.game.history))
            self.notify(f"Exported to {path}")
        except Exception as e:
            logger.error("Failed to export history", exc_info=True)
            self.notify(f"Export failed: {e}", severity="error")
