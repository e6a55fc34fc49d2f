# egg_game/cli/runner.py

"""Headless simulation runner, driving the game loop without a UI."""

import json
import logging
import random
import sys
from collections.abc import Callable
from datetime import datetime, timedelta

from rich.console import Console
from rich.table import Table

from egg_game.models.game_config import GameConfig
from egg_game.models.price_event import PriceAction, PriceEvent
from egg_game.services.game_loop import (
    SIGNAL_GAME_OVER,
    SIGNAL_INSUFFICIENT_FUNDS,
    GameLoop,
)
from egg_game.services.price_predictor import PricePredictor
from egg_game.storage.chart_exporter import export_session_chart

logger = logging.getLogger("egg_game.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def _simulated_clock(step_ms: int) -> Callable[[], datetime]:
    """Clock that starts now and advances one tick interval per call."""
    current = datetime.now()
    step = timedelta(milliseconds=step_ms)

    def _clock() -> datetime:
        nonlocal current
        reading = current
        current += step
        return reading

    return _clock


def _events_to_dicts(events: list[PriceEvent]) -> list[dict[str, object]]:
    """Serialise price events to plain dicts for JSON output."""
    return [e.to_dict() for e in events]


def _print_table(events: list[PriceEvent]) -> None:
    """Render a Rich table of price events to stdout."""
    table = Table(
        title="Egg Price History",
        show_lines=False,
        title_style="bold cyan",
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("Time")
    table.add_column("Price", justify="right", style="green")
    table.add_column("Action", style="magenta")

    for idx, e in enumerate(events, 1):
        action = (
            "[bold red]purchase[/bold red]"
            if e.action is PriceAction.PURCHASE
            else e.action.value
        )
        table.add_row(
            str(idx),
            e.timestamp.strftime("%H:%M:%S.%f")[:-3],
            f"{e.price:,.2f}",
            action,
        )

    Console().print(table)


def run_simulation(
    ticks: int,
    buy_below: float,
    seed: int | None = None,
    output_format: str = "table",
    export_chart: bool = False,
) -> int:
    """Play *ticks* ticks with an auto-buy policy and print the history.

    After each tick an egg is bought whenever health is at or below
    *buy_below* and the player can afford it. Returns 0 if the player
    survived every tick, 1 if the game ended.
    """
    if ticks < 0:
        logger.error("Tick count must be >= 0, got %d", ticks)
        raise SystemExit(2)

    config = GameConfig.from_settings()
    rng = random.Random(seed)
    game = GameLoop(
        config,
        rng=rng,
        clock=_simulated_clock(config.tick_interval_ms),
    )
    predictor = PricePredictor(config, rng=rng)

    misses = 0
    died_at: int | None = None

    def _on_insufficient(_name: str, data: dict[str, object]) -> None:
        nonlocal misses
        misses += 1

    game.subscribe(SIGNAL_INSUFFICIENT_FUNDS, _on_insufficient)
    game.subscribe(
        SIGNAL_GAME_OVER,
        lambda _name, data: logger.warning(
            "Game over with %.2f points", data["points"]
        ),
    )

    _err.print(
        f"[bold]Simulating:[/bold] {ticks} ticks  "
        f"[dim]buy_below={buy_below} seed={seed}[/dim]"
    )

    purchases = 0
    for n in range(1, ticks + 1):
        game.tick()
        if game.game_over:
            died_at = n
            break
        if game.player.health <= buy_below:
            if game.buy().success:
                purchases += 1

    snap = game.snapshot()
    _err.print(
        f"[green]✓ {purchases} eggs bought[/green], "
        f"{misses} refused; points={snap.points:.2f} "
        f"health={snap.health:.0f} price={snap.current_price:.2f}"
    )
    logger.info(
        "Simulation finished: ticks=%d purchases=%d died_at=%s",
        ticks,
        purchases,
        died_at,
    )

    events = list(game.history)
    if output_format == "table":
        _print_table(events)
    else:
        json.dump(
            _events_to_dicts(events),
            sys.stdout,
            ensure_ascii=False,
            indent=2,
        )
        sys.stdout.write("\n")

    if export_chart:
        try:
            path = export_session_chart(
                snap.recent_history,
                predictor.predict(game.state.last_update),
                open_browser=False,
            )
            _err.print(f"[dim]Chart saved → {path}[/dim]")
        except Exception as exc:
            logger.error("Chart export failed: %s", exc, exc_info=True)

    if died_at is not None:
        logger.warning("Player died at tick %d", died_at)
        return 1
    return 0
