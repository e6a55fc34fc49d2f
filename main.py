# main.py

"""Entry point for The Game of Eggs (TUI or headless simulation)."""

import argparse
import logging
import sys

from egg_game.config.logging_config import setup_logging
from egg_game.config.settings import Settings

logger = logging.getLogger("egg_game.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="egg_game",
        description="The Game of Eggs: keep your health up by buying eggs.",
        epilog=f"Tick interval: {Settings.TICK_INTERVAL_MS} ms",
    )
    parser.add_argument(
        "--simulate",
        type=int,
        default=None,
        metavar="TICKS",
        help="Run a headless session of TICKS ticks. Omit to launch the TUI.",
    )
    parser.add_argument(
        "--buy-below",
        type=float,
        default=50.0,
        dest="buy_below",
        help="Auto-buy when health is at or below this value (default: 50).",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for a reproducible price walk.",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="table",
        dest="output_format",
        help="Output format for --simulate (default: table).",
    )
    parser.add_argument(
        "--chart",
        action="store_true",
        default=False,
        help="Export a Plotly HTML chart after --simulate.",
    )
    return parser


def _run_tui() -> None:
    """Launch the interactive Textual TUI."""
    from egg_game.ui.app import EggGameApp

    try:
        app = EggGameApp()
        app.run()
    except Exception:
        logger.critical("Fatal error during TUI run", exc_info=True)
        raise
    finally:
        logger.info("egg_game TUI shutting down")


def _run_simulation(args: argparse.Namespace) -> None:
    """Run a headless simulation and exit."""
    from egg_game.cli.runner import run_simulation

    exit_code = run_simulation(
        ticks=args.simulate,
        buy_below=args.buy_below,
        seed=args.seed,
        output_format=args.output_format,
        export_chart=args.chart,
    )
    sys.exit(exit_code)


def main() -> None:
    """Route to TUI (no args) or headless simulation (--simulate)."""
    parser = _build_parser()
    args = parser.parse_args()

    # The TUI owns the terminal, so only headless runs log to stderr
    log_file = setup_logging(console=args.simulate is not None)
    logger.info("egg_game starting, log file: %s", log_file)

    if args.simulate is None:
        _run_tui()
    else:
        _run_simulation(args)


if __name__ == "__main__":
    main()
