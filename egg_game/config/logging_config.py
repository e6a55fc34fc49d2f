# egg_game/config/logging_config.py

"""Session logging for The Game of Eggs.

Every launch writes a ``logs/run_<stamp>.log`` file that captures the
whole session at DEBUG: each tick's price draw, every purchase, refusal,
restart and game over.

Only the headless simulation gets a console handler. The Textual app
owns the terminal while it runs, so anything written to stderr would
tear its screen; in that mode the file is the only sink. For
``--simulate`` a Rich handler on stderr reports warnings (game over,
player death, failed exports) alongside the runner's status lines while
stdout stays clean for the table or JSON.
"""

import logging
from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from egg_game.config.settings import Settings

_FILE_FORMAT = (
    "%(asctime)s.%(msecs)03d | %(levelname)-8s | %(name)s | "
    "%(funcName)s:%(lineno)d | %(message)s"
)

_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _console_handler() -> logging.Handler:
    """Rich handler on stderr for headless runs."""
    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        omit_repeated_times=False,
        log_time_format="[%X]",
    )
    handler.setLevel(logging.WARNING)
    handler.setFormatter(logging.Formatter("%(message)s"))
    return handler


def setup_logging(console: bool = False) -> Path:
    """Attach the session handlers to the ``egg_game`` logger.

    Args:
        console: Also report warnings on stderr. Pass ``True`` for the
            headless simulation, leave ``False`` while the TUI runs.

    Returns:
        Path of the log file for this session.
    """
    Settings.LOGS_DIR.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = Settings.LOGS_DIR / f"run_{stamp}.log"

    game_logger = logging.getLogger("egg_game")
    game_logger.setLevel(logging.DEBUG)

    # Already configured in this process
    if game_logger.handlers:
        return log_file

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(_FILE_FORMAT, datefmt=_DATE_FORMAT)
    )
    game_logger.addHandler(file_handler)

    if console:
        game_logger.addHandler(_console_handler())

    game_logger.debug(
        "Session log at %s (console=%s)", log_file, console
    )
    return log_file
