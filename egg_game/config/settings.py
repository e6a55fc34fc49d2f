# egg_game/config/settings.py

"""Central configuration for the egg_game engine."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def _env_float(name: str, default: float) -> float:
    """Read a float override from the environment."""
    raw = os.getenv(name)
    return float(raw) if raw else default


def _env_int(name: str, default: int) -> int:
    """Read an int override from the environment."""
    raw = os.getenv(name)
    return int(raw) if raw else default


class Settings:
    """Central configuration for the egg_game engine."""

    # --- Player ---
    INITIAL_POINTS: float = _env_float("EGG_INITIAL_POINTS", 5.0)
    INITIAL_HEALTH: float = _env_float("EGG_INITIAL_HEALTH", 100.0)
    MAX_HEALTH: float = _env_float("EGG_MAX_HEALTH", 100.0)
    HEALTH_DECAY_RATE: float = _env_float("EGG_HEALTH_DECAY_RATE", 5.0)
    HEALTH_GAINED_PER_EGG: float = _env_float(
        "EGG_HEALTH_GAINED_PER_EGG", 10.0
    )
    POINTS_PER_TICK: float = _env_float("EGG_POINTS_PER_TICK", 5.0)

    # --- Market ---
    BASE_PRICE: float = _env_float("EGG_BASE_PRICE", 10.0)
    PRICE_FACTOR_MIN: float = _env_float("EGG_PRICE_FACTOR_MIN", 0.7)
    PRICE_FACTOR_MAX: float = _env_float("EGG_PRICE_FACTOR_MAX", 1.3)
    PURCHASE_MARKUP: float = _env_float("EGG_PURCHASE_MARKUP", 2.0)

    # --- Timing ---
    TICK_INTERVAL_MS: int = _env_int("EGG_TICK_INTERVAL_MS", 500)

    # --- Display ---
    HISTORY_WINDOW: int = _env_int("EGG_HISTORY_WINDOW", 20)
    PREDICTION_SAMPLES: int = _env_int("EGG_PREDICTION_SAMPLES", 100)
    PREDICTION_SD: float = _env_float("EGG_PREDICTION_SD", 1.0)
    PREDICTION_BINS: int = 12

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    LOGS_DIR: Path = BASE_DIR / "logs"
    EXPORTS_DIR: Path = BASE_DIR / "exports"
