# egg_game/models/game_config.py

"""Validated, immutable game tuning passed into the game loop."""

from dataclasses import dataclass

from egg_game.config.settings import Settings


@dataclass(frozen=True)
class GameConfig:
    """Numeric rules for one game session."""

    initial_points: float = 5.0
    initial_health: float = 100.0
    max_health: float = 100.0
    base_price: float = 10.0
    health_decay_rate: float = 5.0
    health_gained_per_egg: float = 10.0
    points_per_tick: float = 5.0
    price_factor_min: float = 0.7
    price_factor_max: float = 1.3
    purchase_markup: float = 2.0
    tick_interval_ms: int = 500
    history_window: int = 20
    prediction_samples: int = 100
    prediction_sd: float = 1.0

    def __post_init__(self) -> None:
        non_negative = {
            "initial_points": self.initial_points,
            "health_decay_rate": self.health_decay_rate,
            "health_gained_per_egg": self.health_gained_per_egg,
            "points_per_tick": self.points_per_tick,
            "purchase_markup": self.purchase_markup,
            "prediction_sd": self.prediction_sd,
        }
        for name, value in non_negative.items():
            if value < 0:
                raise ValueError(f"{name} must be >= 0, got {value}")

        positive = {
            "max_health": self.max_health,
            "base_price": self.base_price,
            "tick_interval_ms": self.tick_interval_ms,
            "history_window": self.history_window,
            "prediction_samples": self.prediction_samples,
        }
        for name, value in positive.items():
            if value <= 0:
                raise ValueError(f"{name} must be > 0, got {value}")

        if not 0 <= self.initial_health <= self.max_health:
            raise ValueError(
                "initial_health must be within "
                f"[0, {self.max_health}], got {self.initial_health}"
            )
        if not 0 < self.price_factor_min <= self.price_factor_max:
            raise ValueError(
                "price factor bounds must satisfy "
                f"0 < min <= max, got ({self.price_factor_min}, "
                f"{self.price_factor_max})"
            )

    @property
    def tick_interval_seconds(self) -> float:
        """Tick cadence in seconds, as timers expect it."""
        return self.tick_interval_ms / 1000

    @classmethod
    def from_settings(cls) -> "GameConfig":
        """Build a config from :class:`Settings` (env overrides applied)."""
        return cls(
            initial_points=Settings.INITIAL_POINTS,
            initial_health=Settings.INITIAL_HEALTH,
            max_health=Settings.MAX_HEALTH,
            base_price=Settings.BASE_PRICE,
            health_decay_rate=Settings.HEALTH_DECAY_RATE,
            health_gained_per_egg=Settings.HEALTH_GAINED_PER_EGG,
            points_per_tick=Settings.POINTS_PER_TICK,
            price_factor_min=Settings.PRICE_FACTOR_MIN,
            price_factor_max=Settings.PRICE_FACTOR_MAX,
            purchase_markup=Settings.PURCHASE_MARKUP,
            tick_interval_ms=Settings.TICK_INTERVAL_MS,
            history_window=Settings.HISTORY_WINDOW,
            prediction_samples=Settings.PREDICTION_SAMPLES,
            prediction_sd=Settings.PREDICTION_SD,
        )
