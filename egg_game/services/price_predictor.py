# egg_game/services/price_predictor.py

"""Cosmetic forward projection of the egg price for the display chart.

The projection is independent of the price actually charged: it draws a
fresh centre from the same factor band the market uses and scatters
normally distributed samples around it. Nothing here touches game state.
"""

import logging
import random
import statistics
from dataclasses import dataclass
from datetime import datetime, timedelta

from egg_game.models.game_config import GameConfig

logger = logging.getLogger("egg_game.predictor")

_HORIZON = timedelta(seconds=1)


@dataclass(frozen=True)
class PricePrediction:
    """A batch of sampled prices for one future timestamp."""

    timestamp: datetime
    centre: float
    samples: tuple[float, ...]

    def summary(self) -> dict[str, float]:
        """Return min / max / mean of the samples."""
        return {
            "min": min(self.samples),
            "max": max(self.samples),
            "mean": statistics.fmean(self.samples),
        }

    def histogram(self, bins: int) -> list[int]:
        """Count samples into *bins* equal-width buckets."""
        if bins <= 0:
            raise ValueError(f"bins must be > 0, got {bins}")
        low = min(self.samples)
        high = max(self.samples)
        counts = [0] * bins
        span = high - low
        if span == 0:
            counts[0] = len(self.samples)
            return counts
        for value in self.samples:
            idx = min(int((value - low) / span * bins), bins - 1)
            counts[idx] += 1
        return counts


class PricePredictor:
    """Produce :class:`PricePrediction` batches from a game config."""

    def __init__(
        self,
        config: GameConfig,
        rng: random.Random | None = None,
    ) -> None:
        self.config = config
        self._rng = rng or random.Random()

    def predict(self, now: datetime) -> PricePrediction:
        """Sample the projected price distribution at ``now + 1s``."""
        cfg = self.config
        centre = cfg.base_price * self._rng.uniform(
            cfg.price_factor_min, cfg.price_factor_max
        )
        samples = tuple(
            self._rng.gauss(centre, cfg.prediction_sd)
            for _ in range(cfg.prediction_samples)
        )
        logger.debug(
            "Prediction centred at %.2f with %d samples",
            centre,
            len(samples),
        )
        return PricePrediction(
            timestamp=now + _HORIZON,
            centre=centre,
            samples=samples,
        )
