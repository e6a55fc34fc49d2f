# egg_game/models/game_state.py

"""Player, market and snapshot models for a game session."""

from dataclasses import dataclass, field
from datetime import datetime

from egg_game.models.price_event import PriceEvent
from egg_game.models.price_history import PriceHistory


@dataclass
class PlayerState:
    """Mutable player counters."""

    points: float
    health: float


@dataclass
class GameState:
    """Market state: the quoted price and its timeline."""

    current_price: float
    last_update: datetime
    history: PriceHistory = field(default_factory=PriceHistory)


@dataclass(frozen=True)
class GameSnapshot:
    """Read-only view of a session for display."""

    points: float
    health: float
    current_price: float
    recent_history: tuple[PriceEvent, ...]
    game_over: bool = False


@dataclass(frozen=True)
class PurchaseResult:
    """Outcome of a ``buy`` command."""

    success: bool
    price: float
    reason: str = ""  # "", "insufficient_funds", "game_over"

    @property
    def message(self) -> str:
        """User-facing notification text."""
        if self.success:
            return (
                f"You bought eggs for {self.price:.2f} points "
                "and gained health!"
            )
        if self.reason == "game_over":
            return "Game over! Restart to keep buying eggs."
        return (
            f"Not enough points! You need {self.price:.2f} "
            "points to buy eggs."
        )
