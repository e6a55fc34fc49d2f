# egg_game/models/price_event.py

"""Price observation model for the egg price timeline."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class PriceAction(str, Enum):
    """Kind of entry recorded in the price history."""

    START = "start"
    UPDATE = "update"
    PURCHASE = "purchase"


@dataclass(frozen=True)
class PriceEvent:
    """A single price observation or purchase at a point in time."""

    timestamp: datetime
    price: float
    action: PriceAction

    def to_dict(self) -> dict[str, object]:
        """Serialise to a plain dict for JSON/CSV output."""
        return {
            "timestamp": self.timestamp.isoformat(),
            "price": self.price,
            "action": self.action.value,
        }
