# egg_game/models/price_history.py

"""Append-only chronological log of egg price events."""

from collections.abc import Iterator

from egg_game.models.price_event import PriceAction, PriceEvent


class PriceHistory:
    """Ordered, append-only sequence of :class:`PriceEvent`.

    Insertion order is chronological order. Entries are never removed or
    replaced; display code windows the tail with :meth:`recent`.
    """

    def __init__(self) -> None:
        self._events: list[PriceEvent] = []

    def append(self, event: PriceEvent) -> None:
        """Add *event* to the end of the timeline."""
        self._events.append(event)

    def recent(self, n: int) -> tuple[PriceEvent, ...]:
        """Return the last *n* events, oldest first."""
        if n <= 0:
            return ()
        return tuple(self._events[-n:])

    def latest_quote(self) -> PriceEvent | None:
        """Return the newest ``start`` or ``update`` entry."""
        for event in reversed(self._events):
            if event.action is not PriceAction.PURCHASE:
                return event
        return None

    def purchases(self) -> list[PriceEvent]:
        """Return every purchase entry in chronological order."""
        return [
            e for e in self._events
            if e.action is PriceAction.PURCHASE
        ]

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[PriceEvent]:
        return iter(tuple(self._events))

    def __getitem__(self, index: int) -> PriceEvent:
        return self._events[index]
