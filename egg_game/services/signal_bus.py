# egg_game/services/signal_bus.py

"""In-memory pub/sub bus with flush-after-command semantics."""

import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger("egg_game.signals")

SignalHandler = Callable[[str, dict[str, Any]], None]


class SignalBus:
    """Queue signals during a command and dispatch them afterwards."""

    def __init__(self) -> None:
        self._subscribers: dict[str, list[SignalHandler]] = {}
        self._queue: list[tuple[str, dict[str, Any]]] = []

    def subscribe(self, signal_name: str, handler: SignalHandler) -> None:
        """Register *handler* for *signal_name*."""
        self._subscribers.setdefault(signal_name, []).append(handler)

    def unsubscribe(
        self, signal_name: str, handler: SignalHandler
    ) -> None:
        """Remove *handler*; unknown handlers are ignored."""
        handlers = self._subscribers.get(signal_name)
        if handlers is None:
            return
        try:
            handlers.remove(handler)
        except ValueError:
            pass

    def publish(self, signal_name: str, **data: Any) -> None:
        """Queue a signal until the next :meth:`flush`."""
        self._queue.append((signal_name, data))

    def flush(self) -> None:
        """Dispatch queued signals in publish order.

        A handler that raises is logged and skipped; the remaining
        handlers and signals are still delivered.
        """
        pending = self._queue
        self._queue = []
        for signal_name, data in pending:
            handlers = list(self._subscribers.get(signal_name, []))
            logger.debug(
                "Dispatching '%s' to %d handler(s)",
                signal_name,
                len(handlers),
            )
            for handler in handlers:
                try:
                    handler(signal_name, data)
                except Exception:
                    logger.error(
                        "Handler %r failed on '%s'",
                        handler,
                        signal_name,
                        exc_info=True,
                    )

    def clear(self) -> None:
        """Drop queued signals without dispatching them."""
        self._queue.clear()
