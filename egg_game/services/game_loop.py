# egg_game/services/game_loop.py

"""Tick / buy / restart state machine for a single game session."""

import logging
import random
import threading
from collections.abc import Callable
from datetime import datetime, timedelta

from egg_game.models.game_config import GameConfig
from egg_game.models.game_state import (
    GameSnapshot,
    GameState,
    PlayerState,
    PurchaseResult,
)
from egg_game.models.price_event import PriceAction, PriceEvent
from egg_game.models.price_history import PriceHistory
from egg_game.services.signal_bus import SignalBus, SignalHandler

logger = logging.getLogger("egg_game.game_loop")

# Signal names published on the bus
SIGNAL_TICK = "tick"
SIGNAL_PURCHASE = "purchase"
SIGNAL_INSUFFICIENT_FUNDS = "insufficient_funds"
SIGNAL_GAME_OVER = "game_over"
SIGNAL_RESTART = "restart"
SIGNAL_STATE_CHANGED = "state_changed"

# Offset of the synthetic post-purchase quote from the purchase record
_PURCHASE_QUOTE_OFFSET = timedelta(seconds=1)


class GameStateError(RuntimeError):
    """Raised when a session invariant is broken."""


class GameLoop:
    """Owns player and market state and applies game commands.

    Commands (``tick``, ``buy``, ``restart``) are serialised on a single
    lock. Signals raised while a command runs are delivered after it
    completes and the lock is released, so handlers may read
    :meth:`snapshot` or issue further commands.
    """

    def __init__(
        self,
        config: GameConfig | None = None,
        *,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] | None = None,
        bus: SignalBus | None = None,
    ) -> None:
        self.config = config or GameConfig.from_settings()
        self._rng = rng or random.Random()
        self._clock = clock or datetime.now
        self._bus = bus or SignalBus()
        self._lock = threading.Lock()

        self.player = PlayerState(
            points=self.config.initial_points,
            health=self.config.initial_health,
        )
        now = self._clock()
        self.state = GameState(
            current_price=self.config.base_price,
            last_update=now,
            history=PriceHistory(),
        )
        self.state.history.append(
            PriceEvent(now, self.config.base_price, PriceAction.START)
        )
        self._game_over = False
        logger.debug(
            "GameLoop initialised: points=%s health=%s price=%s",
            self.player.points,
            self.player.health,
            self.state.current_price,
        )

    # ── Observers ────────────────────────────────────────

    def subscribe(self, signal_name: str, handler: SignalHandler) -> None:
        """Register *handler* for a game signal."""
        self._bus.subscribe(signal_name, handler)

    def unsubscribe(
        self, signal_name: str, handler: SignalHandler
    ) -> None:
        """Remove a previously registered handler."""
        self._bus.unsubscribe(signal_name, handler)

    # ── Queries ──────────────────────────────────────────

    @property
    def game_over(self) -> bool:
        """True once health hits zero, until :meth:`restart`."""
        return self._game_over

    @property
    def history(self) -> PriceHistory:
        """The full price timeline (append-only)."""
        return self.state.history

    def snapshot(self, n: int | None = None) -> GameSnapshot:
        """Return display state with the last *n* history entries."""
        window = self.config.history_window if n is None else n
        with self._lock:
            return GameSnapshot(
                points=self.player.points,
                health=self.player.health,
                current_price=self.state.current_price,
                recent_history=self.state.history.recent(window),
                game_over=self._game_over,
            )

    # ── Commands ─────────────────────────────────────────

    def tick(self) -> PriceEvent | None:
        """Accrue points, decay health and quote a new price.

        Returns the appended ``update`` event, or ``None`` when the game
        is over and the tick was ignored.
        """
        with self._lock:
            if self._game_over:
                logger.debug("Tick ignored: game over")
                return None

            cfg = self.config
            points = self.player.points + cfg.points_per_tick
            health = max(0.0, self.player.health - cfg.health_decay_rate)
            self._check_invariants(points, health)

            factor = self._rng.uniform(
                cfg.price_factor_min, cfg.price_factor_max
            )
            candidate = round(cfg.base_price * factor, 2)
            new_price = (candidate + self.state.current_price) / 2

            now = self._now()
            event = PriceEvent(now, new_price, PriceAction.UPDATE)
            self.player.points = points
            self.player.health = health
            self.state.history.append(event)
            self.state.current_price = new_price
            self.state.last_update = now

            logger.debug(
                "Tick: points=%.2f health=%.1f candidate=%.2f price=%.2f",
                self.player.points,
                self.player.health,
                candidate,
                new_price,
            )
            self._bus.publish(SIGNAL_TICK, event=event)
            self._bus.publish(SIGNAL_STATE_CHANGED)

            if self.player.health <= 0:
                self._game_over = True
                logger.info(
                    "Game over: health reached zero at %s",
                    now.isoformat(),
                )
                self._bus.publish(
                    SIGNAL_GAME_OVER, points=self.player.points
                )

        self._bus.flush()
        return event

    def buy(self) -> PurchaseResult:
        """Spend points on an egg at the current price."""
        with self._lock:
            price = self.state.current_price

            if self._game_over:
                logger.info("Purchase refused: game over")
                result = PurchaseResult(
                    success=False, price=price, reason="game_over"
                )
            elif self.player.points < price:
                logger.info(
                    "Purchase refused: %.2f points < price %.2f",
                    self.player.points,
                    price,
                )
                result = PurchaseResult(
                    success=False,
                    price=price,
                    reason="insufficient_funds",
                )
                self._bus.publish(
                    SIGNAL_INSUFFICIENT_FUNDS, required=price
                )
            else:
                result = self._apply_purchase(price)

        self._bus.flush()
        return result

    def restart(self) -> None:
        """Reset the player; price history and quote carry over."""
        with self._lock:
            self.player.points = self.config.initial_points
            self.player.health = self.config.initial_health
            self._game_over = False
            logger.info(
                "Game restarted: points=%s health=%s (history=%d)",
                self.player.points,
                self.player.health,
                len(self.state.history),
            )
            self._bus.publish(SIGNAL_RESTART)
            self._bus.publish(SIGNAL_STATE_CHANGED)

        self._bus.flush()

    # ── Private helpers ──────────────────────────────────

    def _apply_purchase(self, price: float) -> PurchaseResult:
        """Mutate state for a funded purchase. Caller holds the lock."""
        cfg = self.config
        points = self.player.points - price
        health = min(
            cfg.max_health,
            self.player.health + cfg.health_gained_per_egg,
        )
        self._check_invariants(points, health)

        now = self._now()
        bumped = price + cfg.purchase_markup
        self.player.points = points
        self.player.health = health
        self.state.history.append(
            PriceEvent(now, price, PriceAction.PURCHASE)
        )
        self.state.history.append(
            PriceEvent(
                now + _PURCHASE_QUOTE_OFFSET,
                bumped,
                PriceAction.UPDATE,
            )
        )
        # The markup becomes the quoted price
        self.state.current_price = bumped

        logger.info(
            "Purchased egg for %.2f points: points=%.2f health=%.1f "
            "next price=%.2f",
            price,
            self.player.points,
            self.player.health,
            bumped,
        )
        self._bus.publish(SIGNAL_PURCHASE, price=price)
        self._bus.publish(SIGNAL_STATE_CHANGED)
        return PurchaseResult(success=True, price=price)

    def _now(self) -> datetime:
        """Clock reading, never earlier than the newest history entry."""
        now = self._clock()
        latest = self.state.history[-1].timestamp
        return max(now, latest)

    def _check_invariants(self, points: float, health: float) -> None:
        """Raise :class:`GameStateError` if proposed player values are
        out of bounds. Called before any state is touched.
        """
        if points < 0:
            raise GameStateError(f"points would go negative: {points}")
        if not 0 <= health <= self.config.max_health:
            raise GameStateError(f"health out of range: {health}")
