# tests/helpers.py

"""Deterministic clock and RNG doubles shared by the game tests."""

import random
from datetime import datetime, timedelta


class StepClock:
    """Clock that advances by a fixed step on every call."""

    def __init__(
        self,
        start: datetime = datetime(2026, 1, 1, 12, 0, 0),
        step: timedelta = timedelta(seconds=5),
    ) -> None:
        self.now = start
        self.step = step

    def __call__(self) -> datetime:
        current = self.now
        self.now += self.step
        return current


class FixedRandom(random.Random):
    """Random source whose ``uniform`` always returns the same factor."""

    def __init__(self, factor: float = 1.0) -> None:
        super().__init__(0)
        self.factor = factor

    def uniform(self, a: float, b: float) -> float:
        return self.factor
