"""Two-step delete confirmation: the first request arms, the second deletes."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from enum import Enum

Clock = Callable[[], float]

DEFAULT_WINDOW_SECONDS = 3.0


class ConfirmState(str, Enum):
    IDLE = "idle"
    ARMED = "armed"


class ConfirmOutcome(str, Enum):
    ARMED = "armed"
    CONFIRMED = "confirmed"


class DeleteConfirmation:
    """idle -> armed on first request; armed -> idle on timeout or confirm."""

    def __init__(
        self, window_seconds: float = DEFAULT_WINDOW_SECONDS, clock: Clock = time.monotonic
    ) -> None:
        self._window = window_seconds
        self._clock = clock
        self._deadline: float | None = None

    @property
    def window_seconds(self) -> float:
        return self._window

    def state(self, now: float | None = None) -> ConfirmState:
        if self._deadline is None:
            return ConfirmState.IDLE
        current = self._clock() if now is None else now
        if current >= self._deadline:
            self._deadline = None
            return ConfirmState.IDLE
        return ConfirmState.ARMED

    def remaining(self, now: float | None = None) -> float:
        if self.state(now) is ConfirmState.IDLE:
            return 0.0
        current = self._clock() if now is None else now
        return max(0.0, self._deadline - current)  # type: ignore[operator]

    def request(self, now: float | None = None) -> ConfirmOutcome:
        current = self._clock() if now is None else now
        if self.state(current) is ConfirmState.ARMED:
            self._deadline = None
            return ConfirmOutcome.CONFIRMED
        self._deadline = current + self._window
        return ConfirmOutcome.ARMED

    def disarm(self) -> None:
        self._deadline = None


class DeleteConfirmationRegistry:
    """One confirmation machine per (user_id, record_id)."""

    def __init__(
        self, window_seconds: float = DEFAULT_WINDOW_SECONDS, clock: Clock = time.monotonic
    ) -> None:
        self._window = window_seconds
        self._clock = clock
        self._machines: dict[tuple[str, str], DeleteConfirmation] = {}
        self._lock = threading.Lock()

    def request(self, user_id: str, record_id: str) -> tuple[ConfirmOutcome, float]:
        """Advance the machine for this record; returns (outcome, seconds left to confirm)."""
        key = (user_id, record_id)
        with self._lock:
            self._prune()
            machine = self._machines.get(key)
            if machine is None:
                machine = DeleteConfirmation(self._window, self._clock)
                self._machines[key] = machine
            now = self._clock()
            outcome = machine.request(now)
            remaining = machine.remaining(now)
            if outcome is ConfirmOutcome.CONFIRMED:
                self._machines.pop(key, None)
            return outcome, remaining

    def _prune(self) -> None:
        expired = [
            key
            for key, machine in self._machines.items()
            if machine.state() is ConfirmState.IDLE
        ]
        for key in expired:
            del self._machines[key]
