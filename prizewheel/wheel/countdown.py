"""Redemption countdown shown after a win."""

from __future__ import annotations

import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class Countdown:
    """Whole-second timer counting down from a number of minutes to zero.

    The countdown never owns a thread. It is advanced either explicitly with
    :meth:`tick` or by :meth:`sync`, which catches up to a monotonic clock
    reading. ``on_expire`` fires exactly once, on the tick that reaches zero,
    and never after :meth:`cancel`.
    """

    def __init__(
        self,
        minutes: float,
        on_expire: Optional[Callable[[], None]] = None,
    ) -> None:
        total_seconds = int(round(minutes * 60))
        if total_seconds <= 0:
            raise ValueError("countdown length must be at least one second")
        self.total_seconds = total_seconds
        self.remaining = total_seconds
        self._on_expire = on_expire
        self._started_at: Optional[float] = None
        self._fired = False
        self._cancelled = False

    def __repr__(self) -> str:  # pragma: no cover - repr is trivial
        return (
            f"<Countdown(remaining={self.remaining}, total={self.total_seconds}, "
            f"fired={self._fired}, cancelled={self._cancelled})>"
        )

    @property
    def expired(self) -> bool:
        return self._fired

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def running(self) -> bool:
        return not (self._fired or self._cancelled)

    @property
    def display(self) -> str:
        """Remaining time formatted as ``MM:SS``."""
        minutes, seconds = divmod(self.remaining, 60)
        return f"{minutes:02d}:{seconds:02d}"

    def start(self, now: float) -> None:
        """Anchor the countdown at monotonic time ``now`` for :meth:`sync`."""
        self._started_at = now

    def tick(self, steps: int = 1) -> bool:
        """Advance the countdown by ``steps`` seconds.

        Returns
        -------
        bool
            ``True`` when this call reached zero and fired ``on_expire``.
        """
        if steps < 0:
            raise ValueError("steps must be non-negative")
        if not self.running or steps == 0:
            return False

        self.remaining = max(self.remaining - steps, 0)
        if self.remaining > 0:
            return False

        self._fired = True
        logger.debug("Redemption countdown reached zero")
        if self._on_expire is not None:
            self._on_expire()
        return True

    def sync(self, now: float) -> bool:
        """Tick as many whole seconds as have elapsed since :meth:`start`."""
        if self._started_at is None:
            raise RuntimeError("Countdown.start() must be called before sync()")
        elapsed = int(now - self._started_at)
        due = min(elapsed, self.total_seconds) - (self.total_seconds - self.remaining)
        if due <= 0:
            return False
        return self.tick(due)

    def cancel(self) -> None:
        """Stop the countdown without firing ``on_expire``."""
        if self.running:
            logger.debug(f"Redemption countdown cancelled with {self.display} left")
        self._cancelled = True


__all__ = ["Countdown"]
