"""User-facing notification surface."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

logger = logging.getLogger(__name__)


class NotificationKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    kind: NotificationKind
    title: str
    message: str

    @property
    def level(self) -> int:
        return logging.ERROR if self.kind is NotificationKind.ERROR else logging.INFO

    def __str__(self) -> str:
        return f"[{self.kind.value}] {self.title}: {self.message}"


class Notifier(Protocol):
    """Fire-and-forget sink for toast-style messages."""

    def notify(self, kind: NotificationKind, title: str, message: str) -> None: ...


class LoggingNotifier:
    """Notifier that writes every notification to a logger.

    Used as the default surface when no UI is attached, e.g. by the scripts.
    The most recent notification is kept on ``last``.
    """

    def __init__(self, log: logging.Logger = logger) -> None:
        self._log = log
        self.last: Notification | None = None

    def notify(self, kind: NotificationKind, title: str, message: str) -> None:
        notification = Notification(kind, title, message)
        self.last = notification
        self._log.log(notification.level, str(notification))


__all__ = ["LoggingNotifier", "Notification", "NotificationKind", "Notifier"]
