# app/services/notifications.py
import logging
from typing import Protocol

from app.schemas.cart import Notification

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    """Fire-and-forget user-visible messages."""

    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class NotificationFeed:
    """
    Buffers messages for one shopper session until the next response
    drains them.
    """

    def __init__(self, session_id: str = ""):
        self.session_id = session_id
        self._pending: list[Notification] = []

    def success(self, message: str) -> None:
        logger.info("[%s] %s", self.session_id, message)
        self._pending.append(Notification(level="success", message=message))

    def error(self, message: str) -> None:
        logger.warning("[%s] %s", self.session_id, message)
        self._pending.append(Notification(level="error", message=message))

    def drain(self) -> list[Notification]:
        pending, self._pending = self._pending, []
        return pending
