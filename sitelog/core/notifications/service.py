"""User-facing notices ("toasts") raised by the report form."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone

from pydantic import BaseModel, Field

from sitelog.common.enums import NoticeVariant
from sitelog.common.logging import get_logger

logger = get_logger("notifications.service")


class Notice(BaseModel):
    title: str
    description: str
    variant: NoticeVariant = NoticeVariant.DEFAULT
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class Notifier:
    """Collects notices and forwards each one to any registered listeners."""

    def __init__(self, history_limit: int = 50) -> None:
        self.history: list[Notice] = []
        self._history_limit = history_limit
        self._listeners: list[Callable[[Notice], None]] = []

    def subscribe(self, listener: Callable[[Notice], None]) -> None:
        self._listeners.append(listener)

    def notify(
        self,
        title: str,
        description: str,
        variant: NoticeVariant = NoticeVariant.DEFAULT,
    ) -> Notice:
        notice = Notice(title=title, description=description, variant=variant)
        self.history.append(notice)
        del self.history[: -self._history_limit]

        if variant == NoticeVariant.DESTRUCTIVE:
            logger.warning("%s: %s", title, description)
        else:
            logger.info("%s: %s", title, description)

        for listener in self._listeners:
            try:
                listener(notice)
            except Exception as e:
                logger.error("Notice listener failed: %s", e)
        return notice

    def error(self, title: str, description: str) -> Notice:
        return self.notify(title, description, NoticeVariant.DESTRUCTIVE)

    @property
    def last(self) -> Notice | None:
        return self.history[-1] if self.history else None
