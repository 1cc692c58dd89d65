"""Ephemeral notification queue backing the error toasts."""

from __future__ import annotations

import asyncio
import itertools
import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Optional, Protocol, Union

from starlens.config.settings import settings
from starlens.models.domain import Severity

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


Scheduler = Callable[[float, Callable[[], Any]], TimerHandle]


def loop_scheduler(delay_seconds: float, callback: Callable[[], Any]) -> TimerHandle:
    """Schedule on the running event loop."""
    return asyncio.get_running_loop().call_later(delay_seconds, callback)


@dataclass(frozen=True, slots=True)
class Notification:
    id: int
    message: str
    severity: Severity


class NotificationQueue:
    """Newest-first collection of notices that expire after a fixed delay.

    Expiry and manual dismissal both go through ``dismiss``, which is a no-op
    for ids that are already gone.
    """

    def __init__(self, *, ttl_ms: Optional[int] = None, scheduler: Optional[Scheduler] = None) -> None:
        self.ttl_ms = settings.NOTIFICATION_TTL_MS if ttl_ms is None else ttl_ms
        self._scheduler = scheduler or loop_scheduler
        self._ids = itertools.count(1)
        self._items: list[Notification] = []
        self._timers: dict[int, TimerHandle] = {}

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Notification]:
        return iter(tuple(self._items))

    def __contains__(self, notification_id: object) -> bool:
        return any(item.id == notification_id for item in self._items)

    @property
    def items(self) -> tuple[Notification, ...]:
        return tuple(self._items)

    def enqueue(self, message: str, severity: Union[Severity, str] = Severity.ERROR) -> int:
        notification = Notification(id=next(self._ids), message=message, severity=Severity(severity))
        self._items.insert(0, notification)
        self._timers[notification.id] = self._scheduler(
            self.ttl_ms / 1000,
            lambda: self.dismiss(notification.id),
        )
        logger.info(
            "Notification enqueued",
            extra={"notification_id": notification.id, "severity": notification.severity.value},
        )
        return notification.id

    def dismiss(self, notification_id: int) -> bool:
        """Remove a notification; returns False when it was already gone."""
        timer = self._timers.pop(notification_id, None)
        if timer is not None:
            timer.cancel()

        remaining = [item for item in self._items if item.id != notification_id]
        if len(remaining) == len(self._items):
            return False
        self._items = remaining
        logger.debug("Notification dismissed", extra={"notification_id": notification_id})
        return True

    def close(self) -> None:
        """Cancel outstanding expiry timers, leaving current notices in place."""
        for timer in self._timers.values():
            timer.cancel()
        self._timers.clear()
