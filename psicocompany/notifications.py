"""
Toast notification queue shared by every screen.

Each browser session owns a NotificationQueue. Notifications with a positive
duration are evicted by a timer scheduled on an event-loop-like scheduler
(the running asyncio loop by default). Expiry is also enforced on read, so a
queue used outside an event loop still never shows a stale toast.
"""

from __future__ import annotations

import asyncio
import contextlib
import itertools
import logging
import time
from collections import Counter
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Callable, Iterator, Optional, Protocol

logger = logging.getLogger(__name__)

DEFAULT_DURATION = 5.0


class Severity(StrEnum):
    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

    @property
    def icon(self) -> str:
        return _ICONS[self]


_ICONS = {
    Severity.SUCCESS: "✅",
    Severity.ERROR: "❌",
    Severity.WARNING: "⚠️",
    Severity.INFO: "ℹ️",
}


class TimerHandle(Protocol):
    def cancel(self) -> None:
        ...


class Scheduler(Protocol):
    """The subset of asyncio.AbstractEventLoop the queue relies on."""

    def time(self) -> float:
        ...

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle:
        ...


@dataclass(frozen=True)
class Notification:
    id: int
    message: str
    severity: Severity
    duration: float
    expires_at: Optional[float] = None

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "message": self.message,
            "severity": self.severity.value,
            "icon": self.severity.icon,
            "duration": self.duration,
        }


@dataclass
class _Entry:
    notification: Notification
    timer: Optional[TimerHandle] = None


class NotificationQueue:
    """Ordered set of active notifications with timed eviction."""

    def __init__(
        self,
        *,
        default_duration: float = DEFAULT_DURATION,
        scheduler: Optional[Scheduler] = None,
        ids: Optional[Iterator[int]] = None,
        on_empty: Optional[Callable[[], None]] = None,
    ):
        self.default_duration = default_duration
        self._scheduler = scheduler
        self._ids = ids if ids is not None else itertools.count(1)
        # Called whenever removing a notification leaves the queue empty.
        self._on_empty = on_empty
        # dicts keep insertion order, which is the display order.
        self._entries: dict[int, _Entry] = {}

    def enqueue(
        self,
        message: str,
        severity: Severity | str = Severity.INFO,
        duration: Optional[float] = None,
    ) -> None:
        severity = Severity(severity)
        if duration is None:
            duration = self.default_duration

        notification_id = next(self._ids)
        scheduler = self._resolve_scheduler()
        expires_at = None
        timer = None
        if duration > 0:
            expires_at = self._now(scheduler) + duration
            if scheduler is not None:
                timer = scheduler.call_later(duration, self.dismiss, notification_id)

        notification = Notification(
            id=notification_id,
            message=message,
            severity=severity,
            duration=duration,
            expires_at=expires_at,
        )
        self._entries[notification_id] = _Entry(notification, timer)
        logger.debug("Enqueued %s notification %d", severity.value, notification_id)

    def dismiss(self, notification_id: int) -> None:
        entry = self._entries.pop(notification_id, None)
        if entry is None:
            return
        if entry.timer is not None:
            entry.timer.cancel()
        if not self._entries and self._on_empty is not None:
            self._on_empty()

    def active(self) -> list[Notification]:
        self._evict_expired()
        return [entry.notification for entry in self._entries.values()]

    def clear(self) -> None:
        for notification_id in list(self._entries):
            self.dismiss(notification_id)

    def remaining(self, notification: Notification) -> Optional[float]:
        """Seconds left before the notification expires, None when sticky."""
        if notification.expires_at is None:
            return None
        left = notification.expires_at - self._now(self._resolve_scheduler())
        return max(left, 0.0)

    def __len__(self) -> int:
        return len(self.active())

    def __contains__(self, notification_id: object) -> bool:
        self._evict_expired()
        return notification_id in self._entries

    def _resolve_scheduler(self) -> Optional[Scheduler]:
        if self._scheduler is not None:
            return self._scheduler
        try:
            return asyncio.get_running_loop()
        except RuntimeError:
            return None

    @staticmethod
    def _now(scheduler: Optional[Scheduler]) -> float:
        # Deadlines are compared on the clock they were computed with.
        if scheduler is not None:
            return scheduler.time()
        return time.monotonic()

    def _evict_expired(self) -> None:
        if not self._entries:
            return
        now = self._now(self._resolve_scheduler())
        expired = [
            notification_id
            for notification_id, entry in self._entries.items()
            if entry.notification.expires_at is not None
            and entry.notification.expires_at <= now
        ]
        for notification_id in expired:
            self.dismiss(notification_id)


@dataclass
class NotificationCenter:
    """
    Owns one NotificationQueue per browser session.

    Requests borrow a queue through ``session()``. A queue is dropped as soon
    as it is empty and no request holds it, so browsers that never see a
    toast leave nothing behind.
    """

    default_duration: float = DEFAULT_DURATION
    scheduler: Optional[Scheduler] = None
    queues: dict[str, NotificationQueue] = field(default_factory=dict)
    # Full sweeps catch queues whose toasts expired with no timer to fire.
    prune_interval: int = 100

    def __post_init__(self):
        # Identifiers are unique across sessions, dropped ones included.
        self._ids = itertools.count(1)
        self._leases: Counter[str] = Counter()
        self._released = 0

    def queue_for(self, session_key: str) -> NotificationQueue:
        queue = self.queues.get(session_key)
        if queue is None:
            queue = NotificationQueue(
                default_duration=self.default_duration,
                scheduler=self.scheduler,
                ids=self._ids,
                on_empty=lambda: self._discard_if_empty(session_key),
            )
            self.queues[session_key] = queue
        return queue

    @contextlib.contextmanager
    def session(self, session_key: str) -> Iterator[NotificationQueue]:
        """Hold the session's queue for the duration of a request."""
        self._leases[session_key] += 1
        try:
            yield self.queue_for(session_key)
        finally:
            self._leases[session_key] -= 1
            if self._leases[session_key] <= 0:
                del self._leases[session_key]
            self._discard_if_empty(session_key)
            self._released += 1
            if self.prune_interval and self._released % self.prune_interval == 0:
                self.prune()

    def prune(self) -> int:
        """Drop sessions whose queue is empty. Returns how many were dropped."""
        before = len(self.queues)
        for session_key in list(self.queues):
            self._discard_if_empty(session_key)
        dropped = before - len(self.queues)
        if dropped:
            logger.debug("Pruned %d empty notification queues", dropped)
        return dropped

    def _discard_if_empty(self, session_key: str) -> None:
        if self._leases.get(session_key):
            return
        queue = self.queues.get(session_key)
        if queue is not None and not queue.active():
            self.queues.pop(session_key, None)
