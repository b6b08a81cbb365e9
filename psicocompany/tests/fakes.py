"""
Deterministic stand-ins used by the tests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable


@dataclass
class FakeTimer:
    when: float
    callback: Callable[..., Any]
    args: tuple
    cancelled: bool = False
    fired: bool = False

    def cancel(self) -> None:
        self.cancelled = True


@dataclass
class FakeScheduler:
    """Manual clock with the call_later/time subset of an asyncio loop."""

    now: float = 0.0
    timers: list[FakeTimer] = field(default_factory=list)

    def time(self) -> float:
        return self.now

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> FakeTimer:
        timer = FakeTimer(when=self.now + delay, callback=callback, args=args)
        self.timers.append(timer)
        return timer

    def advance(self, seconds: float) -> None:
        self.now += seconds
        due = sorted(
            (t for t in self.timers if not t.cancelled and not t.fired and t.when <= self.now),
            key=lambda t: t.when,
        )
        for timer in due:
            timer.fired = True
            timer.callback(*timer.args)
