"""Typed progress channel.

Analysis runs publish `ProgressLog` messages while they work and a single
`ResultReady` once the report exists. Consumers subscribe for as long as they
are interested and unsubscribe (or leave the `with` block) when done.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
import logging
import threading
from typing import Callable, Iterable, List, Optional, Tuple, Type, Union

from .page_heuristics.models import AnalysisReport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProgressLog:
    message: str
    level: str = "info"  # info | warning | error
    url: Optional[str] = None
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())

    kind = "progress"

    def to_dict(self) -> dict:
        return {"kind": self.kind, "message": self.message, "level": self.level,
                "url": self.url, "timestamp": self.timestamp}


@dataclass(frozen=True)
class ResultReady:
    url: str
    report: AnalysisReport

    kind = "result"

    def to_dict(self) -> dict:
        return {"kind": self.kind, "url": self.url, "report": self.report.to_dict()}


Event = Union[ProgressLog, ResultReady]
Observer = Callable[[Event], None]


class Subscription:
    def __init__(self, channel: "EventChannel", observer: Observer, kinds: Tuple[Type, ...]):
        self.channel = channel
        self.observer = observer
        self.kinds = kinds
        self.active = True

    def accepts(self, event: Event) -> bool:
        return not self.kinds or isinstance(event, self.kinds)

    def unsubscribe(self):
        if self.active:
            self.active = False
            self.channel._remove(self)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.unsubscribe()
        return False


class EventChannel:
    def __init__(self):
        self._lock = threading.Lock()
        self._subscriptions: List[Subscription] = []

    def subscribe(self, observer: Observer, kinds: Optional[Iterable[Type]] = None) -> Subscription:
        sub = Subscription(self, observer, tuple(kinds or ()))
        with self._lock:
            self._subscriptions.append(sub)
        return sub

    def _remove(self, sub: Subscription):
        with self._lock:
            if sub in self._subscriptions:
                self._subscriptions.remove(sub)

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    def publish(self, event: Event) -> int:
        """Deliver `event` to every matching observer; returns the delivery count."""
        with self._lock:
            targets = [s for s in self._subscriptions if s.accepts(event)]
        delivered = 0
        for sub in targets:
            try:
                sub.observer(event)
                delivered += 1
            except Exception:
                logger.exception("Observer %r failed on %s event", sub.observer, event.kind)
        return delivered

    def log(self, message: str, level: str = "info", url: Optional[str] = None) -> ProgressLog:
        event = ProgressLog(message=message, level=level, url=url)
        self.publish(event)
        return event
