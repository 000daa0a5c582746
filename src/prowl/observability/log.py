"""Event log: what a watch session did, kept for the exit summary.

Holds a bounded ring buffer of ``ProwlEvent`` objects.  The coordinators
append; ``prowl.app`` reads ``summary()`` when a session ends.

Thread Safety:
    All methods take a ``threading.Lock``.  The preview server process never
    touches the log.

"""

import threading
from collections import deque
from typing import TypedDict

from prowl.observability.events import (
    BuildCompleted,
    BuildFailed,
    FileSynced,
    ProwlEvent,
    ServerTransition,
)


class SessionSummary(TypedDict):
    """Counts of retained events, by outcome."""

    builds: int
    failed_builds: int
    copied: int
    excluded: int
    removed: int
    server_starts: int


class EventLog:
    """Bounded event store.

    When the buffer is full the oldest events are discarded.

    Args:
        max_events: Maximum number of events to retain.

    """

    __slots__ = ("_events", "_lock")

    def __init__(self, max_events: int = 10_000) -> None:
        self._events: deque[ProwlEvent] = deque(maxlen=max_events)
        self._lock = threading.Lock()

    def append(self, event: ProwlEvent) -> None:
        with self._lock:
            self._events.append(event)

    def query(
        self,
        event_type: type | None = None,
        *,
        since_ns: int = 0,
    ) -> list[ProwlEvent]:
        """Events of *event_type* recorded at or after *since_ns*, oldest first."""
        with self._lock:
            events = list(self._events)
        return [
            e for e in events
            if (event_type is None or isinstance(e, event_type))
            and e.timestamp_ns >= since_ns
        ]

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def summary(self) -> SessionSummary:
        counts = SessionSummary(
            builds=0, failed_builds=0, copied=0, excluded=0, removed=0, server_starts=0,
        )
        for event in self.query():
            if isinstance(event, BuildCompleted):
                counts["builds"] += 1
            elif isinstance(event, BuildFailed):
                counts["failed_builds"] += 1
            elif isinstance(event, FileSynced):
                key = event.action if event.action in ("copied", "excluded") else "removed"
                counts[key] += 1  # type: ignore[literal-required]
            elif event.state == "running":
                counts["server_starts"] += 1
        return counts
