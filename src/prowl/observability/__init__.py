"""Observability: a record of what each change batch did.

Every build, sync and server transition is recorded as a frozen event with a
nanosecond timestamp.  An ``Orchestrator`` owns one ``EventLog`` shared by
its coordinators.

Quick Start:
    >>> from prowl.observability import EventLog
    >>> log = EventLog()
    >>> log.summary()["builds"]
    0

"""

from prowl.observability.events import (
    BuildCompleted,
    BuildFailed,
    FileSynced,
    ProwlEvent,
    ServerTransition,
    now_ns,
)
from prowl.observability.log import EventLog, SessionSummary

__all__ = [
    "BuildCompleted",
    "BuildFailed",
    "EventLog",
    "FileSynced",
    "ProwlEvent",
    "ServerTransition",
    "SessionSummary",
    "now_ns",
]
