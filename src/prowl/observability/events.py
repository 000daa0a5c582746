"""Event model for build, sync and server activity.

All events are frozen dataclasses with:
- ``timestamp_ns``: Monotonic nanosecond timestamp
- Descriptive fields for the specific event type

Thread Safety:
    All events are frozen (immutable) and safe to share across threads.

"""

import time
from dataclasses import dataclass
from typing import Literal


# ---------------------------------------------------------------------------
# Build events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class BuildCompleted:
    """A full regeneration finished.

    Attributes:
        trigger_count: Number of changed paths that triggered the build.
        source: Source directory.
        destination: Output directory.
        duration_ms: Wall-clock build time in milliseconds.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    trigger_count: int
    source: str
    destination: str
    duration_ms: float
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class BuildFailed:
    """The engine raised during a full regeneration.

    Attributes:
        message: The engine's error message.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    message: str
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Sync events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class FileSynced:
    """A single output artifact was copied, skipped or removed.

    Attributes:
        action: What happened to the artifact.
        path: Source path for copies and skips, output path for removals.
        target: Output path (empty for skips).
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    action: Literal["copied", "excluded", "removed", "removed_dir"]
    path: str
    target: str
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Server events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ServerTransition:
    """The preview server changed state.

    Attributes:
        state: New state after the transition.
        backend: Server backend name (``"pounce"`` or ``"engine"``).
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    state: Literal["running", "stopped"]
    backend: str
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

type ProwlEvent = BuildCompleted | BuildFailed | FileSynced | ServerTransition


def now_ns() -> int:
    """Return the current monotonic clock value in nanoseconds."""
    return time.monotonic_ns()
