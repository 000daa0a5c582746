"""Shared type definitions for prowl."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from prowl._errors import ProwlError

# Kind of filesystem change delivered by the watch host
type ChangeKind = Literal["added", "modified", "removed"]

# A source path as delivered by the watch host (relative to the working directory)
type SourcePath = str


@dataclass(frozen=True, slots=True)
class Ok:
    """The handler completed; chained handlers may run."""

    @property
    def failed(self) -> bool:
        return False


@dataclass(frozen=True, slots=True)
class Failed:
    """The handler failed; the host skips every chained handler after it.

    Attributes:
        error: The failure that aborted the handler.

    """

    error: ProwlError

    @property
    def failed(self) -> bool:
        return True


type HandlerResult = Ok | Failed
