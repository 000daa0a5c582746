"""Watch host: feeds change batches from watchfiles to the handlers.

Each raw watchfiles change set is split into up to three batches (modified,
added, removed), with paths made relative to the working directory.  Batches
are dispatched serially from a single thread.  A ``Failed`` result skips the
rest of the batches from the same change set.
"""

from __future__ import annotations

import os
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING

from watchfiles import Change, DefaultFilter

from prowl._types import Ok

if TYPE_CHECKING:
    from collections.abc import Iterable

    from prowl._types import ChangeKind, HandlerResult
    from prowl.orchestrator import Orchestrator


@dataclass(frozen=True, slots=True)
class ChangeBatch:
    """Paths that changed the same way in one notification.

    Attributes:
        kind: Type of filesystem change.
        paths: Changed paths, relative to the working directory, sorted.

    """

    kind: ChangeKind
    paths: tuple[str, ...]


# Mapping from watchfiles Change enum to our kind literals.
_CHANGE_KIND_MAP: dict[Change, ChangeKind] = {
    Change.added: "added",
    Change.modified: "modified",
    Change.deleted: "removed",
}

# Dispatch order within one change set.
_KIND_ORDER: tuple[ChangeKind, ...] = ("modified", "added", "removed")


def _is_within(path: str, directory: str) -> bool:
    return path == directory or path.startswith(directory.rstrip(os.sep) + os.sep)


def group_changes(
    raw_changes: Iterable[tuple[Change, str]],
    cwd: str,
    ignore_dirs: Iterable[str] = (),
    include: Iterable[str] | None = None,
) -> list[ChangeBatch]:
    """Split a watchfiles change set into per-kind batches.

    Paths under any of *ignore_dirs* (absolute) are dropped, which keeps the
    output tree from re-triggering builds.  When *include* is given, only
    paths equal to or under one of its absolute entries are kept.  Added or
    modified directories are dropped; watchfiles reports their files too.
    """
    ignored = tuple(ignore_dirs)
    included = tuple(include) if include is not None else None
    grouped: dict[ChangeKind, set[str]] = {}
    for change_type, path_str in raw_changes:
        absolute = os.path.abspath(path_str)
        if any(_is_within(absolute, d) for d in ignored):
            continue
        if included is not None and not any(_is_within(absolute, d) for d in included):
            continue
        kind = _CHANGE_KIND_MAP.get(change_type, "modified")
        if kind != "removed" and os.path.isdir(absolute):
            continue
        grouped.setdefault(kind, set()).add(os.path.relpath(absolute, cwd))

    return [
        ChangeBatch(kind=kind, paths=tuple(sorted(grouped[kind])))
        for kind in _KIND_ORDER
        if kind in grouped
    ]


def dispatch(batches: Iterable[ChangeBatch], orchestrator: Orchestrator) -> HandlerResult:
    """Run the handler for each batch, stopping at the first failure."""
    handlers = {
        "modified": orchestrator.on_modified,
        "added": orchestrator.on_added,
        "removed": orchestrator.on_removed,
    }
    for batch in batches:
        result = handlers[batch.kind](list(batch.paths))
        if result.failed:
            return result
    return Ok()


class WatchHost:
    """Watches the working directory and drives an Orchestrator.

    Only changes inside the source directory, plus the config files, reach
    the handlers.

    ``run()`` blocks in the calling thread; ``start()`` runs the same loop in
    a daemon thread.

    Args:
        orchestrator: Receives the change batches.
        root: Directory to watch (defaults to the working directory).
        debounce: watchfiles debounce in milliseconds.

    """

    def __init__(
        self,
        orchestrator: Orchestrator,
        root: str | None = None,
        debounce: int = 300,
    ) -> None:
        self._orchestrator = orchestrator
        self._root = root or os.getcwd()
        self._debounce = debounce
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def is_running(self) -> bool:
        """Whether the watcher background thread is active."""
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start watching in a background thread."""
        if self.is_running:
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self.run,
            name="prowl-watcher",
            daemon=True,
        )
        self._thread.start()

    def stop(self) -> None:
        """Signal the watcher to stop and wait for the thread to finish."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=5.0)
            self._thread = None

    def run(self) -> None:
        """Watch until stopped, dispatching each change set."""
        from watchfiles import watch

        for raw_changes in watch(
            self._root,
            watch_filter=DefaultFilter(),
            stop_event=self._stop_event,
            debounce=self._debounce,
            step=100,
        ):
            config = self._orchestrator.configs.current
            batches = group_changes(
                raw_changes,
                os.getcwd(),
                ignore_dirs=(config.destination_dir,),
                include=(
                    config.source_dir,
                    *(os.path.abspath(name) for name in config.config_files),
                ),
            )
            dispatch(batches, self._orchestrator)
