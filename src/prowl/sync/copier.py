"""Selective copy and removal of static output artifacts.

Static files are mirrored into the output tree without involving the site
engine.  A failure aborts the rest of the batch; files already copied or
removed stay that way.
"""

from __future__ import annotations

import os
import shutil
from typing import TYPE_CHECKING

from prowl import console
from prowl._errors import SyncFailure
from prowl._types import Failed, Ok
from prowl.observability.events import FileSynced, now_ns
from prowl.sync.classifier import (
    drop_external_ignores,
    is_excluded,
    output_path,
    source_relative,
)

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from prowl._types import HandlerResult, SourcePath
    from prowl.config import SiteConfig
    from prowl.config_loader import ConfigManager
    from prowl.observability.log import EventLog
    from prowl.server import ServerSupervisor


def _plural(word: str, count: int) -> str:
    return word if count == 1 else f"{word}s"


class SyncCoordinator:
    """Copies and removes individual output files.

    Args:
        configs: Source of the current SiteConfig.
        supervisor: Stopped when a copy or removal fails.
        events: Optional event log.
        environ: Environment consulted for ``PROWL_IGNORE_FILES``
            (defaults to ``os.environ``).

    """

    def __init__(
        self,
        configs: ConfigManager,
        supervisor: ServerSupervisor,
        events: EventLog | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._configs = configs
        self._supervisor = supervisor
        self._events = events
        self._environ = environ

    def copy(self, paths: Sequence[SourcePath]) -> HandlerResult:
        """Copy each static path to its output location.

        Directories are skipped; their files arrive as changes of their own.
        """
        config = self._configs.current
        files = [
            f for f in drop_external_ignores(paths, self._environ)
            if not os.path.isdir(f)
        ]
        if not files:
            return Ok()

        try:
            if not config.silent:
                label = _plural("copied file", len(files))
                console.info(f"{config.msg_prefix} {console.green(label)}")
            console.display_line()
            for file in files:
                self._copy_one(file, config)
            console.display_line()
        except OSError as exc:
            return self._fail("copy", exc, config)
        return Ok()

    def _copy_one(self, file: SourcePath, config: SiteConfig) -> None:
        if is_excluded(source_relative(file, config.source), config.exclude):
            note = f"Excluded: ignoring changes to {file}"
            console.display_line(console.yellow("  ~ ") + console.yellow(note))
            self._record("excluded", file, "")
            return

        target = output_path(file, config.source, config.destination)
        parent = os.path.dirname(target)
        if parent:
            os.makedirs(parent, exist_ok=True)
        shutil.copy(file, target)
        console.display_line(console.green("  → ") + target)
        self._record("copied", file, target)

    def remove(self, paths: Sequence[SourcePath]) -> HandlerResult:
        """Delete the output files of removed static paths.

        Does nothing unless at least one of the paths still exists on disk;
        another tool may already have cleaned up.  A parent directory left
        empty is deleted right away, so a later path in the same batch may
        find its parent already gone.
        """
        config = self._configs.current
        files = drop_external_ignores(paths, self._environ)
        if not any(os.path.exists(f) for f in files):
            return Ok()

        try:
            if not config.silent:
                label = _plural("removed file", len(files))
                console.info(f"{config.msg_prefix} {console.red(label)}")
            console.display_line()
            for file in files:
                self._remove_one(file, config)
            console.display_line()
        except OSError as exc:
            return self._fail("remove", exc, config)
        return Ok()

    def _remove_one(self, file: SourcePath, config: SiteConfig) -> None:
        target = output_path(file, config.source, config.destination)
        if os.path.isdir(target):
            shutil.rmtree(target)
            console.display_line(console.red("  x ") + target)
            self._record("removed", file, target)
        elif os.path.exists(target):
            os.remove(target)
            console.display_line(console.red("  x ") + target)
            self._record("removed", file, target)

        parent = os.path.dirname(target)
        if parent and os.path.isdir(parent) and not os.listdir(parent):
            shutil.rmtree(parent)
            console.display_line(console.red("  x ") + parent)
            self._record("removed_dir", file, parent)

    def _fail(self, action: str, exc: OSError, config: SiteConfig) -> HandlerResult:
        if not config.silent:
            console.error(f"{config.msg_prefix} {action} has failed")
        console.error(str(exc))
        self._supervisor.stop()
        return Failed(SyncFailure(f"{action} failed: {exc}"))

    def _record(self, action: str, path: SourcePath, target: str) -> None:
        if self._events is not None:
            self._events.append(FileSynced(
                action=action,  # type: ignore[arg-type]
                path=path,
                target=target,
                timestamp_ns=now_ns(),
            ))
