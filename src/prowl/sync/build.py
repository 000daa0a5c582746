"""Full regeneration of the output tree.

The changed paths only decide what is printed; the engine always rebuilds the
whole source tree.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from prowl import console
from prowl._errors import BuildFailure
from prowl._types import Failed, Ok
from prowl.engine import BengalEngine
from prowl.observability.events import BuildCompleted, BuildFailed, now_ns

if TYPE_CHECKING:
    from collections.abc import Sequence

    from prowl._types import ChangeKind, HandlerResult
    from prowl.config_loader import ConfigManager
    from prowl.engine import EngineFactory
    from prowl.observability.log import EventLog
    from prowl.server import ServerSupervisor

_REASONS: dict[str, str] = {
    "added": "Files added: ",
    "modified": "Files changed: ",
    "removed": "Files removed: ",
}


class BuildCoordinator:
    """Runs the site engine and reports the outcome.

    Args:
        configs: Source of the current SiteConfig.
        supervisor: Stopped when a build fails.
        engine_factory: Builds an engine from a SiteConfig.
        events: Optional event log.

    """

    def __init__(
        self,
        configs: ConfigManager,
        supervisor: ServerSupervisor,
        engine_factory: EngineFactory = BengalEngine,
        events: EventLog | None = None,
    ) -> None:
        self._configs = configs
        self._supervisor = supervisor
        self._engine_factory = engine_factory
        self._events = events

    def build(
        self,
        paths: Sequence[str] | None = None,
        kind: ChangeKind = "modified",
    ) -> HandlerResult:
        """Regenerate the site, printing *paths* as the reason.

        Returns ``Failed(BuildFailure)`` if the engine raises RuntimeError.
        The server is stopped first so it never serves a broken tree.
        """
        config = self._configs.current
        prefix = config.msg_prefix
        reason = _REASONS[kind] if paths else ""

        if not config.silent:
            console.info(f"{prefix} {reason}" + console.yellow("building..."))
        if paths:
            mark = console.marker(kind)
            console.display_block(f"{mark}{path}" for path in paths)

        try:
            t0 = time.perf_counter()
            self._engine_factory(config).process()
            elapsed = time.perf_counter() - t0
        except RuntimeError as exc:
            if not config.silent:
                console.error(f"{prefix} build has failed")
            console.error(str(exc))
            self._supervisor.stop()
            self._record(BuildFailed(message=str(exc), timestamp_ns=now_ns()))
            return Failed(BuildFailure(str(exc)))

        if not config.silent:
            done = console.green(f"{prefix} build completed in {round(elapsed, 2)}s ")
            console.info(f"{done}{config.source} → {config.destination}")
        self._record(BuildCompleted(
            trigger_count=len(paths or ()),
            source=config.source,
            destination=config.destination,
            duration_ms=elapsed * 1000,
            timestamp_ns=now_ns(),
        ))
        return Ok()

    def _record(self, event: BuildCompleted | BuildFailed) -> None:
        if self._events is not None:
            self._events.append(event)
