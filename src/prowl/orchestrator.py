"""Change handlers: the entry points the watch host calls.

Each handler returns ``Ok()`` or ``Failed(error)``.  A ``Failed`` result tells
the host to skip every handler still queued for the current change cycle.

Routing for a change batch:

1. If the batch contains a config file, reload the configuration first.
2. Drop paths outside the source directory.
3. If any path is content, run one full build.  Static paths in the same
   batch are dropped for this cycle.
4. Otherwise copy (added / modified) or remove (removed) the static paths.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

from prowl import console
from prowl._errors import ConfigError, ServerError
from prowl._types import Failed, Ok
from prowl.config_loader import ConfigManager
from prowl.engine import BengalEngine
from prowl.observability.log import EventLog
from prowl.server import ServerSupervisor
from prowl.sync.build import BuildCoordinator
from prowl.sync.classifier import classify, in_source
from prowl.sync.copier import SyncCoordinator

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from prowl._types import ChangeKind, HandlerResult, SourcePath
    from prowl.config import WatchOptions
    from prowl.engine import EngineFactory
    from prowl.server import Launcher


class Orchestrator:
    """Wires configuration, coordinators and the server supervisor together.

    Handler calls are serialized with a lock, so a host that delivers
    batches from several threads still sees them processed one at a time.

    Args:
        options: Caller options.
        configs: Pre-built ConfigManager (built from *options* if omitted).
        engine_factory: Builds the site engine from a SiteConfig.
        launcher: Starts preview-server units (see ``prowl.server``).
        events: Event log shared by every coordinator (a fresh one if omitted).
        environ: Environment for ``PROWL_IGNORE_FILES`` lookups.

    """

    def __init__(
        self,
        options: WatchOptions,
        *,
        configs: ConfigManager | None = None,
        engine_factory: EngineFactory = BengalEngine,
        launcher: Launcher | None = None,
        events: EventLog | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self.options = options
        self.configs = configs or ConfigManager(options)
        self.events = events if events is not None else EventLog()
        self.supervisor = ServerSupervisor(
            self.configs,
            launcher=launcher,
            engine_factory=engine_factory,
            events=self.events,
        )
        self.builder = BuildCoordinator(
            self.configs,
            self.supervisor,
            engine_factory=engine_factory,
            events=self.events,
        )
        self.syncer = SyncCoordinator(
            self.configs, self.supervisor, events=self.events, environ=environ,
        )
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def on_start(self) -> HandlerResult:
        """Build once, then start the preview server if serving was requested."""
        with self._lock:
            result = self.builder.build()
            if result.failed:
                return result

            config = self.configs.current
            if self.options.serve:
                try:
                    self.supervisor.start()
                except ServerError as exc:
                    console.error(str(exc))
                    return Failed(exc)
                if not config.silent:
                    console.info(
                        f"{config.msg_prefix} watching and serving at "
                        f"{config.host}:{config.port}{config.baseurl}"
                    )
            elif not config.silent:
                console.info(f"{config.msg_prefix} watching")
            return Ok()

    def on_reload(self) -> HandlerResult:
        """Stop the server, reload configuration, and start over."""
        with self._lock:
            if self.supervisor.is_running:
                self.supervisor.stop()
            try:
                self.configs.reload()
            except ConfigError as exc:
                console.error(str(exc))
                return Failed(exc)
            return self.on_start()

    def on_stop(self) -> HandlerResult:
        with self._lock:
            self.supervisor.stop()
            return Ok()

    def reload_server(self) -> HandlerResult:
        """Restart the preview server without rebuilding."""
        with self._lock:
            try:
                self.supervisor.restart()
            except ServerError as exc:
                console.error(str(exc))
                return Failed(exc)
            return Ok()

    # ------------------------------------------------------------------
    # Change batches
    # ------------------------------------------------------------------

    def on_modified(self, paths: Sequence[SourcePath]) -> HandlerResult:
        return self.handle(paths, "modified")

    def on_added(self, paths: Sequence[SourcePath]) -> HandlerResult:
        return self.handle(paths, "added")

    def on_removed(self, paths: Sequence[SourcePath]) -> HandlerResult:
        return self.handle(paths, "removed")

    def handle(self, paths: Sequence[SourcePath], kind: ChangeKind) -> HandlerResult:
        """Route one change batch to a build, a copy, or a removal."""
        with self._lock:
            if self.configs.touches_config(paths):
                try:
                    self.configs.reload()
                except ConfigError as exc:
                    console.error(str(exc))
                    return Failed(exc)

            config = self.configs.current
            inside = [p for p in paths if in_source(p, config.source)]
            classification = classify(inside, config.matcher)
            if classification.content:
                return self.builder.build(classification.content, kind)
            if classification.static:
                if kind == "removed":
                    return self.syncer.remove(classification.static)
                return self.syncer.copy(classification.static)
            return Ok()
