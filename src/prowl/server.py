"""Preview server supervision.

At most one preview server runs at a time.  It lives in a separate process so
``stop()`` can terminate it outright, whatever it is doing.

Backends, in order of preference:

- **pounce**: Pounce serving a Chirp app, either the destination directory
  through ``StaticFiles`` or the ASGI ``app`` defined in the server-config
  file.  Used when both libraries are importable.
- **engine**: the site engine's own ``serve()``.
"""

from __future__ import annotations

import importlib.util
import multiprocessing
import os
import sys
from functools import partial
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

from prowl import console
from prowl._errors import ServerError
from prowl.engine import BengalEngine
from prowl.observability.events import ServerTransition, now_ns

if TYPE_CHECKING:
    from collections.abc import Callable

    from prowl.config import SiteConfig
    from prowl.config_loader import ConfigManager
    from prowl.engine import EngineFactory
    from prowl.observability.log import EventLog

# Picked up when no server_config is given.
LOCAL_SERVER_CONFIG = "prowl_app.py"


class ServerUnit(Protocol):
    """A running background server.  ``multiprocessing.Process`` satisfies it."""

    def is_alive(self) -> bool: ...

    def terminate(self) -> None: ...


type Launcher = Callable[[SiteConfig], ServerUnit]


def pounce_available() -> bool:
    """Whether the Pounce + Chirp backend can be used."""
    return (
        importlib.util.find_spec("pounce") is not None
        and importlib.util.find_spec("chirp") is not None
    )


def backend_name() -> str:
    return "pounce" if pounce_available() else "engine"


# ---------------------------------------------------------------------------
# Server process targets
# ---------------------------------------------------------------------------


def load_server_app(config: SiteConfig) -> Any:
    """Return the ASGI app the Pounce backend serves.

    Resolution order: ``config.server_config``, then ``prowl_app.py`` in the
    working directory, then a Chirp app serving the destination directory.
    ``PROWL_ROOT`` and ``PROWL_ENV`` are exported for app files to read.
    """
    os.environ["PROWL_ROOT"] = config.destination_dir
    os.environ.setdefault("PROWL_ENV", "development")

    app_file = config.server_config
    if app_file is None and Path(LOCAL_SERVER_CONFIG).is_file():
        app_file = LOCAL_SERVER_CONFIG
    if app_file is None:
        return _static_app(config)

    path = Path(app_file)
    if not path.is_file():
        msg = f"server config {app_file!r} not found"
        raise ServerError(msg)
    module_name = f"prowl_server_{path.stem}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        msg = f"server config {app_file!r}: failed to load {path}"
        raise ServerError(msg)
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    spec.loader.exec_module(module)
    app = getattr(module, "app", None)
    if app is None:
        msg = f"server config {app_file!r}: no 'app' defined in {path}"
        raise ServerError(msg)
    return app


def _static_app(config: SiteConfig) -> Any:
    from chirp import App, AppConfig
    from chirp.middleware import StaticFiles

    app = App(config=AppConfig(debug=True, host=config.host, port=config.port))
    prefix = "/" + config.baseurl.strip("/") if config.baseurl.strip("/") else "/"
    app.add_middleware(StaticFiles(directory=Path(config.destination_dir), prefix=prefix))
    return app


def _run_pounce(config: SiteConfig) -> None:
    from pounce.config import ServerConfig
    from pounce.server import Server

    app = load_server_app(config)
    Server(ServerConfig(host=config.host, port=config.port, workers=1), app).run()


def _run_engine(config: SiteConfig, engine_factory: EngineFactory) -> None:
    engine_factory(config).serve()


def spawn_server(
    config: SiteConfig, engine_factory: EngineFactory = BengalEngine,
) -> ServerUnit:
    """Start the preview server in a daemon process and return it."""
    if pounce_available():
        target: Callable[..., None] = _run_pounce
        args: tuple[Any, ...] = (config,)
    else:
        target = _run_engine
        args = (config, engine_factory)
    process = multiprocessing.Process(
        target=target, args=args, name="prowl-server", daemon=True,
    )
    process.start()
    return process


# ---------------------------------------------------------------------------
# Supervisor
# ---------------------------------------------------------------------------


class ServerSupervisor:
    """Owns the single preview-server unit.

    The handle is private; callers only get ``start``, ``stop``, ``restart``
    and ``is_running``.

    Args:
        configs: Source of the current SiteConfig.
        launcher: Starts a server unit for a config.  Defaults to
            ``spawn_server`` with *engine_factory*.
        engine_factory: Engine used by the ``engine`` backend.
        events: Optional event log.

    """

    def __init__(
        self,
        configs: ConfigManager,
        launcher: Launcher | None = None,
        engine_factory: EngineFactory = BengalEngine,
        events: EventLog | None = None,
    ) -> None:
        self._configs = configs
        self._launcher = launcher or partial(spawn_server, engine_factory=engine_factory)
        self._events = events
        self._handle: ServerUnit | None = None
        self._backend = ""

    @property
    def is_running(self) -> bool:
        return self._handle is not None and self._handle.is_alive()

    def start(self) -> None:
        """Start the server.  A warning and no-op if one is already running."""
        config = self._configs.current
        if self.is_running:
            console.warning(f"{config.msg_prefix} using an old server unit!")
            return

        backend = backend_name()
        try:
            self._handle = self._launcher(config)
        except OSError as exc:
            msg = f"Failed to start preview server: {exc}"
            raise ServerError(msg) from exc
        self._backend = backend
        if not config.silent and backend == "pounce":
            console.info(f"{config.msg_prefix} running Pounce")
        self._record("running")

    def stop(self) -> None:
        """Terminate the server if one exists.  Safe to call at any time."""
        handle, self._handle = self._handle, None
        if handle is None:
            return
        if handle.is_alive():
            handle.terminate()
        self._record("stopped")

    def restart(self) -> None:
        self.stop()
        self.start()

    def _record(self, state: str) -> None:
        if self._events is not None:
            self._events.append(ServerTransition(
                state=state,  # type: ignore[arg-type]
                backend=self._backend,
                timestamp_ns=now_ns(),
            ))
