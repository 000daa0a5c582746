"""Prowl entry points: ``watch`` and ``build``.

Both take the fields of ``WatchOptions`` as keyword arguments.
"""

from __future__ import annotations

import sys
from typing import Any

from prowl import console
from prowl.config import WatchOptions
from prowl.orchestrator import Orchestrator


def watch(**kwargs: Any) -> None:
    """Build the site, then rebuild or sync on every change until interrupted.

    With ``serve=True`` a preview server runs alongside and is stopped on
    exit or when a build fails.

    Args:
        **kwargs: WatchOptions fields.

    """
    from prowl.watcher import WatchHost

    orchestrator = Orchestrator(WatchOptions(**kwargs))
    orchestrator.on_start()

    host = WatchHost(orchestrator)
    try:
        host.run()
    except KeyboardInterrupt:
        print("", file=sys.stderr)
    finally:
        orchestrator.on_stop()
        report_session(orchestrator)


def report_session(orchestrator: Orchestrator) -> None:
    """Print what the session did, from the orchestrator's event log."""
    config = orchestrator.configs.current
    if config.silent:
        return
    counts = orchestrator.events.summary()
    console.info(
        f"{config.msg_prefix} session: {counts['builds']} build(s), "
        f"{counts['failed_builds']} failed, {counts['copied']} copied, "
        f"{counts['removed']} removed, {counts['excluded']} excluded, "
        f"{counts['server_starts']} server start(s)"
    )


def build(**kwargs: Any) -> bool:
    """Run one full build.  Returns False if it failed.

    Args:
        **kwargs: WatchOptions fields.

    """
    orchestrator = Orchestrator(WatchOptions(**kwargs))
    return not orchestrator.builder.build().failed
