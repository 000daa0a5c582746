"""Prowl: a change-driven build orchestrator for static sites.

Watches a source tree and, for every batch of changes, either rebuilds the
whole site, copies changed static files into the output tree, or removes
stale output files.  Optionally supervises a preview server.

Quick start::

    import prowl

    prowl.watch(serve=True)       # Build, watch, and serve
    prowl.build()                 # One full build

"""

__version__ = "0.1.0"
__all__ = [
    "Orchestrator",
    "SiteConfig",
    "WatchOptions",
    "__version__",
    "build",
    "watch",
]


def __getattr__(name: str) -> object:
    """Lazy imports for the public API.

    Keeps ``import prowl`` fast while providing a clean top-level API.
    """
    if name == "WatchOptions":
        from prowl.config import WatchOptions

        return WatchOptions

    if name == "SiteConfig":
        from prowl.config import SiteConfig

        return SiteConfig

    if name == "Orchestrator":
        from prowl.orchestrator import Orchestrator

        return Orchestrator

    if name == "watch":
        from prowl.app import watch

        return watch

    if name == "build":
        from prowl.app import build

        return build

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
