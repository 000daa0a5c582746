"""Site-generation engine boundary.

Prowl never generates pages itself.  It constructs an engine with the current
SiteConfig and calls ``process()``; the engine raises ``RuntimeError`` when
the build fails.  The default engine is Bengal.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Callable

    from bengal.core.site import Site

    from prowl.config import SiteConfig


class SiteEngine(Protocol):
    """What prowl needs from a site generator."""

    def process(self) -> None:
        """Regenerate the whole output tree.  Raises RuntimeError on failure."""
        ...

    def serve(self) -> None:
        """Run the engine's own preview server until the process is killed."""
        ...


type EngineFactory = Callable[[SiteConfig], SiteEngine]


class BengalEngine:
    """Bengal static site generator behind the SiteEngine protocol.

    Bengal's own exceptions are re-raised as ``RuntimeError`` so callers only
    handle one failure type.

    Args:
        config: Snapshot the site is built from.

    """

    def __init__(self, config: SiteConfig) -> None:
        self._config = config

    def _load_site(self) -> Site:
        from bengal.core.site import Site

        site = Site.from_config(Path(self._config.source_dir))
        site.output_dir = Path(self._config.destination_dir)
        return site

    def process(self) -> None:
        try:
            self._load_site().build()
        except RuntimeError:
            raise
        except Exception as exc:
            raise RuntimeError(str(exc)) from exc

    def serve(self) -> None:
        site = self._load_site()
        site.serve(host=self._config.host, port=self._config.port)
