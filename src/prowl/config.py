"""Prowl configuration.

Two layers, both frozen after creation:

- ``WatchOptions`` holds what the caller asked for (CLI flags or keyword
  arguments to ``prowl.watch``).
- ``SiteConfig`` is the merged snapshot handed to every component.  It is
  rebuilt wholesale on reload, never mutated in place.

``merge_settings`` and ``SiteConfig.from_settings`` are pure, so the
precedence rules can be tested without touching the filesystem.
"""

from __future__ import annotations

import os
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

# Extensions the site engine treats as generated content.
CONTENT_EXTENSIONS: tuple[str, ...] = (
    "md", "mkd", "mkdn", "markdown", "textile", "html",
    "haml", "slim", "xml", "yml", "sass", "scss",
)

DEFAULT_CONFIG_FILE = "_config.yml"

# Values used when neither the config files nor the caller set a key.
ENGINE_DEFAULTS: Mapping[str, Any] = {
    "source": ".",
    "destination": "_site",
    "exclude": [],
    "host": "127.0.0.1",
    "port": 4000,
    "baseurl": "",
    "show_drafts": False,
    "future": False,
}


@dataclass(frozen=True, slots=True)
class ExtensionMatcher:
    """Case-insensitive, end-anchored suffix matcher for content files.

    Compiled once per configuration load.  ``foo.xml`` matches ``xml`` but
    ``foo.xmlx`` does not, and a bare ``markdown`` without a dot never matches.

    Attributes:
        extensions: Normalized extensions (no leading dot), in match order.
        pattern: The compiled alternation.

    """

    extensions: tuple[str, ...]
    pattern: re.Pattern[str]

    @classmethod
    def compile(cls, extra: Iterable[str] = ()) -> ExtensionMatcher:
        """Build a matcher from the caller's extensions plus the built-in set."""
        seen: dict[str, None] = {}
        for ext in (*extra, *CONTENT_EXTENSIONS):
            ext = ext.lstrip(".")
            if ext:
                seen.setdefault(ext, None)
        extensions = tuple(seen)
        alternation = "|".join(re.escape(f".{ext}") for ext in extensions)
        return cls(extensions, re.compile(f"(?:{alternation})$", re.IGNORECASE))

    def matches(self, path: str) -> bool:
        return self.pattern.search(path) is not None


@dataclass(frozen=True, slots=True)
class WatchOptions:
    """Options supplied by the caller.

    Attributes:
        extensions: Extra content extensions on top of ``CONTENT_EXTENSIONS``.
        config: Configuration file paths, relative to the working directory.
        serve: Run the preview server alongside the watcher.
        server_config: Path to a Python file exposing an ASGI ``app`` for the
            preview server, overriding the default static file app.
        drafts: Force draft posts on, whatever the config files say.
        future: Force future-dated posts on, whatever the config files say.
        config_hash: A full override mapping; replaces the caller overrides
            when merging with the config files.
        silent: Suppress informational output.  Errors are always shown.
        msg_prefix: Prefix for every status line.

    """

    extensions: tuple[str, ...] = ()
    config: tuple[str, ...] = (DEFAULT_CONFIG_FILE,)
    serve: bool = False
    server_config: str | None = None
    drafts: bool = False
    future: bool = False
    config_hash: Mapping[str, Any] | None = None
    silent: bool = False
    msg_prefix: str = "Prowl"

    def __post_init__(self) -> None:
        # A single config path is accepted as a convenience.
        if isinstance(self.config, str):
            object.__setattr__(self, "config", (self.config,))
        elif not isinstance(self.config, tuple):
            object.__setattr__(self, "config", tuple(self.config))
        if not isinstance(self.extensions, tuple):
            object.__setattr__(self, "extensions", tuple(self.extensions))


def merge_settings(
    defaults: Mapping[str, Any],
    file_values: Mapping[str, Any],
    overrides: Mapping[str, Any],
) -> dict[str, Any]:
    """Merge the three configuration layers.

    Precedence: caller override > config file value > engine default.
    """
    return {**defaults, **file_values, **overrides}


def local_path(path: str, cwd: str) -> str:
    """Express an absolute path relative to *cwd*.

    Returns ``"./"`` when *path* is *cwd* itself.  Paths outside *cwd* keep
    their absolute form minus the leading slash.
    """
    if path == cwd or path.startswith(cwd.rstrip("/") + "/"):
        path = path[len(cwd.rstrip("/")):]
    if path == "":
        return "./"
    return path.lstrip("/")


def _absolute(value: Any, cwd: str) -> str:
    return os.path.normpath(os.path.join(cwd, str(value)))


@dataclass(frozen=True, slots=True)
class SiteConfig:
    """Merged configuration snapshot.

    Attributes:
        source: Source directory relative to the working directory (``"./"``
            when it is the working directory).
        destination: Output directory, normalized the same way.
        config_files: Config file paths whose change triggers a reload.
        exclude: Glob patterns for paths that must never be copied.
        host: Preview server bind address.
        port: Preview server port.
        baseurl: Base URL the site is served under.
        show_drafts: Render draft posts.
        future: Render future-dated posts.
        silent: Suppress informational output.
        msg_prefix: Prefix for every status line.
        server_config: Optional ASGI app file for the preview server.
        matcher: Compiled content-extension matcher.
        settings: The full merged mapping, passed through to the engine.

    """

    source: str = "./"
    destination: str = "_site"
    config_files: tuple[str, ...] = (DEFAULT_CONFIG_FILE,)
    exclude: tuple[str, ...] = ()
    host: str = "127.0.0.1"
    port: int = 4000
    baseurl: str = ""
    show_drafts: bool = False
    future: bool = False
    silent: bool = False
    msg_prefix: str = "Prowl"
    server_config: str | None = None
    matcher: ExtensionMatcher = field(default_factory=ExtensionMatcher.compile)
    settings: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_settings(
        cls,
        settings: Mapping[str, Any],
        options: WatchOptions,
        *,
        cwd: str,
        config_files: tuple[str, ...] | None = None,
    ) -> SiteConfig:
        """Build a snapshot from merged settings and the caller's options.

        Caller flags for drafts, future and silent win when set; otherwise the
        merged setting applies.
        """
        merged = dict(settings)
        merged["show_drafts"] = bool(options.drafts or merged.get("show_drafts"))
        merged["future"] = bool(options.future or merged.get("future"))

        source_abs = _absolute(merged.get("source", "."), cwd)
        destination_abs = _absolute(merged.get("destination", "_site"), cwd)
        merged["source"] = source_abs
        merged["destination"] = destination_abs

        exclude = merged.get("exclude") or ()
        if isinstance(exclude, str):
            exclude = (exclude,)

        return cls(
            source=local_path(source_abs, cwd),
            destination=local_path(destination_abs, cwd),
            config_files=config_files if config_files is not None else options.config,
            exclude=tuple(str(p) for p in exclude),
            host=str(merged.get("host", "127.0.0.1")),
            port=int(merged.get("port", 4000)),
            baseurl=str(merged.get("baseurl") or ""),
            show_drafts=merged["show_drafts"],
            future=merged["future"],
            silent=bool(options.silent or merged.get("silent")),
            msg_prefix=options.msg_prefix,
            server_config=options.server_config or merged.get("server_config"),
            matcher=ExtensionMatcher.compile(options.extensions),
            settings=merged,
        )

    @property
    def source_dir(self) -> str:
        """Absolute source directory."""
        return str(self.settings.get("source") or os.path.abspath(self.source))

    @property
    def destination_dir(self) -> str:
        """Absolute output directory."""
        return str(self.settings.get("destination") or os.path.abspath(self.destination))
