"""Path classification, exclusion and output mapping.

Pure functions over path strings.  Paths are compared as delivered by the
watch host, relative to the working directory.
"""

from __future__ import annotations

import fnmatch
import os
import posixpath
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from prowl._types import SourcePath
    from prowl.config import ExtensionMatcher

# Comma-separated paths another sync tool is already handling.
IGNORE_ENV_VAR = "PROWL_IGNORE_FILES"


@dataclass(frozen=True, slots=True)
class Classification:
    """Result of classifying a change batch.

    Attributes:
        content: Paths the site engine generates output from.
        static: Paths copied verbatim to the output tree.

    Paths starting with ``_`` that are not content belong to the engine and
    appear in neither tuple.

    """

    content: tuple[SourcePath, ...]
    static: tuple[SourcePath, ...]


def classify(paths: Iterable[SourcePath], matcher: ExtensionMatcher) -> Classification:
    """Partition *paths* into content and static, preserving input order."""
    content: list[SourcePath] = []
    static: list[SourcePath] = []
    for path in paths:
        if matcher.matches(path):
            content.append(path)
        elif not path.startswith("_"):
            static.append(path)
    return Classification(tuple(content), tuple(static))


def in_source(path: SourcePath, source: str) -> bool:
    """Whether *path* lies inside the source directory.

    Every path is inside a ``./`` source.
    """
    if source.startswith("."):
        return True
    prefix = source.rstrip("/")
    return path == prefix or path.startswith(prefix + "/")


def is_excluded(path: SourcePath, patterns: Iterable[str]) -> bool:
    """Whether *path* matches any exclusion glob (``*``, ``?``, ``[...]``)."""
    return any(fnmatch.fnmatchcase(path, pattern) for pattern in patterns)


def external_ignores(environ: Mapping[str, str] | None = None) -> frozenset[str]:
    """Paths listed in ``PROWL_IGNORE_FILES``."""
    env = os.environ if environ is None else environ
    raw = env.get(IGNORE_ENV_VAR)
    if not raw:
        return frozenset()
    return frozenset(raw.split(","))


def drop_external_ignores(
    paths: Sequence[SourcePath], environ: Mapping[str, str] | None = None,
) -> list[SourcePath]:
    """Remove paths another tool owns, keeping the rest in order."""
    ignored = external_ignores(environ)
    return [p for p in paths if p not in ignored]


def source_relative(path: SourcePath, source: str) -> str:
    """Strip the source directory from *path*, giving its output-relative form."""
    if source.startswith("."):
        return path
    if path.startswith(source):
        return path[len(source):].lstrip("/")
    return path


def output_path(path: SourcePath, source: str, destination: str) -> str:
    """Map a source path to its location in the output tree.

    A source of ``./`` cannot be expressed as a prefix, so the path is joined
    onto the destination instead.  Callers filter with ``in_source`` first;
    a path outside the source comes back unchanged.
    """
    if source.startswith("."):
        return posixpath.join(destination, path)
    if path.startswith(source):
        return destination + path[len(source):]
    return path
