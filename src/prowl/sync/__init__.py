"""Sync layer: turns a change batch into actions on the output tree.

Classifies changed paths, then either rebuilds the whole site or copies and
removes individual static files.
"""

from prowl.sync.build import BuildCoordinator
from prowl.sync.classifier import (
    Classification,
    classify,
    drop_external_ignores,
    in_source,
    is_excluded,
    output_path,
)
from prowl.sync.copier import SyncCoordinator

__all__ = [
    "BuildCoordinator",
    "Classification",
    "SyncCoordinator",
    "classify",
    "drop_external_ignores",
    "in_source",
    "is_excluded",
    "output_path",
]
