from __future__ import annotations

"""
Bundle-Time Error Taxonomy.

Failures raised while validating configuration or walking the input tree.
Runtime failures (lookups, decoding, restores) are defined alongside the
store in 'pybindata.runtime.store' so that generated bundles stay
self-contained; they are re-exported here for convenience.
"""

from pybindata.runtime.store import (
    AssetCodecError,
    AssetError,
    AssetNotADirectoryError,
    AssetNotFoundError,
    AssetReadError,
    AssetRestoreError,
)

__all__ = [
    "BindataError",
    "ConfigurationError",
    "TraversalError",
    "AssetError",
    "AssetNotFoundError",
    "AssetNotADirectoryError",
    "AssetCodecError",
    "AssetReadError",
    "AssetRestoreError",
]


class BindataError(Exception):
    """Base class for failures that abort a bundling run."""


class ConfigurationError(BindataError):
    """
    The configuration can't be used to start a run.

    Raised before any bundling work begins, e.g. for a missing input
    directory or an output path that is an existing directory.
    """


class TraversalError(BindataError):
    """
    An entry of the input tree could not be read while bundling.

    Attributes:
        path: Filesystem path of the offending entry.
    """

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason
