from __future__ import annotations

from .store import (
    Asset,
    AssetCodecError,
    AssetDirectory,
    AssetError,
    AssetLeaf,
    AssetMetadata,
    AssetNotADirectoryError,
    AssetNotFoundError,
    AssetReadError,
    AssetRestoreError,
    AssetStore,
    DiskLoader,
    EmbeddedLoader,
)

__all__ = [
    "Asset",
    "AssetMetadata",
    "AssetLeaf",
    "AssetDirectory",
    "AssetStore",
    "EmbeddedLoader",
    "DiskLoader",
    "AssetError",
    "AssetNotFoundError",
    "AssetNotADirectoryError",
    "AssetCodecError",
    "AssetReadError",
    "AssetRestoreError",
]
