from __future__ import annotations

"""
Asset Bundling Data Models.

Defines the records exchanged between the tree builder, the encoder and
the module generator while a bundle is being produced.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional, Tuple

from pybindata.runtime.store import AssetDirectory, AssetMetadata, Loader

# -----------------------------------------------------------------------------
# EMBEDDING MODES
# -----------------------------------------------------------------------------

class EmbedMode(str, Enum):
    """How asset content is carried by the generated module."""
    COMPRESS = "compress"
    RAW = "raw"
    DEBUG = "debug"

# -----------------------------------------------------------------------------
# DISCOVERY MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class AssetSource:
    """
    A regular file discovered below the input root.

    Attributes:
        name: Canonical asset path (lookup key).
        identifier: Symbol-safe name derived from the asset path.
        source_path: Absolute path of the file on disk.
        info: Metadata snapshot taken during the walk.
    """
    name: str
    identifier: str
    source_path: str
    info: AssetMetadata


@dataclass(frozen=True)
class AssetIndex:
    """
    Complete result of a tree walk.

    The table and the tree hold the same loader objects: every key of the
    table resolves to a leaf of the tree carrying its loader.
    """
    root: str
    sources: Tuple[AssetSource, ...]
    table: Mapping[str, Loader]
    tree: AssetDirectory

# -----------------------------------------------------------------------------
# ENCODING MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class EncodedAsset:
    """
    Embedded representation of one asset.

    Attributes:
        source: The discovered file this representation was built from.
        info: Metadata to embed; size reflects the bytes actually read.
        mode: Embedding mode applied.
        payload: Bytes to embed, or None in debug mode.
    """
    source: AssetSource
    info: AssetMetadata
    mode: EmbedMode
    payload: Optional[bytes] = None

    @property
    def name(self) -> str:
        return self.source.name

    @property
    def identifier(self) -> str:
        return self.source.identifier

    @property
    def compressed(self) -> bool:
        return self.mode is EmbedMode.COMPRESS
