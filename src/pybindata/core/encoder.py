from __future__ import annotations

"""
Asset Encoder.

Produces the embedded representation of each discovered asset: gzip
compressed bytes, raw bytes, or (in debug mode) only a reference to the
source file. Metadata snapshots travel unchanged in every mode.
"""

import gzip
import logging
from dataclasses import replace
from typing import Iterable, List

from pybindata.domain.asset_models import AssetSource, EmbedMode, EncodedAsset
from pybindata.domain.errors import TraversalError

logger = logging.getLogger(__name__)

# Fixed gzip header timestamp keeps generated output reproducible
_GZIP_MTIME = 0
_GZIP_LEVEL = 9

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def encode_assets(sources: Iterable[AssetSource], mode: EmbedMode) -> List[EncodedAsset]:
    """
    Encode a batch of assets in order.

    Args:
        sources: Assets discovered by the tree builder.
        mode: Embedding mode to apply to every asset.

    Returns:
        List[EncodedAsset]: One encoded record per source, same order.

    Raises:
        TraversalError: If a source file can't be read.
    """
    encoded = [encode_asset(source, mode) for source in sources]

    if mode is not EmbedMode.DEBUG:
        raw_total = sum(item.info.size for item in encoded)
        embedded_total = sum(len(item.payload or b"") for item in encoded)
        logger.info(f"Encoded {len(encoded)} assets ({raw_total} bytes -> {embedded_total} bytes, mode={mode.value}).")
    else:
        logger.info(f"Linked {len(encoded)} assets to their source files (debug mode).")

    return encoded


def encode_asset(source: AssetSource, mode: EmbedMode) -> EncodedAsset:
    """
    Build the embedded representation of a single asset.

    In debug mode the file content is never read; the generated loader
    reads the source path at call time instead.
    """
    if mode is EmbedMode.DEBUG:
        return EncodedAsset(source=source, info=source.info, mode=mode, payload=None)

    data = _read_source(source)
    info = replace(source.info, size=len(data))

    if mode is EmbedMode.COMPRESS:
        payload = compress_bytes(data)
    else:
        payload = data

    logger.debug(f"Encoded {source.name}: {len(data)} -> {len(payload)} bytes")
    return EncodedAsset(source=source, info=info, mode=mode, payload=payload)


def compress_bytes(data: bytes) -> bytes:
    """Compress data into a single, self-describing gzip member."""
    return gzip.compress(data, compresslevel=_GZIP_LEVEL, mtime=_GZIP_MTIME)

# -----------------------------------------------------------------------------
# INTERNAL HELPERS
# -----------------------------------------------------------------------------

def _read_source(source: AssetSource) -> bytes:
    try:
        with open(source.source_path, "rb") as f:
            return f.read()
    except OSError as e:
        raise TraversalError(source.source_path, e.strerror or str(e)) from e
