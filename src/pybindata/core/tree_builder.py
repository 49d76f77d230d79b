from __future__ import annotations

"""
Asset Tree Builder.

Walks the input root in a stable order, snapshots the metadata of every
regular file and assembles the flat asset table together with the
hierarchical directory tree mirroring the canonical asset paths.
"""

import logging
import os
import stat
from typing import Dict, Iterator, List, Tuple, Union

from pybindata.core.naming import asset_identifier, canonical_path, has_prefix
from pybindata.domain.asset_models import AssetIndex, AssetSource
from pybindata.domain.errors import TraversalError
from pybindata.runtime.store import (
    AssetDirectory,
    AssetLeaf,
    AssetMetadata,
    DiskLoader,
    Loader,
)

logger = logging.getLogger(__name__)

# Mutable nested structure used while the tree is being assembled
_DraftTree = Dict[str, Union["_DraftTree", AssetLeaf]]

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def build_asset_tree(
        input_path: str,
        *,
        prefix: str = "",
        recursive: bool = False,
) -> AssetIndex:
    """
    Discover every regular file below input_path and index it.

    Directory entries are visited in lexicographic order so that repeated
    runs over the same input produce the same index. Without 'recursive',
    files inside sub-directories are left out entirely.

    Args:
        input_path: Root directory of the assets.
        prefix: Leading path substring stripped from asset keys.
        recursive: Whether to descend into sub-directories.

    Returns:
        AssetIndex: Sources, asset table and directory tree.

    Raises:
        TraversalError: If the root or any entry below it can't be read,
                        or if two files map onto the same asset path.
    """
    root = os.path.abspath(input_path)
    if not os.path.isdir(root):
        raise TraversalError(root, "input path does not exist or is not a directory")

    logger.info(f"Scanning assets in: {root} (recursive={recursive})")

    sources: List[AssetSource] = []
    seen: Dict[str, str] = {}

    for dir_path, file_names in _walk_sorted(root, recursive):
        for file_name in file_names:
            full_path = os.path.join(dir_path, file_name)
            st = _stat_entry(full_path)
            if not stat.S_ISREG(st.st_mode):
                logger.debug(f"Skipping non-regular entry: {full_path}")
                continue

            rel_path = os.path.relpath(full_path, root)
            name = _asset_key(rel_path, os.path.join(input_path, rel_path), full_path, prefix)
            if not name:
                raise TraversalError(full_path, f"asset path is empty after stripping prefix '{prefix}'")
            if name in seen:
                raise TraversalError(full_path, f"asset path '{name}' already taken by {seen[name]}")
            seen[name] = full_path

            info = AssetMetadata(
                name=name,
                size=st.st_size,
                mode=stat.S_IMODE(st.st_mode),
                mtime=int(st.st_mtime),
            )
            sources.append(AssetSource(
                name=name,
                identifier=asset_identifier(name),
                source_path=full_path,
                info=info,
            ))
            logger.debug(f"Indexed asset: {name}")

    sources.sort(key=lambda s: s.name)

    table: Dict[str, Loader] = {s.name: DiskLoader(s.source_path, s.info) for s in sources}
    tree = _assemble_tree(sources, table)

    logger.info(f"Indexed {len(sources)} assets.")
    return AssetIndex(root=root, sources=tuple(sources), table=table, tree=tree)

# -----------------------------------------------------------------------------
# INTERNAL HELPERS (WALK)
# -----------------------------------------------------------------------------

def _walk_sorted(root: str, recursive: bool) -> Iterator[Tuple[str, List[str]]]:
    """Yield (directory, sorted file names) pairs, failing fast on unreadable directories."""
    for dir_path, dirs, files in os.walk(root, onerror=_raise_traversal_error):
        if recursive:
            dirs.sort()
        else:
            dirs[:] = []
        yield dir_path, sorted(files)


def _raise_traversal_error(err: OSError) -> None:
    raise TraversalError(err.filename or "<unknown>", err.strerror or str(err)) from err


def _stat_entry(full_path: str) -> os.stat_result:
    try:
        return os.stat(full_path)
    except OSError as e:
        raise TraversalError(full_path, e.strerror or str(e)) from e


def _asset_key(rel_path: str, given_path: str, full_path: str, prefix: str) -> str:
    """
    Pick the form of the path the prefix applies to.

    The prefix is matched against the path relative to the root first, then
    against the path as spelled from the configured input, then against the
    absolute path. Without a match the relative path is used unstripped.
    """
    if prefix:
        for candidate in (rel_path, given_path, full_path):
            if has_prefix(candidate, prefix):
                return canonical_path(candidate, prefix)
    return canonical_path(rel_path)

# -----------------------------------------------------------------------------
# INTERNAL HELPERS (TREE)
# -----------------------------------------------------------------------------

def _assemble_tree(sources: List[AssetSource], table: Dict[str, Loader]) -> AssetDirectory:
    """Insert every asset under its path segments, then freeze the draft."""
    draft: _DraftTree = {}

    for source in sources:
        *parents, leaf_name = source.name.split("/")
        level = draft
        for segment in parents:
            node = level.setdefault(segment, {})
            if not isinstance(node, dict):
                raise TraversalError(
                    source.source_path, f"'{segment}' is both an asset and a directory"
                )
            level = node

        if leaf_name in level:
            raise TraversalError(
                source.source_path, f"'{source.name}' is both an asset and a directory"
            )
        level[leaf_name] = AssetLeaf(table[source.name])

    return _freeze(draft)


def _freeze(draft: _DraftTree) -> AssetDirectory:
    children = {
        segment: _freeze(node) if isinstance(node, dict) else node
        for segment, node in draft.items()
    }
    return AssetDirectory(children)
