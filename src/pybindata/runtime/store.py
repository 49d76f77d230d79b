"""
Embedded Asset Store Runtime.

Read-only access layer over the asset table and directory tree produced at
bundling time. The source of this module is copied verbatim into every
generated bundle, so it must stay importable on its own and depend on the
standard library only.
"""

import gzip
import os
import zlib
from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, List, Mapping, Union

# -----------------------------------------------------------------------------
# ERRORS
# -----------------------------------------------------------------------------

class AssetError(Exception):
    """Base class for every failure raised by the asset store."""


class AssetNotFoundError(AssetError, LookupError):
    """The requested asset or directory path is absent from the bundle."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Asset {name} not found")
        self.name = name


class AssetNotADirectoryError(AssetError):
    """The requested path resolves to a file where a directory was expected."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Asset {name} is not a directory")
        self.name = name


class AssetCodecError(AssetError):
    """An embedded payload could not be decoded back to its original bytes."""

    def __init__(self, name: str, reason: str) -> None:
        super().__init__(f"Asset {name} can't be decoded: {reason}")
        self.name = name


class AssetReadError(AssetError):
    """A debug-mode asset could not be read from its source location."""

    def __init__(self, name: str, reason: str) -> None:
        super().__init__(f"Asset {name} can't be read: {reason}")
        self.name = name


class AssetRestoreError(AssetError, OSError):
    """Writing an asset back to the filesystem failed."""

    def __init__(self, name: str, target: str, reason: str) -> None:
        super().__init__(f"Asset {name} can't be restored to {target}: {reason}")
        self.name = name
        self.target = target

# -----------------------------------------------------------------------------
# RECORDS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class AssetMetadata:
    """
    Snapshot of the source file taken once at bundling time.

    Attributes:
        name: Canonical asset path.
        size: Content length in bytes.
        mode: Permission bits of the source file.
        mtime: Modification time in whole Unix seconds.
    """
    name: str
    size: int
    mode: int
    mtime: int

    def is_dir(self) -> bool:
        return False


@dataclass(frozen=True)
class Asset:
    """Decoded content of an asset paired with its metadata."""
    data: bytes
    info: AssetMetadata


Loader = Callable[[], Asset]


def canonical_name(name: str) -> str:
    """Normalize Windows separators so lookups always use forward slashes."""
    return name.replace("\\", "/")


def decode_payload(payload: bytes, info: AssetMetadata, compressed: bool) -> bytes:
    """
    Restore the original bytes of an embedded payload.

    Compressed payloads are single gzip members; the CRC and length trailer
    are checked by the decompressor and the decoded length is checked
    against the recorded size.

    Raises:
        AssetCodecError: If the payload is corrupt or truncated.
    """
    if not compressed:
        return bytes(payload)

    try:
        data = gzip.decompress(payload)
    except (OSError, EOFError, zlib.error) as e:
        raise AssetCodecError(info.name, str(e) or type(e).__name__) from e

    if len(data) != info.size:
        raise AssetCodecError(
            info.name, f"decoded {len(data)} bytes, expected {info.size}"
        )
    return data

# -----------------------------------------------------------------------------
# LOADERS
# -----------------------------------------------------------------------------

class EmbeddedLoader:
    """Loader for content captured into the bundle."""

    __slots__ = ("_payload", "_info", "_compressed")

    def __init__(self, payload: bytes, info: AssetMetadata, compressed: bool = True) -> None:
        self._payload = payload
        self._info = info
        self._compressed = compressed

    @property
    def info(self) -> AssetMetadata:
        return self._info

    def __call__(self) -> Asset:
        data = decode_payload(self._payload, self._info, self._compressed)
        return Asset(data=data, info=self._info)

    def __repr__(self) -> str:
        return f"<EmbeddedLoader {self._info.name}>"


class DiskLoader:
    """
    Debug-mode loader that re-reads the source file on every call.

    The metadata stays the snapshot recorded at bundling time. The source
    path is absolute, so a bundle moved to another machine will fail here.
    """

    __slots__ = ("_source_path", "_info")

    def __init__(self, source_path: str, info: AssetMetadata) -> None:
        self._source_path = source_path
        self._info = info

    @property
    def info(self) -> AssetMetadata:
        return self._info

    @property
    def source_path(self) -> str:
        return self._source_path

    def __call__(self) -> Asset:
        try:
            with open(self._source_path, "rb") as f:
                data = f.read()
        except OSError as e:
            raise AssetReadError(self._info.name, str(e)) from e
        return Asset(data=data, info=self._info)

    def __repr__(self) -> str:
        return f"<DiskLoader {self._info.name} -> {self._source_path}>"

# -----------------------------------------------------------------------------
# DIRECTORY TREE
# -----------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class AssetLeaf:
    """Tree node holding the loader of a single asset."""
    loader: Loader


@dataclass(frozen=True, eq=False)
class AssetDirectory:
    """Tree node mapping child path segments to nodes."""
    children: Mapping[str, Union[AssetLeaf, "AssetDirectory"]]

    def __post_init__(self) -> None:
        object.__setattr__(self, "children", MappingProxyType(dict(self.children)))


TreeNode = Union[AssetLeaf, AssetDirectory]

# -----------------------------------------------------------------------------
# STORE
# -----------------------------------------------------------------------------

class AssetStore:
    """
    Lookup, traversal and restore operations over an embedded bundle.

    The table and tree are frozen on construction, so an instance can be
    shared between threads without locking. Restores write to the
    filesystem without coordination; callers restoring into overlapping
    directories concurrently must serialize them.
    """

    def __init__(self, table: Mapping[str, Loader], tree: AssetDirectory) -> None:
        self._table = MappingProxyType(dict(table))
        self._tree = tree

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and canonical_name(name) in self._table

    def __len__(self) -> int:
        return len(self._table)

    # --- Lookup ---

    def get(self, name: str) -> bytes:
        """
        Load and return the content of the named asset.

        Raises:
            AssetNotFoundError: If no asset is registered under the name.
            AssetCodecError: If the embedded payload is corrupt.
            AssetReadError: If a debug-mode source file can't be read.
        """
        return self._lookup(name)().data

    def must_get(self, name: str) -> bytes:
        """
        Like get, but any asset failure is turned into a RuntimeError.

        Meant for module-level initialization of assets that must exist;
        the RuntimeError is not an AssetError and escapes typed handlers.
        """
        try:
            return self.get(name)
        except AssetError as e:
            raise RuntimeError(f"asset: get({name!r}): {e}") from e

    def get_info(self, name: str) -> AssetMetadata:
        """Return the metadata snapshot of the named asset."""
        return self._lookup(name)().info

    def list(self) -> List[str]:
        """Return the names of all assets."""
        return sorted(self._table)

    def list_dir(self, path: str = "") -> List[str]:
        """
        Return the child names below a directory of the bundle.

        For a bundle holding data/foo.txt and data/img/a.png, list_dir("")
        returns ["data"], list_dir("data") returns ["foo.txt", "img"] and
        list_dir("data/foo.txt") raises AssetNotADirectoryError.

        Raises:
            AssetNotFoundError: If any segment of the path is absent.
            AssetNotADirectoryError: If the path resolves to an asset.
        """
        node = self._resolve(path)
        if not isinstance(node, AssetDirectory):
            raise AssetNotADirectoryError(path)
        return sorted(node.children)

    # --- Restore ---

    def restore_asset(self, target_dir: str, name: str) -> None:
        """
        Write a single asset below target_dir, then reapply its permission
        bits and modification time.

        Raises:
            AssetRestoreError: On any filesystem failure.
        """
        asset = self._lookup(name)()
        target = _target_path(target_dir, name)
        try:
            os.makedirs(os.path.dirname(target), mode=0o755, exist_ok=True)
            with open(target, "wb") as f:
                f.write(asset.data)
            os.chmod(target, asset.info.mode)
            os.utime(target, (asset.info.mtime, asset.info.mtime))
        except OSError as e:
            raise AssetRestoreError(name, target, str(e)) from e

    def restore(self, target_dir: str, path: str = "") -> None:
        """
        Restore an asset, or every asset below a directory, under target_dir.

        Files written before a failure are left in place.
        """
        try:
            children = self.list_dir(path)
        except AssetNotADirectoryError:
            self.restore_asset(target_dir, canonical_name(path).strip("/"))
            return

        for child in children:
            self.restore(target_dir, _join(path, child))

    def restore_all(self, target_dir: str, path: str = "") -> None:
        """Restore every asset below the directory at path (the root by default)."""
        for child in self.list_dir(path):
            self.restore(target_dir, _join(path, child))

    # --- Internals ---

    def _lookup(self, name: str) -> Loader:
        loader = self._table.get(canonical_name(name))
        if loader is None:
            raise AssetNotFoundError(name)
        return loader

    def _resolve(self, path: str) -> TreeNode:
        node: TreeNode = self._tree
        key = canonical_name(path).strip("/")
        if not key:
            return node

        for segment in key.split("/"):
            if not isinstance(node, AssetDirectory):
                raise AssetNotFoundError(path)
            child = node.children.get(segment)
            if child is None:
                raise AssetNotFoundError(path)
            node = child
        return node


def _join(path: str, child: str) -> str:
    key = canonical_name(path).strip("/")
    return f"{key}/{child}" if key else child


def _target_path(target_dir: str, name: str) -> str:
    segments = canonical_name(name).strip("/").split("/")
    return os.path.join(target_dir, *segments)
