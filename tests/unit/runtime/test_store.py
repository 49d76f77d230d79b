from __future__ import annotations

"""
Unit tests for the embedded Asset Store runtime.

Stores are assembled by hand from EmbeddedLoader/DiskLoader instances so
the lookup, traversal and restore semantics are checked independently of
the tree builder and the generator.
"""

import gzip
import os
import stat
from pathlib import Path
from typing import Dict

import pytest

from pybindata.runtime.store import (
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
    decode_payload,
)

MTIME = 1431385279

# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------

def _embedded(name: str, data: bytes, mode: int = 0o640, compressed: bool = True) -> EmbeddedLoader:
    info = AssetMetadata(name=name, size=len(data), mode=mode, mtime=MTIME)
    payload = gzip.compress(data, mtime=0) if compressed else data
    return EmbeddedLoader(payload, info, compressed=compressed)


def _store(contents: Dict[str, bytes]) -> AssetStore:
    """Build a store whose tree mirrors the slash-separated names."""
    table = {name: _embedded(name, data) for name, data in contents.items()}

    draft: dict = {}
    for name, loader in table.items():
        *parents, leaf = name.split("/")
        level = draft
        for segment in parents:
            level = level.setdefault(segment, {})
        level[leaf] = AssetLeaf(loader)

    def freeze(node: dict) -> AssetDirectory:
        return AssetDirectory({
            k: freeze(v) if isinstance(v, dict) else v for k, v in node.items()
        })

    return AssetStore(table, freeze(draft))


@pytest.fixture
def store() -> AssetStore:
    return _store({
        "data/foo.txt": b"foo content",
        "data/img/a.png": b"\x89PNG fake",
        "data/img/b.png": b"\x89PNG other",
        "top.txt": b"top",
    })

# -----------------------------------------------------------------------------
# Lookup
# -----------------------------------------------------------------------------

def test_get_returns_original_bytes(store: AssetStore) -> None:
    assert store.get("data/foo.txt") == b"foo content"
    assert store.get("top.txt") == b"top"


def test_get_accepts_backslash_separators(store: AssetStore) -> None:
    assert store.get("data\\img\\a.png") == b"\x89PNG fake"
    assert "data\\foo.txt" in store


def test_get_unknown_name_raises_not_found(store: AssetStore) -> None:
    with pytest.raises(AssetNotFoundError) as exc:
        store.get("data/missing.txt")

    assert exc.value.name == "data/missing.txt"
    assert "data/missing.txt" in str(exc.value)
    assert isinstance(exc.value, LookupError)


def test_get_directory_name_is_not_an_asset(store: AssetStore) -> None:
    with pytest.raises(AssetNotFoundError):
        store.get("data/img")


def test_must_get_returns_content(store: AssetStore) -> None:
    assert store.must_get("top.txt") == b"top"


def test_must_get_raises_runtime_error_outside_taxonomy(store: AssetStore) -> None:
    with pytest.raises(RuntimeError) as exc:
        store.must_get("nope.txt")

    assert not isinstance(exc.value, AssetError)
    assert "nope.txt" in str(exc.value)
    assert isinstance(exc.value.__cause__, AssetNotFoundError)


def test_get_info_returns_snapshot(store: AssetStore) -> None:
    info = store.get_info("data/img/b.png")

    assert info.name == "data/img/b.png"
    assert info.size == len(b"\x89PNG other")
    assert info.mode == 0o640
    assert info.mtime == MTIME
    assert info.is_dir() is False


def test_list_returns_every_name_sorted(store: AssetStore) -> None:
    assert store.list() == ["data/foo.txt", "data/img/a.png", "data/img/b.png", "top.txt"]
    assert len(store) == 4


def test_empty_store() -> None:
    empty = AssetStore({}, AssetDirectory({}))

    assert empty.list() == []
    assert empty.list_dir("") == []
    with pytest.raises(AssetNotFoundError):
        empty.get("anything")

# -----------------------------------------------------------------------------
# Directory Traversal
# -----------------------------------------------------------------------------

def test_list_dir_root_and_nested(store: AssetStore) -> None:
    assert store.list_dir("") == ["data", "top.txt"]
    assert store.list_dir("data") == ["foo.txt", "img"]
    assert store.list_dir("data/img") == ["a.png", "b.png"]


def test_list_dir_tolerates_surrounding_slashes(store: AssetStore) -> None:
    assert store.list_dir("/data/") == ["foo.txt", "img"]
    assert store.list_dir("data\\img") == ["a.png", "b.png"]


def test_list_dir_on_asset_raises_not_a_directory(store: AssetStore) -> None:
    with pytest.raises(AssetNotADirectoryError):
        store.list_dir("data/foo.txt")


@pytest.mark.parametrize("path", ["missing", "data/missing", "data/foo.txt/deeper"])
def test_list_dir_unknown_path_raises_not_found(store: AssetStore, path: str) -> None:
    with pytest.raises(AssetNotFoundError):
        store.list_dir(path)


def test_tree_and_table_agree(store: AssetStore) -> None:
    """Every listed name is reachable segment by segment from the root."""
    for name in store.list():
        *parents, leaf = name.split("/")
        assert leaf in store.list_dir("/".join(parents))

# -----------------------------------------------------------------------------
# Codec
# -----------------------------------------------------------------------------

def test_raw_loader_returns_payload_verbatim() -> None:
    loader = _embedded("raw.bin", b"\x00\x01\x02", compressed=False)
    assert loader().data == b"\x00\x01\x02"


def test_corrupt_payload_raises_codec_error() -> None:
    info = AssetMetadata(name="bad.bin", size=5, mode=0o644, mtime=MTIME)
    loader = EmbeddedLoader(b"definitely not gzip", info, compressed=True)

    with pytest.raises(AssetCodecError) as exc:
        loader()
    assert exc.value.name == "bad.bin"


def test_truncated_payload_raises_codec_error() -> None:
    payload = gzip.compress(b"hello world" * 10, mtime=0)
    info = AssetMetadata(name="cut.bin", size=110, mode=0o644, mtime=MTIME)

    with pytest.raises(AssetCodecError):
        decode_payload(payload[:-6], info, compressed=True)


def test_size_mismatch_raises_codec_error() -> None:
    info = AssetMetadata(name="short.bin", size=999, mode=0o644, mtime=MTIME)

    with pytest.raises(AssetCodecError) as exc:
        decode_payload(gzip.compress(b"abc", mtime=0), info, compressed=True)
    assert "expected 999" in str(exc.value)

# -----------------------------------------------------------------------------
# Debug Loader
# -----------------------------------------------------------------------------

def test_disk_loader_rereads_source(tmp_path: Path) -> None:
    source = tmp_path / "live.txt"
    source.write_bytes(b"v1")
    info = AssetMetadata(name="live.txt", size=2, mode=0o644, mtime=MTIME)
    loader = DiskLoader(str(source), info)

    assert loader().data == b"v1"
    source.write_bytes(b"version two")
    asset = loader()

    assert asset.data == b"version two"
    assert asset.info is info


def test_disk_loader_missing_source_raises_read_error(tmp_path: Path) -> None:
    info = AssetMetadata(name="gone.txt", size=1, mode=0o644, mtime=MTIME)
    loader = DiskLoader(str(tmp_path / "gone.txt"), info)

    with pytest.raises(AssetReadError) as exc:
        loader()
    assert exc.value.name == "gone.txt"

# -----------------------------------------------------------------------------
# Restore
# -----------------------------------------------------------------------------

def test_restore_asset_reapplies_mode_and_mtime(store: AssetStore, tmp_path: Path) -> None:
    store.restore_asset(str(tmp_path), "data/img/a.png")

    target = tmp_path / "data" / "img" / "a.png"
    assert target.read_bytes() == b"\x89PNG fake"
    st = os.stat(target)
    assert stat.S_IMODE(st.st_mode) == 0o640
    assert int(st.st_mtime) == MTIME


def test_restore_directory_restores_subtree_only(store: AssetStore, tmp_path: Path) -> None:
    store.restore(str(tmp_path), "data/img")

    assert (tmp_path / "data" / "img" / "a.png").exists()
    assert (tmp_path / "data" / "img" / "b.png").exists()
    assert not (tmp_path / "data" / "foo.txt").exists()
    assert not (tmp_path / "top.txt").exists()


def test_restore_single_asset_path(store: AssetStore, tmp_path: Path) -> None:
    store.restore(str(tmp_path), "top.txt")
    assert (tmp_path / "top.txt").read_bytes() == b"top"


def test_restore_all_from_root(store: AssetStore, tmp_path: Path) -> None:
    store.restore_all(str(tmp_path))

    restored = sorted(
        p.relative_to(tmp_path).as_posix() for p in tmp_path.rglob("*") if p.is_file()
    )
    assert restored == store.list()


def test_restore_all_on_asset_raises_not_a_directory(store: AssetStore, tmp_path: Path) -> None:
    with pytest.raises(AssetNotADirectoryError):
        store.restore_all(str(tmp_path), "top.txt")


def test_restore_unknown_path_raises_not_found(store: AssetStore, tmp_path: Path) -> None:
    with pytest.raises(AssetNotFoundError):
        store.restore(str(tmp_path), "nope")


def test_restore_into_file_raises_restore_error(store: AssetStore, tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")

    with pytest.raises(AssetRestoreError) as exc:
        store.restore_asset(str(blocker), "data/foo.txt")

    assert isinstance(exc.value, OSError)
    assert exc.value.name == "data/foo.txt"


@pytest.mark.parametrize("path", ["/top.txt", "top.txt/", "/data/img/a.png", "data\\foo.txt"])
def test_restore_accepts_paths_list_dir_accepts(store: AssetStore, tmp_path: Path, path: str) -> None:
    store.restore(str(tmp_path), path)

    key = path.replace("\\", "/").strip("/")
    assert (tmp_path / key).read_bytes() == store.get(key)
