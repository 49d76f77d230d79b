from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Shared asset trees on disk with fixed permission bits and mtimes.
3. A helper to import generated bundle modules from arbitrary paths.
"""

import importlib.util
import itertools
import os
import sys
from pathlib import Path
from types import ModuleType
from typing import Callable, Dict, Iterator

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

FIXED_MTIME = 1431385279
FIXED_MODE = 0o640

_bundle_counter = itertools.count()


def write_asset(root: Path, rel_path: str, content: bytes, mode: int = FIXED_MODE) -> Path:
    """Create a file below root with deterministic metadata."""
    target = root.joinpath(*rel_path.split("/"))
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(content)
    os.chmod(target, mode)
    os.utime(target, (FIXED_MTIME, FIXED_MTIME))
    return target


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def scenario_dir(tmp_path: Path) -> Path:
    """
    Input directory with two sibling assets sharing the same content.

    Structure:
    /data
      /a
        test.asset
      /b
        test.asset
    """
    root = tmp_path / "data"
    root.mkdir()
    write_asset(root, "a/test.asset", b"hello\n")
    write_asset(root, "b/test.asset", b"hello\n")
    return root


@pytest.fixture
def rich_asset_dir(tmp_path: Path) -> Path:
    """
    Input directory mixing top-level files, nested directories and
    names that need identifier substitution.

    Structure:
    /assets
      index.html
      Logo Big-1.PNG
      /css
        site.css
      /img
        /icons
          x.bin
    """
    root = tmp_path / "assets"
    root.mkdir()
    write_asset(root, "index.html", b"<html><body>hi</body></html>\n", mode=0o644)
    write_asset(root, "Logo Big-1.PNG", bytes(range(256)) * 4, mode=0o600)
    write_asset(root, "css/site.css", b"body { color: red; }\n" * 50)
    write_asset(root, "img/icons/x.bin", b"\x00\xff\x10" * 100, mode=0o755)
    return root


@pytest.fixture
def import_bundle() -> Iterator[Callable[[Path], ModuleType]]:
    """Return a loader that imports a generated bundle module from a file path."""
    loaded: Dict[str, ModuleType] = {}

    def _load(path: Path) -> ModuleType:
        name = f"_pybindata_test_bundle_{next(_bundle_counter)}"
        spec = importlib.util.spec_from_file_location(name, str(path))
        assert spec is not None and spec.loader is not None
        module = importlib.util.module_from_spec(spec)
        sys.modules[name] = module
        spec.loader.exec_module(module)
        loaded[name] = module
        return module

    yield _load

    for name in loaded:
        sys.modules.pop(name, None)
