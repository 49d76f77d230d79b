from __future__ import annotations

"""
Bundle Module Generator.

Renders the self-contained Python module that carries the encoded assets.
The emitted module embeds the runtime store source, one payload constant
and loader per asset, the flat '_bindata' table, the '_bintree' directory
tree and module-level aliases for the public access API.
"""

import ast
import builtins
import inspect
import logging
import re
from typing import Dict, FrozenSet, List, Sequence

from pybindata.domain.asset_models import EmbedMode, EncodedAsset
from pybindata.domain.config import BindataConfig
from pybindata.domain.constants import APP_NAME, APP_VERSION, GENERATED_API
from pybindata.runtime import store as runtime_store
from pybindata.runtime.store import AssetDirectory, AssetLeaf

logger = logging.getLogger(__name__)

# Bytes per line of an emitted payload literal
_CHUNK_SIZE = 48
_INDENT = "    "
_NON_SYMBOL_CHARS = re.compile(r"[^0-9A-Za-z_]")

# Module-level names bound by the generated code around the runtime source
_BUNDLE_GLOBALS = ("_store", "_bindata", "_bintree", "__all__")

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def render_module(
        encoded: Sequence[EncodedAsset],
        tree: AssetDirectory,
        cfg: BindataConfig,
) -> str:
    """
    Render the complete source of a bundle module.

    Args:
        encoded: Encoded assets, in table order.
        tree: Directory tree built for the same assets.
        cfg: Validated configuration of the run.

    Returns:
        str: Python source text of the generated module.
    """
    symbols = assign_symbols(encoded)

    parts: List[str] = [
        _render_header(cfg, len(encoded)),
        runtime_source(),
        _section("ASSETS"),
    ]
    for item in encoded:
        parts.append(_render_asset(item, symbols[item.name]))

    parts.append(_section("TABLE AND TREE"))
    parts.append(_render_table(encoded, symbols))
    parts.append("_bintree = " + _render_tree(tree, _tree_names(encoded, tree), symbols, 0) + "\n")
    parts.append(_render_api(cfg))

    source = "\n".join(parts)
    logger.debug(f"Rendered bundle module ({len(source)} characters).")
    return source


def runtime_source() -> str:
    """Return the runtime store source without its module docstring."""
    source = inspect.getsource(runtime_store)
    body = ast.parse(source).body
    start = 0
    if body and isinstance(body[0], ast.Expr) and isinstance(body[0].value, ast.Constant) \
            and isinstance(body[0].value.value, str) and len(body) > 1:
        start = body[1].lineno - 1
    return "\n".join(source.splitlines()[start:]).rstrip() + "\n"


def assign_symbols(encoded: Sequence[EncodedAsset]) -> Dict[str, str]:
    """
    Map every asset name to a unique Python symbol for its loader.

    Symbols are derived from the asset identifier; characters that can't
    appear in a Python name become underscores and clashes get a numeric
    suffix. Lookups never depend on these names.
    """
    used = set()
    symbols: Dict[str, str] = {}
    for item in encoded:
        base = "asset_" + _NON_SYMBOL_CHARS.sub("_", item.identifier)
        candidate = base
        count = 1
        while candidate in used:
            candidate = f"{base}_{count}"
            count += 1
        used.add(candidate)
        symbols[item.name] = candidate
    return symbols


def reserved_names() -> FrozenSet[str]:
    """
    Names an entry function must not take in a generated module.

    Every global of the embedded runtime is included along with the public
    aliases and builtins. Rebinding any of them at module level breaks lookups.
    """
    names = set(dir(builtins)) | set(GENERATED_API) | set(_BUNDLE_GLOBALS)
    for node in ast.parse(runtime_source()).body:
        if isinstance(node, (ast.Import, ast.ImportFrom)):
            names.update((alias.asname or alias.name).split(".")[0] for alias in node.names)
        elif isinstance(node, (ast.ClassDef, ast.FunctionDef, ast.AsyncFunctionDef)):
            names.add(node.name)
        elif isinstance(node, ast.Assign):
            names.update(t.id for t in node.targets if isinstance(t, ast.Name))
        elif isinstance(node, ast.AnnAssign) and isinstance(node.target, ast.Name):
            names.add(node.target.id)
    return frozenset(names)

# -----------------------------------------------------------------------------
# INTERNAL HELPERS (SECTIONS)
# -----------------------------------------------------------------------------

def _render_header(cfg: BindataConfig, count: int) -> str:
    mode = cfg.embed_mode.value
    lines = [
        f"# Code generated by {APP_NAME} v{APP_VERSION}. DO NOT EDIT.",
        f"# assets: {count}, mode: {mode}",
        repr(f"Embedded assets for package {cfg.package!r}."),
        "",
    ]
    if cfg.debug:
        lines.insert(2, "# Debug bundle: assets are read from their original location on every call.")
    return "\n".join(lines)


def _section(title: str) -> str:
    bar = "# " + "-" * 77
    return f"{bar}\n# {title}\n{bar}\n"


def _render_asset(item: EncodedAsset, symbol: str) -> str:
    info = _render_info(item)
    if item.mode is EmbedMode.DEBUG:
        return f"{symbol} = DiskLoader({item.source.source_path!r}, {info})\n"

    data_name = f"_{symbol}_data"
    return (
        f"{data_name} = {_bytes_literal(item.payload or b'')}\n"
        f"{symbol} = EmbeddedLoader({data_name}, {info}, compressed={item.compressed!r})\n"
    )


def _render_info(item: EncodedAsset) -> str:
    info = item.info
    return (
        f"AssetMetadata(name={info.name!r}, size={info.size}, "
        f"mode={oct(info.mode)}, mtime={info.mtime})"
    )


def _render_table(encoded: Sequence[EncodedAsset], symbols: Dict[str, str]) -> str:
    lines = ["_bindata = {"]
    for item in encoded:
        lines.append(f"{_INDENT}{item.name!r}: {symbols[item.name]},")
    lines.append("}\n")
    return "\n".join(lines)


def _render_tree(
        node: AssetDirectory,
        names: Dict[int, str],
        symbols: Dict[str, str],
        depth: int,
) -> str:
    if not node.children:
        return "AssetDirectory({})"

    pad = _INDENT * (depth + 1)
    lines = ["AssetDirectory({"]
    for segment in sorted(node.children):
        child = node.children[segment]
        if isinstance(child, AssetLeaf):
            rendered = f"AssetLeaf({symbols[names[id(child)]]})"
        else:
            rendered = _render_tree(child, names, symbols, depth + 1)
        lines.append(f"{pad}{segment!r}: {rendered},")
    lines.append(_INDENT * depth + "})")
    return "\n".join(lines)


def _render_api(cfg: BindataConfig) -> str:
    lines = [
        _section("PUBLIC API"),
        "_store = AssetStore(_bindata, _bintree)",
        "",
        "get = _store.get",
        "must_get = _store.must_get",
        "get_info = _store.get_info",
        "list_assets = _store.list",
        "list_dir = _store.list_dir",
        "restore = _store.restore",
        "restore_asset = _store.restore_asset",
        "restore_all = _store.restore_all",
        "",
    ]

    exported = list(GENERATED_API) + [
        "Asset",
        "AssetMetadata",
        "AssetError",
        "AssetNotFoundError",
        "AssetNotADirectoryError",
        "AssetCodecError",
        "AssetReadError",
        "AssetRestoreError",
    ]
    if cfg.func_name:
        lines += [
            "",
            f"def {cfg.func_name}(name: str) -> bytes:",
            f'{_INDENT}"""Return the content of the named asset."""',
            f"{_INDENT}return _store.get(name)",
            "",
        ]
        if cfg.func_name not in exported:
            exported.append(cfg.func_name)

    lines.append("")
    lines.append("__all__ = [")
    lines += [f"{_INDENT}{name!r}," for name in exported]
    lines.append("]")
    return "\n".join(lines) + "\n"

# -----------------------------------------------------------------------------
# INTERNAL HELPERS (LITERALS)
# -----------------------------------------------------------------------------

def _bytes_literal(data: bytes) -> str:
    """Render bytes as a parenthesized run of implicitly concatenated literals."""
    if len(data) <= _CHUNK_SIZE:
        return repr(data)

    lines = ["("]
    for i in range(0, len(data), _CHUNK_SIZE):
        lines.append(_INDENT + repr(data[i:i + _CHUNK_SIZE]))
    lines.append(")")
    return "\n".join(lines)


def _tree_names(encoded: Sequence[EncodedAsset], tree: AssetDirectory) -> Dict[int, str]:
    """Map each leaf of the tree (by identity) to its asset name."""
    names: Dict[int, str] = {}
    for item in encoded:
        node = tree
        *parents, leaf_name = item.name.split("/")
        for segment in parents:
            node = node.children[segment]
        names[id(node.children[leaf_name])] = item.name
    return names
