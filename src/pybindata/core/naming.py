from __future__ import annotations

"""
Asset Path Canonicalization.

Turns raw file paths into the forward-slash keys used by the asset table
and into the lower-case identifiers used to name generated symbols.
"""

from pybindata.runtime.store import canonical_name

# Characters replaced one-for-one by an underscore in identifiers
_IDENTIFIER_SUBSTITUTIONS = str.maketrans({" ": "_", ".": "_", "-": "_"})

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def canonical_path(raw_path: str, prefix: str = "") -> str:
    """
    Convert a raw relative path into a canonical asset path.

    Backslashes become forward slashes, the prefix is removed when it is a
    literal leading substring (otherwise the path passes through as is),
    and redundant leading slashes are dropped.

    Args:
        raw_path: Path as discovered on disk.
        prefix: Optional leading substring to strip.

    Returns:
        str: Canonical asset path.
    """
    path = canonical_name(raw_path)
    if prefix:
        path = strip_prefix(path, prefix)
    return path.lstrip("/")


def strip_prefix(path: str, prefix: str) -> str:
    """Remove prefix from the front of path when present, after separator normalization."""
    normalized = canonical_name(prefix)
    if normalized and path.startswith(normalized):
        return path[len(normalized):]
    return path


def has_prefix(path: str, prefix: str) -> bool:
    normalized = canonical_name(prefix)
    return bool(normalized) and canonical_name(path).startswith(normalized)


def asset_identifier(path: str) -> str:
    """
    Derive the symbol-safe identifier of an asset path.

    Lower-cases the path and replaces every space, dot and hyphen with an
    underscore. Consecutive special characters each get their own underscore.

    Example:
        >>> asset_identifier("img/Logo-Big.png")
        'img/logo_big_png'
    """
    return path.lower().translate(_IDENTIFIER_SUBSTITUTIONS)
