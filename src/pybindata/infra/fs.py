from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides path normalization, collision-free output naming and atomic
writes of generated artifacts, so that an aborted run never leaves a
partial output file behind.
"""

import os
import tempfile
from typing import Optional

from pybindata.domain.constants import GENERATED_EXTENSION

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def normalize_path(path: Optional[str], fallback: str) -> str:
    """
    Normalize a path string into an absolute filesystem path.

    Handles environment variable expansion ($VAR/%VAR%) and user home
    shortcuts (~/). Reverts to fallback if the input is empty.

    Args:
        path: Raw input path string.
        fallback: Default path to use if the input is empty.

    Returns:
        str: Normalized absolute path.
    """
    p = (path or "").strip()
    if not p:
        p = fallback
    p = os.path.expandvars(os.path.expanduser(p))
    return os.path.abspath(p)


def default_output_path(input_path: str) -> str:
    """
    Derive an output filename from the input path that does not exist yet.

    The first candidate is '<input>.py' next to the input directory; if it
    is taken, '<input>.0.py', '<input>.1.py', ... are tried in turn.

    Args:
        input_path: Input directory of the run.

    Returns:
        str: Absolute path of an available output file.
    """
    base = os.path.abspath(input_path)
    candidate = base + GENERATED_EXTENSION
    count = 0
    while os.path.lexists(candidate):
        candidate = f"{base}.{count}{GENERATED_EXTENSION}"
        count += 1
    return candidate

# -----------------------------------------------------------------------------
# FILE OUTPUT API
# -----------------------------------------------------------------------------

def write_text_atomic(path: str, text: str) -> None:
    """
    Write text to path through a temporary sibling file and a rename.

    Readers either see the previous file or the complete new one.

    Args:
        path: Target file path.
        text: Content to write (UTF-8).

    Raises:
        OSError: If the directory can't be created or the write fails.
    """
    out_dir = os.path.dirname(os.path.abspath(path))
    os.makedirs(out_dir, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(prefix=".pybindata-", suffix=".tmp", dir=out_dir)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            f.write(text)
        os.chmod(tmp_path, 0o644)
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise
