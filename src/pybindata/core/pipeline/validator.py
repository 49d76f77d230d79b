from __future__ import annotations

"""
Configuration Validation Service.

Acts as the gatekeeper for the bundling pipeline. Coerces untrusted values
(CLI, config files) into a typed BindataConfig, injects defaults, derives
the output filename when none is given and rejects unusable paths before
any bundling work starts.
"""

import keyword
import logging
import os
import re
from typing import Any, Dict, List, Tuple

from pybindata.core.generator import reserved_names
from pybindata.domain.config import BindataConfig, get_default_config
from pybindata.domain.errors import ConfigurationError
from pybindata.infra.fs import default_output_path

logger = logging.getLogger(__name__)

_NON_SYMBOL_CHARS = re.compile(r"[^0-9A-Za-z_]")

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[BindataConfig, List[str]]:
    """
    Validate and normalize a raw configuration dictionary.

    Args:
        config: Raw configuration data (usually a dictionary).
        strict: If True, raise TypeError on type mismatch instead of coercing.

    Returns:
        Tuple[BindataConfig, List[str]]: The validated configuration and a
                                         list of warnings.

    Raises:
        ConfigurationError: If the input is missing or not a directory, or
                            if the output path is an existing directory.
    """
    warnings: List[str] = []
    defaults = get_default_config()

    # 1. Base Type Validation
    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        raise ConfigurationError(msg)

    merged: Dict[str, Any] = dict(defaults)
    merged.update(config)

    # 2. Field Processing & Normalization
    for field in ("input_path", "output_path", "prefix", "package", "func_name"):
        merged[field] = _as_str(merged.get(field), defaults[field], field, warnings, strict)

    for field in ("compress", "debug", "recursive"):
        merged[field] = _as_bool(merged.get(field), defaults[field], field, warnings, strict)

    if not merged["package"]:
        merged["package"] = defaults["package"]
        warnings.append(f"No package name specified. Using '{merged['package']}'.")

    merged["func_name"] = _normalize_func_name(merged["func_name"], warnings)

    # 3. Filesystem Checks
    input_path = merged["input_path"]
    if not input_path:
        raise ConfigurationError("No input path specified.")
    if not os.path.exists(input_path):
        raise ConfigurationError(f"Input path does not exist: {input_path}")
    if not os.path.isdir(input_path):
        raise ConfigurationError(f"Input path is not a directory: {input_path}")

    output_path = merged["output_path"]
    if not output_path:
        output_path = default_output_path(input_path)
        warnings.append(f"No output file specified. Using '{output_path}'.")
    elif os.path.isdir(output_path):
        raise ConfigurationError(f"Output path is a directory: {output_path}")

    cfg = BindataConfig(
        input_path=input_path,
        output_path=output_path,
        package=merged["package"],
        func_name=merged["func_name"],
        prefix=merged["prefix"],
        compress=merged["compress"],
        debug=merged["debug"],
        recursive=merged["recursive"],
    )
    logger.debug(f"Validated configuration: {cfg}")
    return cfg, warnings

# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _as_str(value: Any, fallback: str, field: str, warnings: List[str], strict: bool) -> str:
    """Validate and sanitize string inputs."""
    if value is None:
        return fallback
    if isinstance(value, str):
        return value.strip()

    msg = f"Invalid field '{field}': expected str, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_bool(value: Any, fallback: bool, field: str, warnings: List[str], strict: bool) -> bool:
    """Coerce various input types into native booleans."""
    if isinstance(value, bool):
        return value
    if value is None:
        return fallback

    if not strict:
        if isinstance(value, (int, float)) and value in (0, 1):
            warnings.append(f"Field '{field}' converted from number {value} to bool.")
            return bool(value)
        if isinstance(value, str):
            s = value.strip().lower()
            if s in ("true", "1", "yes", "y", "on"):
                warnings.append(f"Field '{field}' converted from '{value}' to True.")
                return True
            if s in ("false", "0", "no", "n", "off"):
                warnings.append(f"Field '{field}' converted from '{value}' to False.")
                return False

    msg = f"Invalid field '{field}': expected bool, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback

# -----------------------------------------------------------------------------
# PRIVATE HELPERS: DOMAIN NORMALIZATION
# -----------------------------------------------------------------------------

def _normalize_func_name(name: str, warnings: List[str]) -> str:
    """
    Turn the entry function name into a valid, non-keyword Python identifier
    that doesn't shadow any global the generated module relies on.
    """
    if not name:
        return name

    fixed = name
    if not fixed.isidentifier() or keyword.iskeyword(fixed):
        fixed = _NON_SYMBOL_CHARS.sub("_", fixed)
        if fixed[0].isdigit() or keyword.iskeyword(fixed):
            fixed = "_" + fixed
        warnings.append(f"Function name '{name}' corrected to '{fixed}'.")

    reserved = reserved_names()
    if fixed in reserved:
        clashing = fixed
        while fixed in reserved:
            fixed = f"{fixed.lstrip('_')}_asset"
        warnings.append(f"Function name '{clashing}' clashes with bundle internals, using '{fixed}'.")
    return fixed
