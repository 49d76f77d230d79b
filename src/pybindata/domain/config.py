from __future__ import annotations

"""
Configuration Domain Management.

Holds the default bundling configuration, the immutable validated
configuration model consumed by the pipeline, and loading of optional
JSON configuration files.
"""

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

from pybindata.domain.asset_models import EmbedMode
from pybindata.domain.constants import DEFAULT_PACKAGE_NAME
from pybindata.domain.errors import ConfigurationError

logger = logging.getLogger(__name__)

# Keys accepted from configuration files and CLI overrides
CONFIG_KEYS = (
    "package",
    "func_name",
    "input_path",
    "output_path",
    "prefix",
    "compress",
    "debug",
    "recursive",
)

# -----------------------------------------------------------------------------
# Configuration Models
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class BindataConfig:
    """
    Validated options of a bundling run.

    Attributes:
        input_path: Directory holding the assets.
        output_path: Destination of the generated module.
        package: Cosmetic package name recorded in the generated module.
        func_name: Optional name of a generated entry function.
        prefix: Leading path substring stripped from asset keys.
        compress: Gzip-compress embedded content.
        debug: Read assets from their source location at call time.
        recursive: Descend into sub-directories of the input.
    """
    input_path: str
    output_path: str
    package: str = DEFAULT_PACKAGE_NAME
    func_name: str = ""
    prefix: str = ""
    compress: bool = True
    debug: bool = False
    recursive: bool = False

    @property
    def embed_mode(self) -> EmbedMode:
        if self.debug:
            return EmbedMode.DEBUG
        return EmbedMode.COMPRESS if self.compress else EmbedMode.RAW


def get_default_config() -> Dict[str, Any]:
    """
    Generate the default runtime configuration.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        # IO Paths
        "input_path": "",
        "output_path": "",
        "prefix": "",

        # Generated Module
        "package": DEFAULT_PACKAGE_NAME,
        "func_name": "",

        # Embedding
        "compress": True,
        "debug": False,
        "recursive": False,
    }

# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------

def load_config_file(path: Optional[str]) -> Dict[str, Any]:
    """
    Load configuration values from a JSON file.

    Unknown keys are dropped with a warning so that typos don't pass
    silently.

    Args:
        path: JSON file to read. Empty or None yields no values.

    Returns:
        Dict[str, Any]: The known keys found in the file.

    Raises:
        ConfigurationError: If the file can't be read or isn't a JSON object.
    """
    if not path:
        return {}

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise ConfigurationError(f"Config file {path}: {e.strerror or e}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Config file {path} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a JSON object.")

    values: Dict[str, Any] = {}
    for key, value in data.items():
        if key not in CONFIG_KEYS:
            logger.warning(f"Ignoring unknown config key '{key}' in {path}")
            continue
        values[key] = value

    logger.debug(f"Loaded {len(values)} settings from {os.path.abspath(path)}")
    return values


def merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Shallow-merge known, non-None override values into the base configuration.

    Args:
        base: The primary configuration dictionary.
        overrides: New values to inject.

    Returns:
        Dict[str, Any]: The merged configuration state.
    """
    out = dict(base)
    for k in CONFIG_KEYS:
        if k in overrides and overrides[k] is not None:
            out[k] = overrides[k]
    return out
