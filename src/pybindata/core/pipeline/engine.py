from __future__ import annotations

"""
Core bundling pipeline.

This module coordinates the entire bundling workflow:
1. Validates configuration and paths.
2. Walks the input root and builds the asset table and tree.
3. Encodes every asset according to the embedding mode.
4. Renders the generated module.
5. Writes it atomically to the output destination.

Any failure aborts the run before the output file is replaced, so no
partial artifact is ever left behind.
"""

import logging
from typing import Any, Dict, Optional

from pybindata.core.encoder import encode_assets
from pybindata.core.generator import render_module
from pybindata.core.pipeline.validator import validate_config
from pybindata.core.tree_builder import build_asset_tree
from pybindata.domain.bundle_models import (
    ERROR_CONFIGURATION,
    ERROR_OUTPUT,
    ERROR_TRAVERSAL,
    BundleResult,
    create_error_result,
    create_success_result,
)
from pybindata.domain.errors import ConfigurationError, TraversalError
from pybindata.infra.fs import write_text_atomic

logger = logging.getLogger(__name__)


def run_bundle(config: Optional[Dict[str, Any]]) -> BundleResult:
    """
    Execute the full bundling pipeline.

    Args:
        config: The configuration dictionary (raw or partial).

    Returns:
        BundleResult: Object containing status and bundle statistics.
    """
    logger.info("Bundle execution started.")

    # -------------------------------------------------------------------------
    # 1) Config & Path Validation
    # -------------------------------------------------------------------------
    try:
        cfg, warnings = validate_config(config if config is not None else {}, strict=False)
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        return create_error_result(str(e), ERROR_CONFIGURATION)

    for warning in warnings:
        logger.warning(f"Configuration Warning: {warning}")

    # -------------------------------------------------------------------------
    # 2) Discovery & Encoding
    # -------------------------------------------------------------------------
    try:
        index = build_asset_tree(cfg.input_path, prefix=cfg.prefix, recursive=cfg.recursive)
        encoded = encode_assets(index.sources, cfg.embed_mode)
    except TraversalError as e:
        logger.error(f"Bundling aborted, unreadable entry: {e}")
        return create_error_result(str(e), ERROR_TRAVERSAL, cfg)

    if not encoded:
        logger.warning(f"No assets found in {cfg.input_path}; generating an empty bundle.")

    # -------------------------------------------------------------------------
    # 3) Rendering & Persistence
    # -------------------------------------------------------------------------
    source = render_module(encoded, index.tree, cfg)
    try:
        write_text_atomic(cfg.output_path, source)
    except OSError as e:
        msg = f"Failed to write bundle to {cfg.output_path}: {e}"
        logger.critical(msg)
        return create_error_result(msg, ERROR_OUTPUT, cfg)

    logger.info(f"Bundle written to {cfg.output_path} ({len(encoded)} assets).")
    return create_success_result(cfg, encoded)
