from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, merging of the
configuration sources (defaults, optional config file and command-line
overrides), pipeline execution and result rendering.
"""

import json
import platform
import sys
from dataclasses import asdict
from typing import List, Optional

from pybindata.core.pipeline.engine import run_bundle
from pybindata.domain.bundle_models import ERROR_CONFIGURATION, BundleResult
from pybindata.domain.config import get_default_config, load_config_file, merge_config
from pybindata.domain.constants import APP_NAME, APP_VERSION
from pybindata.domain.errors import ConfigurationError
from pybindata.infra.fs import normalize_path
from pybindata.infra.logging import LoggingConfig, configure_logging, get_logger
from pybindata.interface.cli import args as cli_args

logger = get_logger(__name__)

# Process exit codes
EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG = 2
EXIT_INTERRUPTED = 130

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the main CLI application workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code.
    """
    # 1. Argument parsing phase
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(f"{APP_NAME} v{APP_VERSION} (Python {platform.python_version()})")
        return EXIT_OK

    # 2. Logging bootstrap (console on stderr, optional rotating file)
    configure_logging(LoggingConfig.for_cli(args.verbose, _expand(args.log_file)))

    logger.debug("CLI execution initiated. Resolving configuration hierarchy...")

    # 3. Resolve configuration (defaults -> config file -> CLI flags)
    try:
        file_conf = load_config_file(_expand(args.config_file))
    except ConfigurationError as e:
        logger.error(str(e))
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_CONFIG

    raw_conf = merge_config(get_default_config(), file_conf)
    raw_conf = merge_config(raw_conf, cli_args.args_to_overrides(args))

    # 4. Pipeline execution phase
    try:
        result = run_bundle(raw_conf)
    except KeyboardInterrupt:
        logger.warning("Interrupted by user.")
        return EXIT_INTERRUPTED

    # 5. Output rendering phase
    if args.json_output:
        print(json.dumps(asdict(result), ensure_ascii=False, indent=2))
    else:
        _print_human_summary(result)

    if result.ok:
        return EXIT_OK
    return EXIT_CONFIG if result.error_kind == ERROR_CONFIGURATION else EXIT_FAILURE

def _expand(path: Optional[str]) -> Optional[str]:
    """Expand user and environment references in an optional path flag."""
    return normalize_path(path, "") if path else None

# -----------------------------------------------------------------------------
# VIEW RENDERING (HUMAN READABLE)
# -----------------------------------------------------------------------------

def _print_human_summary(result: BundleResult) -> None:
    """
    Format and print the bundle result.

    Args:
        result: The bundle result to render.
    """
    if not result.ok:
        print(f"ERROR: {result.error}", file=sys.stderr)
        return

    print(f"Bundled {result.asset_count} assets into {result.output_path}")
    print(f"Mode: {result.mode}")
    if result.mode != "debug":
        print(f"Size: {result.total_bytes:,} bytes -> {result.embedded_bytes:,} bytes embedded")


if __name__ == "__main__":
    sys.exit(main())
