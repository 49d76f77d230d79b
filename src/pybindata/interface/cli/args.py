from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line interface schema and translates the parsed
argparse namespace into configuration overrides understood by the
validation layer.
"""

import argparse
from typing import Any, Dict

from pybindata.domain.constants import APP_NAME

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the pybindata CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog=APP_NAME,
        description="Embed a directory of files into a self-contained Python module.",
    )

    # --- Path Management ---
    p.add_argument(
        "-i", "--input",
        dest="input_path",
        default=None,
        help="Path to the input directory.",
    )
    p.add_argument(
        "-o", "--output",
        dest="output_path",
        default=None,
        help="Optional path to the output module. Defaults to '<input>.py'.",
    )
    p.add_argument(
        "--prefix",
        dest="prefix",
        default=None,
        help="Optional path prefix to strip from asset names.",
    )

    # --- Generated Module ---
    p.add_argument(
        "-p", "--package",
        dest="package",
        default=None,
        help="Optional name of the package recorded in the generated module.",
    )
    p.add_argument(
        "-f", "--func",
        dest="func_name",
        default=None,
        help="Optional name of a generated entry function returning asset content.",
    )

    # --- Embedding Strategies ---
    p.add_argument(
        "--nocompress",
        action="store_true",
        help="Embed assets verbatim instead of gzip-compressing them.",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Do not embed content; read assets from their original location at call time.",
    )
    p.add_argument(
        "-r", "--recursive",
        action="store_true",
        help="Include files from sub-directories of the input.",
    )

    # --- Configuration and Diagnostic Tools ---
    p.add_argument(
        "--config",
        dest="config_file",
        default=None,
        help="JSON file with default options; command-line flags take precedence.",
    )
    p.add_argument(
        "--verbose",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )
    p.add_argument(
        "--log-file",
        dest="log_file",
        default=None,
        help="Also write log records to this rotating file.",
    )
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print the bundle result as JSON.",
    )
    p.add_argument(
        "-v", "--version",
        action="store_true",
        help="Display version information.",
    )

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into a configuration dictionary.

    Flags left unset map to None (or are omitted) so that values from the
    configuration file survive the merge.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Configuration overrides subset.
    """
    overrides: Dict[str, Any] = {}

    overrides["input_path"] = args.input_path
    overrides["output_path"] = args.output_path
    overrides["prefix"] = args.prefix
    overrides["package"] = args.package
    overrides["func_name"] = args.func_name

    if args.nocompress:
        overrides["compress"] = False
    if args.debug:
        overrides["debug"] = True
    if args.recursive:
        overrides["recursive"] = True

    return overrides
