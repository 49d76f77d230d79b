from __future__ import annotations

"""
Domain Constants.

Application identity and the defaults shared by the configuration layer,
the generator and the CLI.
"""

APP_NAME = "pybindata"
APP_VERSION = "0.2.0"

DEFAULT_PACKAGE_NAME = "assets"
GENERATED_EXTENSION = ".py"

# Public names bound at module level in every generated bundle
GENERATED_API = (
    "get",
    "must_get",
    "get_info",
    "list_assets",
    "list_dir",
    "restore",
    "restore_asset",
    "restore_all",
)
