from __future__ import annotations

"""
pybindata: embed a directory of files into a self-contained Python module.
"""

from pybindata.domain.constants import APP_NAME, APP_VERSION

__version__ = APP_VERSION

__all__ = ["APP_NAME", "__version__"]
