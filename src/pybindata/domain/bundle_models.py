from __future__ import annotations

"""
Bundle Result Data Models.

Defines the result object handed from the bundling pipeline to the
interface layer, together with its factory functions.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from pybindata.domain.asset_models import EncodedAsset
from pybindata.domain.config import BindataConfig

# Error categories reported in BundleResult.error_kind
ERROR_CONFIGURATION = "configuration"
ERROR_TRAVERSAL = "traversal"
ERROR_OUTPUT = "output"

# -----------------------------------------------------------------------------
# CORE DATA MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class BundleResult:
    """
    Outcome of a complete bundling run.

    Attributes:
        ok: Flag indicating success or failure.
        error: Descriptive message in case of failure.
        error_kind: Failure category (configuration/traversal/output).
        input_path: Directory that was bundled.
        output_path: Generated module location.
        mode: Embedding mode applied.
        asset_count: Number of assets in the bundle.
        total_bytes: Sum of the original asset sizes.
        embedded_bytes: Sum of the embedded payload sizes.
        asset_names: Canonical paths of the bundled assets.
    """
    ok: bool
    error: str = ""
    error_kind: str = ""

    input_path: str = ""
    output_path: str = ""
    mode: str = ""

    asset_count: int = 0
    total_bytes: int = 0
    embedded_bytes: int = 0
    asset_names: List[str] = field(default_factory=list)

# -----------------------------------------------------------------------------
# FACTORY FUNCTIONS
# -----------------------------------------------------------------------------

def create_error_result(
        error: str,
        error_kind: str,
        cfg: Optional[BindataConfig] = None,
) -> BundleResult:
    """
    Create a failed bundle result.

    Args:
        error: Detailed error description.
        error_kind: Failure category.
        cfg: Validated configuration, when validation got that far.

    Returns:
        BundleResult: Result flagged as failed.
    """
    return BundleResult(
        ok=False,
        error=error,
        error_kind=error_kind,
        input_path=cfg.input_path if cfg else "",
        output_path=cfg.output_path if cfg else "",
        mode=cfg.embed_mode.value if cfg else "",
    )


def create_success_result(cfg: BindataConfig, encoded: Sequence[EncodedAsset]) -> BundleResult:
    """
    Create a successful bundle result from the encoded assets.

    Args:
        cfg: Validated configuration of the run.
        encoded: Assets written into the generated module.

    Returns:
        BundleResult: Result with aggregated statistics.
    """
    return BundleResult(
        ok=True,
        input_path=cfg.input_path,
        output_path=cfg.output_path,
        mode=cfg.embed_mode.value,
        asset_count=len(encoded),
        total_bytes=sum(item.info.size for item in encoded),
        embedded_bytes=sum(len(item.payload or b"") for item in encoded),
        asset_names=[item.name for item in encoded],
    )
