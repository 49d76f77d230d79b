from __future__ import annotations

"""
Unit tests for the Configuration Validation Service.

Ensures that untrusted values are coerced into a typed BindataConfig,
that unusable paths are rejected up front and that the output filename
is derived when omitted.
"""

from pathlib import Path

import pytest

from pybindata.core.pipeline.validator import validate_config
from pybindata.domain.asset_models import EmbedMode
from pybindata.domain.errors import ConfigurationError

# -----------------------------------------------------------------------------
# Type Coercion
# -----------------------------------------------------------------------------

def test_defaults_are_injected(scenario_dir: Path) -> None:
    cfg, _ = validate_config({"input_path": str(scenario_dir), "output_path": "out.py"})

    assert cfg.package == "assets"
    assert cfg.func_name == ""
    assert cfg.prefix == ""
    assert cfg.compress is True
    assert cfg.recursive is False
    assert cfg.embed_mode is EmbedMode.COMPRESS


def test_string_booleans_are_coerced_with_warning(scenario_dir: Path) -> None:
    cfg, warnings = validate_config({
        "input_path": str(scenario_dir),
        "output_path": "out.py",
        "compress": "no",
        "recursive": "yes",
    })

    assert cfg.compress is False
    assert cfg.recursive is True
    assert cfg.embed_mode is EmbedMode.RAW
    assert len(warnings) == 2


def test_invalid_types_fall_back(scenario_dir: Path) -> None:
    cfg, warnings = validate_config({
        "input_path": str(scenario_dir),
        "output_path": "out.py",
        "package": 42,
        "debug": [1],
    })

    assert cfg.package == "assets"
    assert cfg.debug is False
    assert any("package" in w for w in warnings)
    assert any("debug" in w for w in warnings)


def test_strict_mode_raises_on_type_mismatch(scenario_dir: Path) -> None:
    with pytest.raises(TypeError):
        validate_config({"input_path": str(scenario_dir), "compress": "maybe"}, strict=True)


def test_debug_overrides_compression(scenario_dir: Path) -> None:
    cfg, _ = validate_config({"input_path": str(scenario_dir), "output_path": "o.py", "debug": True})
    assert cfg.embed_mode is EmbedMode.DEBUG


def test_non_dict_config_is_rejected() -> None:
    with pytest.raises(ConfigurationError):
        validate_config(["not", "a", "dict"])

# -----------------------------------------------------------------------------
# Entry Function Name
# -----------------------------------------------------------------------------

@pytest.mark.parametrize(
    "raw, expected",
    [
        ("WebAsset", "WebAsset"),
        ("Asset", "Asset_asset"),
        ("gzip", "gzip_asset"),
        ("open", "open_asset"),
        ("decode_payload", "decode_payload_asset"),
        ("list_dir", "list_dir_asset"),
        ("my-asset", "my_asset"),
        ("1st", "_1st"),
        ("class", "_class"),
        ("_store", "store_asset"),
    ],
)
def test_func_name_is_made_a_safe_identifier(scenario_dir: Path, raw: str, expected: str) -> None:
    cfg, _ = validate_config({"input_path": str(scenario_dir), "output_path": "o.py", "func_name": raw})
    assert cfg.func_name == expected

# -----------------------------------------------------------------------------
# Path Checks
# -----------------------------------------------------------------------------

def test_missing_input_is_rejected() -> None:
    with pytest.raises(ConfigurationError):
        validate_config({})


def test_nonexistent_input_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError) as exc:
        validate_config({"input_path": str(tmp_path / "ghost")})
    assert "does not exist" in str(exc.value)


def test_file_input_is_rejected(tmp_path: Path) -> None:
    f = tmp_path / "file.txt"
    f.write_text("x")

    with pytest.raises(ConfigurationError):
        validate_config({"input_path": str(f)})


def test_directory_output_is_rejected(scenario_dir: Path, tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError):
        validate_config({"input_path": str(scenario_dir), "output_path": str(tmp_path)})


def test_output_defaults_next_to_input(scenario_dir: Path) -> None:
    cfg, warnings = validate_config({"input_path": str(scenario_dir)})

    assert cfg.output_path == str(scenario_dir) + ".py"
    assert any("No output file specified" in w for w in warnings)


def test_default_output_skips_existing_files(scenario_dir: Path) -> None:
    Path(str(scenario_dir) + ".py").write_text("taken")
    Path(str(scenario_dir) + ".0.py").write_text("taken")

    cfg, _ = validate_config({"input_path": str(scenario_dir)})
    assert cfg.output_path == str(scenario_dir) + ".1.py"
