from __future__ import annotations

"""
Unit tests for the Configuration Validator.

Verifies default filling, type coercion, range clamping and strict mode.
"""

import pytest

from codemap.core.pipeline.validator import validate_config
from codemap.domain.config import get_default_config


def test_none_returns_defaults_without_warnings():
    cfg, warnings = validate_config(None)

    assert cfg == get_default_config()
    assert warnings == []


def test_invalid_type_falls_back_to_defaults():
    cfg, warnings = validate_config(["not", "a", "dict"])

    assert cfg["output_file"] == "knowledge-map.json"
    assert len(warnings) == 1


def test_invalid_type_strict_raises():
    with pytest.raises(TypeError):
        validate_config("bad", strict=True)


def test_valid_config_passes_untouched(mock_config_dict):
    cfg, warnings = validate_config(mock_config_dict)

    assert warnings == []
    assert cfg == mock_config_dict


def test_bool_and_int_coercion(mock_config_dict):
    mock_config_dict.update({"enable_ai": "yes", "write_output": 0, "max_depth": "8"})

    cfg, warnings = validate_config(mock_config_dict)

    assert cfg["enable_ai"] is True
    assert cfg["write_output"] is False
    assert cfg["max_depth"] == 8
    assert len(warnings) == 3


def test_out_of_range_ints_are_clamped(mock_config_dict):
    mock_config_dict.update({"max_depth": 0, "hierarchy_max_depth": 5000})

    cfg, warnings = validate_config(mock_config_dict)

    assert cfg["max_depth"] == 1
    assert cfg["hierarchy_max_depth"] == 100
    assert any("out of range" in w for w in warnings)


def test_out_of_range_strict_raises(mock_config_dict):
    mock_config_dict["max_depth"] = -1
    with pytest.raises(ValueError):
        validate_config(mock_config_dict, strict=True)


def test_bool_is_not_accepted_as_int(mock_config_dict):
    mock_config_dict["ai_timeout"] = True

    cfg, warnings = validate_config(mock_config_dict)

    assert cfg["ai_timeout"] == 30
    assert warnings


def test_skip_folders_csv_and_list(mock_config_dict):
    mock_config_dict["extra_skip_folders"] = "generated, tmp ,"
    cfg, _ = validate_config(mock_config_dict)
    assert cfg["extra_skip_folders"] == ["generated", "tmp"]

    mock_config_dict["extra_skip_folders"] = ["out", 3, " "]
    cfg, warnings = validate_config(mock_config_dict)
    assert cfg["extra_skip_folders"] == ["out"]
    assert any("discarded" in w for w in warnings)


def test_output_file_is_reduced_to_a_name(mock_config_dict):
    mock_config_dict["output_file"] = "nested/dir/map.json"

    cfg, warnings = validate_config(mock_config_dict)

    assert cfg["output_file"] == "map.json"
    assert warnings
