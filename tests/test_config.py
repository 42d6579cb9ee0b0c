"""
Configuration tests.
"""
from pathlib import Path

import pytest
import yaml

from dta_split.config import (
    DEFAULT_SEGMENT_COUNT,
    load_config,
    resolve_segment_count,
)
from dta_split.exceptions import ConfigurationError


def _write_config(tmp_path: Path, data: dict) -> Path:
    path = tmp_path / "dta_split.yaml"
    with open(path, "w") as f:
        yaml.safe_dump(data, f)
    return path


def test_load_config_with_env_placeholder(tmp_path, monkeypatch):
    monkeypatch.setenv("DTA_SPLIT_WORK_DIR", str(tmp_path))
    path = _write_config(
        tmp_path,
        {
            "dataset_name": "QC_Shew_07",
            "work_dir": "{DTA_SPLIT_WORK_DIR}/job_42",
            "number_of_cloned_steps": 6,
            "status_interval_seconds": 5,
            "debug_level": 2,
            "logging": {"level": "DEBUG", "json_logs": True},
        },
    )

    cfg = load_config(path)

    assert cfg.dataset_name == "QC_Shew_07"
    assert cfg.work_dir == tmp_path / "job_42"
    assert cfg.cdta_path == tmp_path / "job_42" / "QC_Shew_07_dta.txt"
    assert cfg.number_of_cloned_steps == 6
    assert cfg.status_interval_seconds == 5.0
    assert cfg.debug_level == 2
    assert cfg.write_manifest is True
    assert cfg.logging.level == "DEBUG"
    assert cfg.logging.json_logs is True
    assert cfg.config_path == path


def test_load_config_defaults(tmp_path):
    path = _write_config(tmp_path, {"dataset_name": "A", "work_dir": str(tmp_path)})

    cfg = load_config(path)

    assert cfg.number_of_cloned_steps is None
    assert cfg.status_interval_seconds == 15.0
    assert cfg.logging.level == "INFO"
    assert cfg.logging.log_file is None


def test_load_config_missing_keys(tmp_path):
    path = _write_config(tmp_path, {"dataset_name": "A"})

    with pytest.raises(ConfigurationError) as excinfo:
        load_config(path)

    assert excinfo.value.metadata["missing"] == ["work_dir"]


def test_load_config_missing_file(tmp_path):
    with pytest.raises(ConfigurationError):
        load_config(tmp_path / "nope.yaml")


def test_load_config_invalid_yaml(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("dataset_name: [unclosed\n")

    with pytest.raises(ConfigurationError):
        load_config(path)


@pytest.mark.parametrize(
    "setting, value", [("status_interval_seconds", "fast"), ("debug_level", "high"), ("debug_level", [1])]
)
def test_load_config_non_numeric_setting(tmp_path, setting, value):
    path = _write_config(tmp_path, {"dataset_name": "QC_Shew_07", "work_dir": str(tmp_path), setting: value})

    with pytest.raises(ConfigurationError, match="Invalid numeric setting"):
        load_config(path)


@pytest.mark.parametrize("value", [None, "", 0, "0", "four", [1, 2]])
def test_segment_count_falls_back_to_default(value, caplog):
    with caplog.at_level("WARNING", logger="dta_split.config"):
        assert resolve_segment_count(value) == DEFAULT_SEGMENT_COUNT

    assert "will assume number_of_cloned_steps=4" in caplog.text


@pytest.mark.parametrize("value, expected", [(1, 1), (3, 3), ("8", 8), (-2, -2)])
def test_segment_count_uses_configured_value(value, expected):
    assert resolve_segment_count(value) == expected
