"""Configuration loading and path resolution for the DTA split job step."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from .exceptions import ConfigurationError
from .progress import STATUS_UPDATE_INTERVAL_SECONDS

logger = logging.getLogger(__name__)

DEFAULT_SEGMENT_COUNT = 4


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    log_file: Optional[Path] = None
    json_logs: bool = False


@dataclass
class SplitJobConfig:
    """Parameters of one DTA split job step."""

    dataset_name: str
    work_dir: Path
    number_of_cloned_steps: Any = None
    status_interval_seconds: float = STATUS_UPDATE_INTERVAL_SECONDS
    debug_level: int = 1
    write_manifest: bool = True
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    config_path: Optional[Path] = None

    @property
    def cdta_path(self) -> Path:
        return self.work_dir / f"{self.dataset_name}_dta.txt"


def resolve_env_vars(text: str) -> str:
    """Resolve environment variable placeholders in string."""
    work_root = os.getenv("DTA_SPLIT_WORK_DIR", ".")
    return text.replace("{DTA_SPLIT_WORK_DIR}", work_root)


def resolve_path(path_str: str) -> Path:
    """Resolve a path string, handling env vars and relative paths."""
    resolved = resolve_env_vars(str(path_str))

    if os.path.isabs(resolved):
        return Path(resolved)

    return (Path.cwd() / resolved).resolve()


def resolve_segment_count(value: Any) -> int:
    """Interpret the configured number of segments.

    A missing, zero or non-numeric value falls back to four segments with a
    warning; it is never fatal.
    """
    if value is None or value == "":
        logger.warning(
            f"Setting 'number_of_cloned_steps' not found in the job parameters; "
            f"will assume number_of_cloned_steps={DEFAULT_SEGMENT_COUNT}"
        )
        return DEFAULT_SEGMENT_COUNT

    try:
        segment_count = int(value)
    except (TypeError, ValueError):
        logger.warning(
            f"Setting 'number_of_cloned_steps' is not numeric ({value!r}); "
            f"will assume number_of_cloned_steps={DEFAULT_SEGMENT_COUNT}"
        )
        return DEFAULT_SEGMENT_COUNT

    if segment_count == 0:
        logger.warning(
            f"Setting 'number_of_cloned_steps' is 0; "
            f"will assume number_of_cloned_steps={DEFAULT_SEGMENT_COUNT}"
        )
        return DEFAULT_SEGMENT_COUNT

    return segment_count


def load_config(path: Path) -> SplitJobConfig:
    """Load and parse the job step configuration from a YAML file.

    Args:
        path: Path to config file

    Returns:
        SplitJobConfig instance

    Raises:
        ConfigurationError: If the file is missing, malformed or lacks required keys
    """
    path = Path(path)
    try:
        with open(path, "r") as f:
            raw = yaml.safe_load(f) or {}
    except FileNotFoundError as exc:
        raise ConfigurationError(f"Config file not found: {path}") from exc
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")

    missing = [key for key in ("dataset_name", "work_dir") if not raw.get(key)]
    if missing:
        raise ConfigurationError(
            f"Config file {path} is missing required keys: {', '.join(missing)}",
            metadata={"missing": missing},
        )

    logging_raw = raw.get("logging") or {}
    log_file = None
    if logging_raw.get("log_file"):
        log_file = resolve_path(logging_raw["log_file"])

    logging_cfg = LoggingConfig(
        level=logging_raw.get("level", "INFO"),
        log_file=log_file,
        json_logs=bool(logging_raw.get("json_logs", False)),
    )

    try:
        status_interval = float(raw.get("status_interval_seconds", STATUS_UPDATE_INTERVAL_SECONDS))
        debug_level = int(raw.get("debug_level", 1))
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid numeric setting in {path}: {exc}") from exc

    return SplitJobConfig(
        dataset_name=str(raw["dataset_name"]),
        work_dir=resolve_path(raw["work_dir"]),
        number_of_cloned_steps=raw.get("number_of_cloned_steps"),
        status_interval_seconds=status_interval,
        debug_level=debug_level,
        write_manifest=bool(raw.get("write_manifest", True)),
        logging=logging_cfg,
        config_path=path,
    )
