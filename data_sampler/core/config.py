# data_sampler/core/config.py
from __future__ import annotations
import copy
import logging
from pathlib import Path
import yaml

from .model import (
    DEFAULT_DISPLACEMENT_FIELD,
    DEFAULT_MIN_MAX_FIELD,
    DEFAULT_PRESSURE_FIELD,
    DEFAULT_PRESSURE_THRESHOLD,
    ThresholdConfig,
)

DEFAULT_CONFIG: dict = {
    "input": {"path": "input", "recurse": False, "index": None},
    "output": {"root": "output"},
    "analysis": {
        "pressure_field": DEFAULT_PRESSURE_FIELD,
        "displacement_field": DEFAULT_DISPLACEMENT_FIELD,
        "min_max_field": DEFAULT_MIN_MAX_FIELD,
        "pressure_threshold": DEFAULT_PRESSURE_THRESHOLD,
    },
    "reports": {"format": "trd", "mat_variable": "cycles"},
    "plots": {"enabled": False},
    "logging": {"verbose": True, "level": "WARNING"},
}

_LOG = logging.getLogger(__name__)


def default_config() -> dict:
    return copy.deepcopy(DEFAULT_CONFIG)


def ensure_config(cfg_path: Path) -> bool:
    """Write the default config if the file is missing. Returns True when a file was created."""
    if cfg_path.is_file():
        return False
    cfg_path.parent.mkdir(parents=True, exist_ok=True)
    with cfg_path.open("w", encoding="utf-8") as f:
        yaml.safe_dump(default_config(), f, sort_keys=False)
    _LOG.info("created default config at %s", cfg_path)
    return True


def load_config(cfg_path: Path) -> dict:
    """safe_load the YAML file; sections missing from it keep their defaults."""
    with cfg_path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"{cfg_path}: top level must be a mapping, got {type(raw).__name__}")

    cfg = default_config()
    for section, values in raw.items():
        if isinstance(values, dict) and isinstance(cfg.get(section), dict):
            cfg[section].update(values)
        else:
            cfg[section] = values
    return cfg


def threshold_config_from(cfg: dict | None) -> ThresholdConfig:
    """Build the immutable run thresholds from the ``analysis`` section."""
    ana = (cfg or {}).get("analysis", {}) or {}
    raw_threshold = ana.get("pressure_threshold", DEFAULT_PRESSURE_THRESHOLD)
    try:
        threshold = float(raw_threshold)
    except (TypeError, ValueError):
        raise ValueError(f"analysis.pressure_threshold must be a number, got {raw_threshold!r}") from None
    return ThresholdConfig(
        pressure_field=str(ana.get("pressure_field", DEFAULT_PRESSURE_FIELD)),
        displacement_field=str(ana.get("displacement_field", DEFAULT_DISPLACEMENT_FIELD)),
        min_max_field=str(ana.get("min_max_field", DEFAULT_MIN_MAX_FIELD)),
        pressure_threshold=threshold,
    )
