"""TOML configuration loader with env overrides."""

import logging
import os
import tomllib
from pathlib import Path

from ragtrace.domain.ports.config import AppConfig, PipelineConfig

logger = logging.getLogger(__name__)


def _load_toml(path: Path) -> dict:
    """Load TOML file."""
    with open(path, "rb") as f:
        return tomllib.load(f)


def _apply_env_overrides(config: dict) -> dict:
    """Apply environment variable overrides."""
    if level := os.getenv("LOG_LEVEL"):
        config.setdefault("logging", {})["level"] = level.upper()
    if path := os.getenv("LOG_FILE"):
        config.setdefault("logging", {})["file"] = path.strip()
    if enabled := os.getenv("PIPELINE_ENABLED_STEPS"):
        steps = [s.strip() for s in enabled.split(",") if s.strip()]
        if steps:
            config.setdefault("pipeline", {})["enabled_steps"] = steps
        else:
            logger.warning("Empty PIPELINE_ENABLED_STEPS env value: %r, ignoring", enabled)
    return config


class TomlConfigProvider:
    """ConfigPort implementation backed by load_config (loaded once)."""

    def __init__(self, config_dir: Path | None = None) -> None:
        self._config_dir = config_dir
        self._config: AppConfig | None = None

    def get_config(self) -> AppConfig:
        """Return the configuration, loading it on first access."""
        if self._config is None:
            self._config = load_config(self._config_dir)
        return self._config


def load_config(config_dir: Path | None = None) -> AppConfig:
    """Load configuration from TOML files with env overrides.

    Loads default.toml, then development.toml if exists.
    """
    if config_dir is None:
        config_dir = Path(__file__).resolve().parent.parent.parent.parent / "config"

    config: dict = {}

    default_path = config_dir / "default.toml"
    if default_path.exists():
        config = _load_toml(default_path)

    dev_path = config_dir / "development.toml"
    if dev_path.exists():
        dev_config = _load_toml(dev_path)
        for key, value in dev_config.items():
            if isinstance(value, dict) and key in config and isinstance(config[key], dict):
                config[key] = {**config[key], **value}
            else:
                config[key] = value

    config = _apply_env_overrides(config)

    pipeline = PipelineConfig(**(config.get("pipeline") or {}))
    logging_raw = config.get("logging") or {}
    log_level = logging_raw.get("level", "INFO")
    log_file = (logging_raw.get("file") or "").strip()
    log_rotation_max_mb = int(logging_raw.get("log_rotation_max_mb", 5))
    log_rotation_backups = int(logging_raw.get("log_rotation_backups", 3))

    return AppConfig(
        pipeline=pipeline,
        log_level=log_level,
        log_file=log_file,
        log_rotation_max_mb=log_rotation_max_mb,
        log_rotation_backups=log_rotation_backups,
    )
