"""Configuration loading."""

from ragtrace.infrastructure.config.toml_loader import TomlConfigProvider, load_config

__all__ = ["TomlConfigProvider", "load_config"]
