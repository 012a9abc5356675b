"""
Configuration loading for LifeOS.

Settings live in args/lifeos.yaml, one top-level section per package
(dashboard, momentum, roadmap, pathfinder, vault). A missing file or
section yields an empty dict so every caller can fall back to its own
defaults. Secrets (API keys, master key) come from the environment,
usually via a .env file loaded by the dashboard on startup.
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from lifeos import CONFIG_PATH


logger = logging.getLogger(__name__)


def load_config(path: Path | None = None) -> dict[str, Any]:
    """Load the LifeOS configuration from YAML."""
    config_path = path or CONFIG_PATH
    if not config_path.exists():
        return {}
    with open(config_path) as f:
        try:
            return yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            logger.error(f"Invalid configuration in {config_path}: {e}")
            raise


def get_section(name: str, path: Path | None = None) -> dict[str, Any]:
    """Return one top-level section of the configuration."""
    section = load_config(path).get(name) or {}
    if not isinstance(section, dict):
        raise ValueError(f"Config section '{name}' must be a mapping")
    return section


def get_secret(name: str) -> str | None:
    """Read a secret from the environment, treating blanks as unset."""
    value = os.environ.get(name, "").strip()
    return value or None


__all__ = ["get_secret", "get_section", "load_config"]
