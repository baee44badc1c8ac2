"""
Configuration loader — reads rpcgen.yml into a GenerationConfig.

It reads YAML, validates against the Pydantic schema, and returns a
typed config. Environment switches used by the protoc plugin (which has
no command line of its own) are resolved here too.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from rpcgen.core.models.config import GenerationConfig

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "rpcgen.yml"

# Enables __report__.log for protoc runs
REPORT_ENV_VAR = "RPCGEN_REPORT"

_TRUTHY = frozenset({"1", "true", "yes", "on"})


class ConfigError(Exception):
    """Raised when rpcgen configuration is invalid or unreadable."""


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for rpcgen.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to rpcgen.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def load_config(path: Path | None = None) -> GenerationConfig:
    """Load and validate generation configuration.

    Args:
        path: Explicit path to rpcgen.yml. If None, searches upward and
            falls back to defaults when nothing is found.

    Returns:
        Validated GenerationConfig.

    Raises:
        ConfigError: If an explicit file is missing, or any file is invalid.
    """
    if path is None:
        path = find_config_file()
        if path is None:
            logger.debug("No %s found, using defaults", CONFIG_FILE)
            return GenerationConfig()

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading rpcgen config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # The YAML may wrap everything under an "rpcgen" key or be flat
    if isinstance(data.get("rpcgen"), dict):
        data = data["rpcgen"]

    try:
        config = GenerationConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid rpcgen configuration: {e}") from e

    logger.info("Loaded rpcgen config from %s (mode=%s)", path, config.mode)
    return config


def config_root(config_path: Path) -> Path:
    """Directory that relative paths in the config are resolved against."""
    return config_path.parent.resolve()


def report_enabled(environ: dict[str, str] | None = None) -> bool:
    """Whether RPCGEN_REPORT asks for the diagnostic summary."""
    env = os.environ if environ is None else environ
    return env.get(REPORT_ENV_VAR, "").strip().lower() in _TRUTHY
