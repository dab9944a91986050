"""
Configuration loader — reads rocktree.yml into a ProjectConfig.

The file is optional: a project without one gets the defaults.  When
it exists it must be a YAML mapping whose keys are all known.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from rocktree.core.models.project import ProjectConfig

logger = logging.getLogger(__name__)

# Default config filename
PROJECT_CONFIG_FILE = "rocktree.yml"


class ConfigError(Exception):
    """Raised when project configuration is invalid or the project tree is unusable."""


def find_project_root(start_dir: Path | None = None) -> Path | None:
    """Search for rocktree.yml starting from the given directory, walking up.

    Returns:
        The directory holding rocktree.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        if (current / PROJECT_CONFIG_FILE).is_file():
            return current
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def load_project_config(path: Path) -> ProjectConfig:
    """Load and validate a project configuration file.

    Args:
        path: Path to rocktree.yml.  A missing file yields the defaults.

    Raises:
        ConfigError: If the file exists but is unreadable or invalid.
    """
    if not path.exists():
        logger.debug("No %s at %s, using defaults", PROJECT_CONFIG_FILE, path.parent)
        return ProjectConfig()

    if not path.is_file():
        raise ConfigError(f"Config path is not a file: {path}")

    logger.debug("Loading project config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return ProjectConfig()

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        return ProjectConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid project configuration in {path}: {e}") from e
