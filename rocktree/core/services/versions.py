"""
Runtime version resolution — which LÖVE a project targets and what that implies.

Reads the project's rocktree.yml, validates ``runtime_version`` and
derives the engine defaults for it:

    - the Lua ABI the runtime embeds (5.1 / LuaJIT for every release)
    - the ``love`` rock the runtime provides, so rocks that depend on
      ``love >= 11`` resolve without installing anything
    - extra search repositories (the compatibility mirror for the
      0.9 / 0.10 series)

Pure with respect to its one input file.  No network access.
"""

from __future__ import annotations

import logging
from pathlib import Path

from rocktree.core.config.loader import ConfigError, load_project_config
from rocktree.core.models.project import ProjectConfig, VersionInfo

logger = logging.getLogger(__name__)

LEGACY_REPOSITORY = "https://luarocks.org/manifests/love-legacy"

# runtime version → Lua version, legacy flag
SUPPORTED_RUNTIMES: dict[str, dict] = {
    "0.9.0": {"lua": "5.1", "legacy": True},
    "0.9.1": {"lua": "5.1", "legacy": True},
    "0.9.2": {"lua": "5.1", "legacy": True},
    "0.10.0": {"lua": "5.1", "legacy": True},
    "0.10.1": {"lua": "5.1", "legacy": True},
    "0.10.2": {"lua": "5.1", "legacy": True},
    "11.0": {"lua": "5.1", "legacy": False},
    "11.1": {"lua": "5.1", "legacy": False},
    "11.2": {"lua": "5.1", "legacy": False},
    "11.3": {"lua": "5.1", "legacy": False},
    "11.4": {"lua": "5.1", "legacy": False},
    "11.5": {"lua": "5.1", "legacy": False},
}

DEFAULT_RUNTIME_VERSION = "11.5"


def version_info_for(runtime_version: str | None) -> VersionInfo:
    """Build the VersionInfo for a declared runtime version.

    Raises:
        ConfigError: If the version is not a supported LÖVE release.
    """
    version = runtime_version or DEFAULT_RUNTIME_VERSION
    spec = SUPPORTED_RUNTIMES.get(version)
    if spec is None:
        supported = ", ".join(SUPPORTED_RUNTIMES)
        raise ConfigError(
            f"Unsupported runtime version {version!r}. Supported: {supported}"
        )

    return VersionInfo(
        runtime_version=version,
        lua_version=spec["lua"],
        provided={"love": f"{version}-1"},
        repositories=[LEGACY_REPOSITORY] if spec["legacy"] else [],
    )


def resolve_config(config: ProjectConfig) -> VersionInfo:
    """Resolve VersionInfo from an already-loaded ProjectConfig."""
    info = version_info_for(config.runtime_version)
    logger.debug("Runtime %s (lua %s)", info.runtime_version, info.lua_version)
    return info


def resolve(config_path: Path) -> VersionInfo:
    """Resolve VersionInfo from a project configuration file (may be absent)."""
    return resolve_config(load_project_config(config_path))
