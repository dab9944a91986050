"""
Project context — the single source of truth for "which game are we managing."

The project root is registered once at startup by the entry point
(``main.py`` via ``--game``, or tests via ``set_project_root``).  The
full ProjectContext (config, runtime version, tree path) is built
lazily on the first rock operation and cached for the rest of the
process.  There is no teardown: the process exits when the command
is done.

Design notes:
    - Module-level singleton (not a class), like the engine's own cfg.
    - ``reset_project_context()`` exists for tests only.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from rocktree.adapters.shell.filesystem import clean_path, ensure_dir
from rocktree.core.config.loader import PROJECT_CONFIG_FILE, ConfigError, load_project_config
from rocktree.core.models.project import ProjectContext
from rocktree.core.services.versions import resolve_config

logger = logging.getLogger(__name__)

_project_root: Optional[Path] = None
_project_context: Optional[ProjectContext] = None


def set_project_root(root: Path | str) -> None:
    """Register the project root for the current process."""
    global _project_root, _project_context
    _project_root = clean_path(root)
    if _project_context is not None and _project_context.root != _project_root:
        _project_context = None


def get_project_root() -> Optional[Path]:
    """Return the registered project root, or None if not yet set."""
    return _project_root


def get_project_context() -> ProjectContext:
    """Return the cached ProjectContext, building it on first use.

    Raises:
        ConfigError: If rocktree.yml is present but invalid, or the rock
            tree cannot be created.  Nothing is cached in that case.
    """
    global _project_context
    if _project_context is not None:
        return _project_context

    root = _project_root or clean_path(Path.cwd())
    config = load_project_config(root / PROJECT_CONFIG_FILE)
    version_info = resolve_config(config)

    context = ProjectContext(root=root, config=config, version_info=version_info)
    try:
        ensure_dir(context.tree)
    except OSError as e:
        raise ConfigError(f"Cannot create rock tree {context.tree}: {e.strerror or e}") from e

    logger.debug("Project %s at %s (runtime %s)", context.name, root, version_info.runtime_version)
    _project_context = context
    return context


def reset_project_context() -> None:
    """Forget the registered root and cached context (tests only)."""
    global _project_root, _project_context
    _project_root = None
    _project_context = None
