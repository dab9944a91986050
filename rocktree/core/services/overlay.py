"""
Config overlay — point the engine at one project for exactly one operation.

The engine's configuration (``adapters.engine.cfg.cfg``) is a process-wide
singleton.  Every rock operation:

    1. enter():  snapshot cfg and the working directory, rewrite the tree
                 paths to <project>/rocks, apply the runtime's defaults,
                 compose the repository list, clear the manifest cache
    2. run the engine call
    3. leave():  put back every field that was snapshotted, chdir back

Repository list composition:

    default  = project repositories + whatever cfg already had
    from     → [from, *default]        (checked first)
    only_from→ [only_from]

Only one overlay window may be open at a time.  Opening a second one,
or leaving without a matching enter, raises ContractViolation: that is
a bug in the caller, not a runtime condition.

Use ``overlay()`` rather than calling enter/leave by hand.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from rocktree.adapters.engine import cfg as engine_cfg
from rocktree.adapters.engine.cfg import EngineConfig
from rocktree.core.models.flags import OperationFlags
from rocktree.core.models.project import ProjectContext

logger = logging.getLogger(__name__)


class ContractViolation(RuntimeError):
    """An orchestration invariant was broken.  Never caught by the façade."""


@dataclass(frozen=True)
class SavedState:
    """Everything ``enter()`` changed, as it was before."""

    config: EngineConfig
    cwd: str
    flags: OperationFlags


_active: SavedState | None = None


def is_active() -> bool:
    return _active is not None


def _dedupe(repos: list[str]) -> list[str]:
    seen: list[str] = []
    for repo in repos:
        if repo not in seen:
            seen.append(repo)
    return seen


def compose_servers(defaults: list[str], flags: OperationFlags) -> list[str]:
    """The repository list an operation searches, highest priority first."""
    if flags.from_:
        return _dedupe([flags.from_, *defaults])
    if flags.only_from:
        return [flags.only_from]
    return list(defaults)


def enter(context: ProjectContext, flags: OperationFlags) -> SavedState:
    """Open the overlay window.

    Raises:
        ContractViolation: If a window is already open.
    """
    global _active
    if _active is not None:
        raise ContractViolation("overlay already active: nested enter() is not allowed")

    cfg = engine_cfg.cfg
    saved = SavedState(
        config=cfg.model_copy(deep=True),
        cwd=os.getcwd(),
        flags=flags,
    )
    _active = saved

    info = context.version_info
    cfg.set_lua_version(info.lua_version)
    cfg.rocks_provided = {**saved.config.rocks_provided, **info.provided}
    if flags.use_local:
        cfg.use_tree(str(context.tree))

    defaults = _dedupe([*context.repositories, *saved.config.rocks_servers])
    cfg.rocks_servers = compose_servers(defaults, flags)

    engine_cfg.clear_manifest_cache()

    logger.debug("overlay: tree=%s servers=%s", cfg.root_dir, cfg.rocks_servers)
    return saved


def leave(saved: SavedState) -> None:
    """Close the overlay window, restoring every snapshotted field.

    Raises:
        ContractViolation: If ``saved`` is not the token of the open window.
    """
    global _active
    if _active is None:
        raise ContractViolation("leave() called without a matching enter()")
    if saved is not _active:
        raise ContractViolation("leave() called with a stale overlay token")

    cfg = engine_cfg.cfg
    for name in EngineConfig.model_fields:
        setattr(cfg, name, getattr(saved.config, name))

    try:
        os.chdir(saved.cwd)
    finally:
        _active = None


@contextmanager
def overlay(context: ProjectContext, flags: OperationFlags) -> Iterator[SavedState]:
    saved = enter(context, flags)
    try:
        yield saved
    finally:
        leave(saved)
