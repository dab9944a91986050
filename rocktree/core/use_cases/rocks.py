"""
Rock operations — the public API every CLI command goes through.

Each operation follows the same protocol:

    project context (built once per process)
      → overlay enter         (engine points at <project>/rocks)
        → output redirect     (engine prints become log records)
          → engine call
        ← output restore
      ← overlay leave         (engine config exactly as before)
    → Result

Expected failures (bad rocktree.yml, bad dependency string, engine
failure) come back as failed Results.  ContractViolation and anything
else unexpected propagate, after the overlay has been closed.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from rocktree.adapters.base import Engine
from rocktree.adapters.engine import cfg as engine_cfg
from rocktree.adapters.engine import get_engine
from rocktree.adapters.engine import versions as engine_versions
from rocktree.core.config.loader import ConfigError
from rocktree.core.context import get_project_context
from rocktree.core.models.flags import OperationFlags
from rocktree.core.models.result import Result, RockInfo
from rocktree.core.services.deps import ParseError, fulfill_parsed, parse_specifiers
from rocktree.core.services.output import redirected_output
from rocktree.core.services.overlay import overlay

logger = logging.getLogger(__name__)


def _run_operation(
    operation: str,
    flags: OperationFlags | None,
    call: Callable[[Engine], Result],
) -> Result:
    flags = flags or OperationFlags()

    try:
        context = get_project_context()
    except ConfigError as e:
        return Result.failure(operation, str(e), kind="config")

    engine = get_engine()
    start = time.monotonic()

    with overlay(context, flags):
        with redirected_output():
            result = call(engine)

    elapsed_ms = int((time.monotonic() - start) * 1000)
    if result.failed:
        logger.warning("%s failed: %s", operation, result.error)
    return result.model_copy(update={"operation": operation, "duration_ms": elapsed_ms})


# ═══════════════════════════════════════════════════════════════════
#  Observe
# ═══════════════════════════════════════════════════════════════════


def list_rocks(
    pattern: str | None = None,
    version: str | None = None,
    flags: OperationFlags | None = None,
) -> Result:
    """List rocks installed in the project tree.

    ``flags.outdated`` and ``flags.porcelain`` go to the engine as
    ``--outdated`` / ``--porcelain``.
    """
    flags = flags or OperationFlags()
    args = flags.list_args()
    logger.info("luarocks list %s", " ".join(a for a in (pattern, version, *args) if a))
    return _run_operation("list", flags, lambda engine: engine.list(pattern, version, *args))


def show_rock(name: str, version: str | None = None, field: str | None = None) -> Result:
    """Information about one installed rock, or one field of it."""
    result = list_rocks(name, version, OperationFlags(porcelain=True))
    if result.failed:
        return result

    matches = [r for r in (result.value or []) if r.name == name]
    if version:
        matches = [r for r in matches if r.version == version]
    if not matches:
        return Result.failure("show", f"cannot find package {name} {version or ''}".strip())

    rock = matches[0]
    if field:
        if field not in RockInfo.model_fields:
            return Result.failure("show", f"unknown field {field!r}")
        return Result.success("show", value=getattr(rock, field))
    return Result.success("show", value=rock)


def search_rocks(
    query: str,
    version: str | None = None,
    flags: OperationFlags | None = None,
) -> Result:
    """Search the project's repositories.

    Results are ordered newest first; equal versions keep repository
    order, so the first listed repository comes first.
    """
    logger.info("luarocks search %s %s", query, version or "")
    result = _run_operation("search", flags, lambda engine: engine.search(query, version))
    if result.failed or not result.value:
        return result

    try:
        ordered = _sort_newest_first(result.value)
    except engine_versions.VersionError as e:
        return Result.failure("search", str(e), kind="parse", duration_ms=result.duration_ms)
    return result.model_copy(update={"value": ordered})


def _sort_newest_first(rocks: list[RockInfo]) -> list[RockInfo]:
    def key(item: tuple[int, RockInfo]) -> tuple[Any, int]:
        index, rock = item
        return engine_versions.parse_version(rock.version), -index

    ranked = sorted(enumerate(rocks), key=key, reverse=True)
    return [rock for _, rock in ranked]


def latest_available(rocks: Iterable[RockInfo], first_repo: bool = True) -> RockInfo | None:
    """The newest rock among search results.

    When several repositories offer that version, pick the first-listed
    one (or the last, with ``first_repo=False``).
    """
    candidates = list(rocks)
    if not candidates:
        return None

    newest = max(engine_versions.parse_version(r.version) for r in candidates)
    tied = [r for r in candidates if engine_versions.parse_version(r.version) == newest]
    return tied[0] if first_repo else tied[-1]


def compare_versions(local_info: Any, remote_info: Any) -> bool:
    """True if ``remote_info`` is strictly newer than ``local_info``.

    Both arguments are RockInfo objects or mappings with a ``version`` key.
    """
    return engine_versions.compare_versions(_version_of(remote_info), _version_of(local_info))


def _version_of(info: Any) -> str:
    if isinstance(info, Mapping):
        return info["version"]
    return info.version


# ═══════════════════════════════════════════════════════════════════
#  Act
# ═══════════════════════════════════════════════════════════════════


def install_rock(
    name: str,
    version: str | None = None,
    flags: OperationFlags | None = None,
) -> Result:
    """Install a rock into the project tree.

    ``version=None`` installs the latest.  ``flags.from_`` searches one
    more repository first; ``flags.only_from`` searches only that one.
    """
    logger.info("luarocks install %s %s", name, version or "")
    return _run_operation("install", flags, lambda engine: engine.install(name, version))


def remove_rock(
    name: str,
    version: str | None = None,
    flags: OperationFlags | None = None,
) -> Result:
    """Remove a rock (every installed version when ``version`` is None)."""
    flags = flags or OperationFlags()
    args = flags.remove_args()
    logger.info("luarocks remove %s %s", name, version or "")
    return _run_operation("remove", flags, lambda engine: engine.remove(name, version, *args))


def build_rock(
    name: str,
    version: str | None = None,
    flags: OperationFlags | None = None,
) -> Result:
    """Build a rock from source.  ``flags.only_deps`` installs only its dependencies."""
    flags = flags or OperationFlags()
    args = flags.build_args()
    logger.info("luarocks build %s %s", name, " ".join([version or "", *args]).strip())
    return _run_operation("build", flags, lambda engine: engine.build(name, version, *args))


def purge_rocks(flags: OperationFlags | None = None) -> Result:
    """Remove every rock from the project tree.  Never touches a shared tree."""
    flags = (flags or OperationFlags()).model_copy(update={"use_local": True})

    def call(engine: Engine) -> Result:
        # inside the overlay root_dir is <project>/rocks
        args = [f"--tree={engine_cfg.cfg.root_dir}", *flags.purge_args()]
        return engine.purge(*args)

    logger.info("luarocks purge")
    return _run_operation("purge", flags, call)


def install_deps(
    name: str,
    specifiers: Iterable[str],
    flags: OperationFlags | None = None,
) -> Result:
    """Satisfy a list of dependency specifiers for project ``name``.

    Specifiers are parsed before anything global is touched; a bad one
    fails the whole call with ``error_kind="parse"``.
    """
    try:
        dependencies = parse_specifiers(specifiers)
    except ParseError as e:
        return Result.failure("deps", str(e), kind="parse", metadata={"specifier": e.specifier})

    return _run_operation(
        "deps", flags, lambda engine: fulfill_parsed(name, dependencies, engine)
    )
