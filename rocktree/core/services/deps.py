"""
Dependency fulfilment — turn specifier strings into installed rocks.

    parse_specifiers(["inspect >= 3.0", "middleclass"])
        → [Dependency("inspect", (>= 3.0,)), Dependency("middleclass", ())]

    fulfill("mygame", specifiers)
        → engine.fulfill_dependencies(RockDescriptor("mygame", "", deps), "all")

Parsing is all-or-nothing: the first malformed string aborts before
the engine is touched.  Once the engine runs, a partial failure is
reported as-is; undoing already-installed rocks is not our job.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from rocktree.adapters.base import Engine, RockDescriptor
from rocktree.adapters.engine import get_engine
from rocktree.adapters.engine.versions import Dependency, parse_dep
from rocktree.core.models.result import Result
from rocktree.core.services.overlay import ContractViolation

logger = logging.getLogger(__name__)

# Consider every configured tree when checking what is already installed.
DEPS_MODE = "all"


class ParseError(ValueError):
    """Raised when a dependency specifier cannot be parsed."""

    def __init__(self, specifier: str):
        self.specifier = specifier
        super().__init__(f"Invalid dependency specifier: {specifier!r}")


def parse_specifiers(specifiers: Iterable[str]) -> list[Dependency]:
    """Parse every specifier, failing on the first bad one.

    Raises:
        ParseError: naming the offending string.
    """
    parsed = []
    for spec in specifiers:
        dep = parse_dep(spec)
        if dep is None:
            raise ParseError(spec)
        parsed.append(dep)
    return parsed


def fulfill_parsed(
    project_name: str,
    dependencies: list[Dependency],
    engine: Engine | None = None,
) -> Result:
    """Ask the engine to satisfy already-parsed dependencies."""
    if not isinstance(project_name, str) or not project_name:
        raise ContractViolation(f"project name must be a non-empty string, got {project_name!r}")

    engine = engine or get_engine()
    rock = RockDescriptor(name=project_name, version="", dependencies=list(dependencies))
    logger.info(
        "Fulfilling %d dependencies for %s: %s",
        len(rock.dependencies),
        project_name,
        ", ".join(str(d) for d in rock.dependencies) or "(none)",
    )
    return engine.fulfill_dependencies(rock, DEPS_MODE)


def fulfill(
    project_name: str,
    specifiers: Iterable[str],
    engine: Engine | None = None,
) -> Result:
    """Parse ``specifiers`` and satisfy them all.

    Raises:
        ParseError: before any engine call, if a specifier is malformed.
    """
    return fulfill_parsed(project_name, parse_specifiers(specifiers), engine)
