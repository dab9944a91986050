"""
Engine base — the protocol contract between the orchestrator and the rock engine.

The orchestrator never runs LuaRocks itself; it talks to an Engine.
An engine reads its settings from the process-wide ``cfg``
(``rocktree.adapters.engine.cfg``) and prints through the swappable
sinks in ``rocktree.adapters.engine.output``.

Positional ``*flags`` are LuaRocks-style command flags (``--outdated``,
``--only-deps``, ``--force``, ...).  The orchestrator passes them
through without interpreting them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from rocktree.adapters.engine.versions import Dependency
from rocktree.core.models.result import Result


@dataclass(frozen=True)
class RockDescriptor:
    """A package description handed to dependency fulfilment.

    ``version`` is empty for the anonymous descriptor built from a
    project: only its dependencies matter.
    """

    name: str
    version: str = ""
    dependencies: list[Dependency] = field(default_factory=list)


class Engine(ABC):
    """Abstract base class for rock engines.

    Engines perform the actual resolution, download, build and install
    work.  They NEVER raise for runtime failures (network down, rock not
    found, build error): those come back as failed Results with
    ``error_kind="engine"``.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The engine identifier (e.g., 'luarocks')."""

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the engine can run here.  Fast, never raises."""

    @abstractmethod
    def list(self, pattern: str | None, version: str | None, *flags: str) -> Result:
        """List rocks installed in the configured tree."""

    @abstractmethod
    def search(self, query: str, version: str | None = None) -> Result:
        """Search the configured repositories.  Value: list of RockInfo."""

    @abstractmethod
    def install(self, name: str, version: str | None = None) -> Result:
        """Install a rock (latest matching when ``version`` is None)."""

    @abstractmethod
    def remove(self, name: str, version: str | None, *flags: str) -> Result:
        """Remove a rock (every version when ``version`` is None)."""

    @abstractmethod
    def build(self, name: str, version: str | None, *flags: str) -> Result:
        """Build and install a rock from source."""

    @abstractmethod
    def purge(self, *flags: str) -> Result:
        """Remove every rock from a tree (``--tree=<path>`` flag)."""

    @abstractmethod
    def fulfill_dependencies(self, rock: RockDescriptor, deps_mode: str) -> Result:
        """Install whatever is needed to satisfy ``rock.dependencies``."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
