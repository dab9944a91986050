"""
Mock engine — test double for every engine operation.

Records each call together with a snapshot of the engine config as it
was *during* the call, so tests can check what the overlay set up.
By default every operation succeeds; individual operations can be
configured to fail, raise, print, or return a custom value.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from rocktree.adapters.base import Engine, RockDescriptor
from rocktree.adapters.engine import cfg as engine_cfg
from rocktree.adapters.engine import output
from rocktree.adapters.engine.cfg import EngineConfig
from rocktree.core.models.result import Result


@dataclass
class EngineCall:
    """One recorded engine call."""

    operation: str
    args: tuple[Any, ...]
    config: EngineConfig
    kwargs: dict[str, Any] = field(default_factory=dict)


class MockEngine(Engine):
    """Universal mock engine for testing."""

    def __init__(self, engine_name: str = "mock", available: bool = True):
        self._name = engine_name
        self._available = available
        self._failures: dict[str, str] = {}
        self._raises: dict[str, Exception] = {}
        self._values: dict[str, Any] = {}
        self._stdout: dict[str, list[str]] = {}
        self._stderr: dict[str, list[str]] = {}
        self._call_log: list[EngineCall] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_log(self) -> list[EngineCall]:
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    @property
    def last_call(self) -> EngineCall:
        return self._call_log[-1]

    def is_available(self) -> bool:
        return self._available

    # ── Configuration ───────────────────────────────────────────

    def set_failure(self, operation: str, error: str = "Mock failure") -> None:
        """Make ``operation`` return a failed Result."""
        self._failures[operation] = error

    def set_raise(self, operation: str, exc: Exception) -> None:
        """Make ``operation`` raise ``exc``."""
        self._raises[operation] = exc

    def set_value(self, operation: str, value: Any) -> None:
        self._values[operation] = value

    def set_output(self, operation: str, stdout: list[str] | None = None,
                   stderr: list[str] | None = None) -> None:
        """Lines ``operation`` prints through the engine sinks."""
        self._stdout[operation] = list(stdout or [])
        self._stderr[operation] = list(stderr or [])

    def reset(self) -> None:
        self._failures.clear()
        self._raises.clear()
        self._values.clear()
        self._stdout.clear()
        self._stderr.clear()
        self._call_log.clear()

    # ── Operations ──────────────────────────────────────────────

    def _call(self, operation: str, *args: Any, **kwargs: Any) -> Result:
        self._call_log.append(
            EngineCall(
                operation=operation,
                args=args,
                kwargs=kwargs,
                config=engine_cfg.cfg.model_copy(deep=True),
            )
        )
        for line in self._stdout.get(operation, []):
            output.printout(line)
        for line in self._stderr.get(operation, []):
            output.printerr(line)

        if operation in self._raises:
            raise self._raises[operation]
        if operation in self._failures:
            return Result.failure(operation, self._failures[operation])
        return Result.success(operation, value=self._values.get(operation))

    def list(self, pattern: str | None, version: str | None, *flags: str) -> Result:
        return self._call("list", pattern, version, *flags)

    def search(self, query: str, version: str | None = None) -> Result:
        return self._call("search", query, version)

    def install(self, name: str, version: str | None = None) -> Result:
        return self._call("install", name, version)

    def remove(self, name: str, version: str | None, *flags: str) -> Result:
        return self._call("remove", name, version, *flags)

    def build(self, name: str, version: str | None, *flags: str) -> Result:
        return self._call("build", name, version, *flags)

    def purge(self, *flags: str) -> Result:
        return self._call("purge", *flags)

    def fulfill_dependencies(self, rock: RockDescriptor, deps_mode: str) -> Result:
        return self._call("deps", rock, deps_mode=deps_mode)
