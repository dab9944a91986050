"""
Result models — what every rock operation hands back.

A Result is either a success carrying a value or a failure carrying a
message, never both.  Engine adapters and the operation façade return
Results for every expected failure mode (missing rock, network error,
bad config); they do not raise.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field, model_validator

ErrorKind = Literal["config", "parse", "engine"]


class RockInfo(BaseModel):
    """One rock as reported by a list or search."""

    name: str
    version: str
    status: str = ""               # installed, outdated, src, rockspec, ...
    repo: str = ""                 # tree path or repository URL


class Result(BaseModel):
    """Outcome of one operation."""

    operation: str
    status: Literal["ok", "failed"] = "ok"

    value: Any = None
    error: str | None = None
    error_kind: ErrorKind | None = None

    output: str = ""                # captured engine stdout, if any
    duration_ms: int = 0

    metadata: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _value_xor_error(self) -> Result:
        if self.status == "ok" and self.error is not None:
            raise ValueError("a successful result cannot carry an error")
        if self.status == "failed" and self.value is not None:
            raise ValueError("a failed result cannot carry a value")
        return self

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    def as_tuple(self) -> tuple[Any, str | None]:
        """``(value, None)`` on success, ``(None, error)`` on failure."""
        if self.ok:
            return (True if self.value is None else self.value), None
        return None, self.error

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"operation": self.operation, "status": self.status}
        if self.ok:
            value = self.value
            if isinstance(value, list):
                value = [v.model_dump() if isinstance(v, BaseModel) else v for v in value]
            elif isinstance(value, BaseModel):
                value = value.model_dump()
            data["value"] = value
        else:
            data["error"] = self.error
            data["error_kind"] = self.error_kind
        if self.output:
            data["output"] = self.output
        data["duration_ms"] = self.duration_ms
        return data

    @classmethod
    def success(cls, operation: str, value: Any = None, **kwargs: Any) -> Result:
        """Create a success result."""
        return cls(operation=operation, status="ok", value=value, **kwargs)

    @classmethod
    def failure(
        cls,
        operation: str,
        error: str,
        kind: ErrorKind = "engine",
        **kwargs: Any,
    ) -> Result:
        """Create a failure result."""
        return cls(
            operation=operation,
            status="failed",
            error=error,
            error_kind=kind,
            **kwargs,
        )
