"""
Engine version ordering and dependency strings.

Versions follow the LuaRocks rules:

    - dotted numeric segments, compared left to right, missing segments = 0
    - letter words inside a version are weighted: alpha < beta < pre < rc
      sort *before* the release they qualify, cvs < scm < dev sort after
      every numbered release, any other word weighs its first byte / 1000
      (so 1.0b > 1.0)
    - an optional ``-N`` suffix is the rockspec revision, compared last

Dependency strings look like ``"name"``, ``"name 1.0"`` or
``"name >= 1.0, < 2.0"``.
"""

from __future__ import annotations

import functools
import re
from dataclasses import dataclass, field

_WORD_WEIGHTS = {
    "alpha": -1_000_000,
    "beta": -100_000,
    "pre": -10_000,
    "rc": -1_000,
    "cvs": 100_000_000,
    "scm": 110_000_000,
    "dev": 120_000_000,
}

_REVISION_RE = re.compile(r"^(.*)-(\d+)$")
_VERSION_BODY_RE = re.compile(r"^[a-z0-9._]+$")
_TOKEN_RE = re.compile(r"\d+|[a-z]+")

_NAME_RE = re.compile(r"^\s*([a-zA-Z0-9][a-zA-Z0-9._-]*)\s*(.*?)\s*$")
_CONSTRAINT_RE = re.compile(r"^\s*(==|~=|>=|<=|~>|>|<|=)?\s*(\S+)\s*$")


class VersionError(ValueError):
    """Raised when a version string cannot be parsed."""


@functools.total_ordering
@dataclass(frozen=True, eq=False)
class Version:
    """A parsed, comparable version."""

    text: str
    segments: tuple[float, ...]
    revision: int = 0

    def _padded(self, width: int) -> tuple[float, ...]:
        return self.segments + (0,) * (width - len(self.segments))

    def _key(self, other: Version) -> tuple[tuple[float, ...], tuple[float, ...]]:
        width = max(len(self.segments), len(other.segments))
        return (self._padded(width) + (self.revision,), other._padded(width) + (other.revision,))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        mine, theirs = self._key(other)
        return mine == theirs

    def __lt__(self, other: Version) -> bool:
        mine, theirs = self._key(other)
        return mine < theirs

    def __hash__(self) -> int:
        segments = list(self.segments)
        while segments and segments[-1] == 0:
            segments.pop()
        return hash((tuple(segments), self.revision))

    def __str__(self) -> str:
        return self.text


def parse_version(text: str) -> Version:
    """Parse a version string.

    Raises:
        VersionError: empty input or stray characters.
    """
    raw = text.strip().lower() if isinstance(text, str) else ""
    if not raw:
        raise VersionError(f"Invalid version: {text!r}")

    revision = 0
    body = raw
    m = _REVISION_RE.match(raw)
    if m:
        body, revision = m.group(1), int(m.group(2))

    if not body or not _VERSION_BODY_RE.match(body):
        raise VersionError(f"Invalid version: {text!r}")

    segments: list[float] = []
    for token in _TOKEN_RE.findall(body):
        if token.isdigit():
            segments.append(int(token))
        else:
            segments.append(_WORD_WEIGHTS.get(token, ord(token[0]) / 1000))

    if not segments:
        raise VersionError(f"Invalid version: {text!r}")

    return Version(text=text.strip(), segments=tuple(segments), revision=revision)


def compare_versions(a: str, b: str) -> bool:
    """True if version ``a`` is strictly newer than version ``b``."""
    return parse_version(a) > parse_version(b)


@dataclass(frozen=True)
class Constraint:
    """One ``<op> <version>`` clause of a dependency."""

    op: str
    version: Version

    def __str__(self) -> str:
        return f"{self.op} {self.version.text}"


@dataclass(frozen=True)
class Dependency:
    """A rock name plus zero or more version constraints."""

    name: str
    constraints: tuple[Constraint, ...] = field(default_factory=tuple)

    def __str__(self) -> str:
        if not self.constraints:
            return self.name
        return f"{self.name} " + ", ".join(str(c) for c in self.constraints)


def parse_constraints(text: str) -> tuple[Constraint, ...] | None:
    """Parse ``">= 1.0, < 2.0"``.  Returns None when malformed."""
    if not text.strip():
        return ()

    constraints: list[Constraint] = []
    for clause in text.split(","):
        m = _CONSTRAINT_RE.match(clause)
        if not m:
            return None
        op = m.group(1) or "=="
        if op == "=":
            op = "=="
        try:
            version = parse_version(m.group(2))
        except VersionError:
            return None
        constraints.append(Constraint(op=op, version=version))
    return tuple(constraints)


def parse_dep(text: str) -> Dependency | None:
    """Parse a dependency string.  Returns None when malformed."""
    if not isinstance(text, str):
        return None
    m = _NAME_RE.match(text)
    if not m:
        return None
    constraints = parse_constraints(m.group(2) or "")
    if constraints is None:
        return None
    return Dependency(name=m.group(1).lower(), constraints=constraints)
