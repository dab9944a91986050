"""Rock engine — process-wide configuration, output sinks and the active engine.

The active engine is a process singleton, like ``cfg``.  It defaults to
LuaRocksEngine; tests swap in a MockEngine with ``set_engine()``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from rocktree.adapters.base import Engine

_engine: Optional["Engine"] = None


def get_engine() -> "Engine":
    """Return the active engine, creating the LuaRocks one on first use."""
    global _engine
    if _engine is None:
        from rocktree.adapters.engine.luarocks import LuaRocksEngine

        _engine = LuaRocksEngine()
    return _engine


def set_engine(engine: Optional["Engine"]) -> None:
    """Replace the active engine.  ``None`` goes back to the default."""
    global _engine
    _engine = engine
