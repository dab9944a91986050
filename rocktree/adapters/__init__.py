"""Adapters — bindings to the rock engine and the filesystem.

Public re-exports for convenient access.
"""

from rocktree.adapters.base import Engine, RockDescriptor
from rocktree.adapters.engine import get_engine, set_engine
from rocktree.adapters.mock import MockEngine

__all__ = [
    "Engine",
    "MockEngine",
    "RockDescriptor",
    "get_engine",
    "set_engine",
]
