"""
Engine configuration — the process-wide LuaRocks settings.

LuaRocks keeps its configuration in a single module-level table that
every command reads.  This module mirrors that: ``cfg`` is created
once at import time and shared by everything in the process.  The
engine adapters read it on every call; nobody else is supposed to
write to it except the overlay manager, which restores it afterwards.

Tree layout (relative to a tree root):

    bin/                         deploy_bin_dir
    lib/luarocks/rocks-<lua>/    rocks_dir
    share/lua/<lua>/             deploy_lua_dir
    lib/lua/<lua>/               deploy_lib_dir
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

DEFAULT_LUA_VERSION = "5.1"
DEFAULT_ROCKS_SERVERS = ["https://luarocks.org"]


def rocks_dir(tree: str, lua_version: str = DEFAULT_LUA_VERSION) -> str:
    return str(Path(tree) / "lib" / "luarocks" / f"rocks-{lua_version}")


def deploy_bin_dir(tree: str) -> str:
    return str(Path(tree) / "bin")


def deploy_lua_dir(tree: str, lua_version: str = DEFAULT_LUA_VERSION) -> str:
    return str(Path(tree) / "share" / "lua" / lua_version)


def deploy_lib_dir(tree: str, lua_version: str = DEFAULT_LUA_VERSION) -> str:
    return str(Path(tree) / "lib" / "lua" / lua_version)


class EngineConfig(BaseModel):
    """Mutable engine settings.  One instance per process (``cfg``)."""

    root_dir: str
    rocks_dir: str
    rocks_trees: list[str] = Field(default_factory=list)
    deploy_bin_dir: str
    deploy_lua_dir: str
    deploy_lib_dir: str
    rocks_servers: list[str] = Field(default_factory=lambda: list(DEFAULT_ROCKS_SERVERS))
    lua_version: str = DEFAULT_LUA_VERSION
    rocks_provided: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def for_tree(cls, tree: str, **kwargs: Any) -> EngineConfig:
        """Build a config whose paths all point into ``tree``."""
        lua_version = kwargs.pop("lua_version", DEFAULT_LUA_VERSION)
        return cls(
            root_dir=tree,
            rocks_dir=rocks_dir(tree, lua_version),
            rocks_trees=[tree],
            deploy_bin_dir=deploy_bin_dir(tree),
            deploy_lua_dir=deploy_lua_dir(tree, lua_version),
            deploy_lib_dir=deploy_lib_dir(tree, lua_version),
            lua_version=lua_version,
            **kwargs,
        )

    def use_tree(self, tree: str) -> None:
        """Point every path field at ``tree`` in place."""
        self.root_dir = tree
        self.rocks_dir = rocks_dir(tree, self.lua_version)
        self.rocks_trees = [tree]
        self.deploy_bin_dir = deploy_bin_dir(tree)
        self.deploy_lua_dir = deploy_lua_dir(tree, self.lua_version)
        self.deploy_lib_dir = deploy_lib_dir(tree, self.lua_version)

    def set_lua_version(self, lua_version: str) -> None:
        """Switch Lua version, moving the versioned paths of the current tree."""
        if lua_version == self.lua_version:
            return
        self.lua_version = lua_version
        self.rocks_dir = rocks_dir(self.root_dir, lua_version)
        self.deploy_lua_dir = deploy_lua_dir(self.root_dir, lua_version)
        self.deploy_lib_dir = deploy_lib_dir(self.root_dir, lua_version)


def default_config() -> EngineConfig:
    """The engine's own defaults: the per-user tree under ``~/.luarocks``."""
    home = os.environ.get("HOME") or os.environ.get("USERPROFILE") or "."
    return EngineConfig.for_tree(str(Path(home) / ".luarocks"))


cfg: EngineConfig = default_config()

# Remote search results, keyed by (servers, query).
manifest_cache: dict[tuple, Any] = {}


def clear_manifest_cache() -> None:
    manifest_cache.clear()


def reset_config() -> None:
    """Reset ``cfg`` to the engine defaults in place (used by tests)."""
    fresh = default_config()
    for name in EngineConfig.model_fields:
        setattr(cfg, name, getattr(fresh, name))
    clear_manifest_cache()
