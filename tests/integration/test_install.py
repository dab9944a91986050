"""
Live install/purge round trip against luarocks.org.

Covers:
    - installing a pure-Lua rock into a fresh project tree
    - the rock's module landing under <project>/rocks/share/lua/5.1
    - purge removing it again, twice in a row
    - engine config untouched afterwards
"""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

import pytest

from rocktree.adapters.engine import cfg as engine_cfg
from rocktree.core.use_cases.rocks import install_rock, list_rocks, purge_rocks
from rocktree.core.models.flags import OperationFlags

pytestmark = pytest.mark.integration

LUAROCKS_AVAILABLE = shutil.which("luarocks") is not None
LUA = shutil.which("luajit") or shutil.which("lua5.1") or shutil.which("lua")


def _loadable(module: Path) -> bool:
    """True if the module file exists (and compiles, when a Lua is around)."""
    if not module.is_file():
        return False
    if LUA is None:
        return True
    proc = subprocess.run(
        [LUA, "-e", f"assert(loadfile([[{module}]]))"],
        capture_output=True,
        text=True,
    )
    return proc.returncode == 0


@pytest.mark.skipif(not LUAROCKS_AVAILABLE, reason="luarocks not on PATH")
class TestInstallRoundTrip:
    def test_install_then_purge(self, project_dir: Path):
        before = engine_cfg.cfg.model_dump()
        module = project_dir / "rocks" / "share" / "lua" / "5.1" / "inspect.lua"

        result = install_rock("inspect")
        assert result.ok, result.error
        assert _loadable(module)

        listed = list_rocks("inspect", None, OperationFlags(porcelain=True))
        assert listed.ok
        assert [r.name for r in listed.value] == ["inspect"]

        assert purge_rocks().ok
        assert not _loadable(module)
        assert purge_rocks().ok

        assert engine_cfg.cfg.model_dump() == before
