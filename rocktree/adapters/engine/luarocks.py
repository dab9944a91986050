"""
LuaRocks engine — drives the ``luarocks`` command line.

Every call materialises the process-wide ``cfg`` into a throwaway Lua
config file (pointed to by ``LUAROCKS_CONFIG``) and runs one luarocks
command against ``cfg.root_dir``.  Whatever luarocks prints is fed,
line by line, through the engine's ``printout``/``printerr`` sinks.

There is no timeout: a hung download hangs the call.
"""

from __future__ import annotations

import logging
import os
import re
import shutil
import subprocess
import tempfile
import time
from pathlib import Path

from rocktree.adapters.base import Engine, RockDescriptor
from rocktree.adapters.engine import cfg as engine_cfg
from rocktree.adapters.engine import output
from rocktree.adapters.engine.cfg import EngineConfig
from rocktree.core.models.result import Result, RockInfo

logger = logging.getLogger(__name__)

_ROCKSPEC_NAME_RE = re.compile(r"[^a-z0-9_-]+")
_ANONYMOUS_VERSION = "0.0-0"


def _lua_string(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
    return f'"{escaped}"'


def render_config(config: EngineConfig) -> str:
    """Render ``config`` as a LuaRocks config file."""
    lines = ["rocks_trees = {"]
    for index, tree in enumerate(config.rocks_trees):
        lines.append(f'   {{ name = "tree{index}", root = {_lua_string(tree)} }},')
    lines.append("}")

    lines.append("rocks_servers = {")
    lines.extend(f"   {_lua_string(server)}," for server in config.rocks_servers)
    lines.append("}")

    lines.append("rocks_provided = {")
    for name, version in sorted(config.rocks_provided.items()):
        lines.append(f"   [{_lua_string(name)}] = {_lua_string(version)},")
    lines.append("}")

    lines.append(f"deploy_bin_dir = {_lua_string(config.deploy_bin_dir)}")
    lines.append(f"deploy_lua_dir = {_lua_string(config.deploy_lua_dir)}")
    lines.append(f"deploy_lib_dir = {_lua_string(config.deploy_lib_dir)}")
    return "\n".join(lines) + "\n"


def render_rockspec(rock: RockDescriptor) -> tuple[str, str]:
    """Render an anonymous rockspec for ``rock``.  Returns (filename, text).

    LuaRocks insists on a well-formed version, so an empty one is
    written as ``0.0-0``.
    """
    package = _ROCKSPEC_NAME_RE.sub("-", rock.name.lower()).strip("-") or "project"
    version = rock.version or _ANONYMOUS_VERSION

    lines = [
        'rockspec_format = "3.0"',
        f"package = {_lua_string(package)}",
        f"version = {_lua_string(version)}",
        'source = { url = "." }',
        "dependencies = {",
    ]
    lines.extend(f"   {_lua_string(str(dep))}," for dep in rock.dependencies)
    lines.append("}")
    lines.append('build = { type = "builtin", modules = {} }')
    return f"{package}-{version}.rockspec", "\n".join(lines) + "\n"


def parse_porcelain(text: str) -> list[RockInfo]:
    """Parse ``--porcelain`` output: ``name<TAB>version<TAB>status<TAB>repo``."""
    rocks = []
    for line in text.splitlines():
        fields = line.split("\t")
        if len(fields) < 2 or not fields[0]:
            continue
        rocks.append(
            RockInfo(
                name=fields[0],
                version=fields[1],
                status=fields[2] if len(fields) > 2 else "",
                repo=fields[3] if len(fields) > 3 else "",
            )
        )
    return rocks


def _error_message(operation: str, proc: subprocess.CompletedProcess[str]) -> str:
    lines = [line.strip() for line in proc.stderr.splitlines() if line.strip()]
    for line in reversed(lines):
        if line.startswith("Error:"):
            return line[len("Error:"):].strip()
    if lines:
        return lines[-1]
    return f"luarocks {operation} exited with code {proc.returncode}"


class LuaRocksEngine(Engine):
    """Run rock operations through the ``luarocks`` executable."""

    def __init__(self, executable: str = "luarocks"):
        self._executable = executable

    @property
    def name(self) -> str:
        return "luarocks"

    def is_available(self) -> bool:
        return shutil.which(self._executable) is not None

    # ── Operations ──────────────────────────────────────────────

    def list(self, pattern: str | None, version: str | None, *flags: str) -> Result:
        args = ["list", *flags]
        args += [a for a in (pattern, version) if a]
        result = self._run("list", args)
        if result.ok and "--porcelain" in flags:
            return result.model_copy(update={"value": parse_porcelain(result.output)})
        return result

    def search(self, query: str, version: str | None = None) -> Result:
        cfg = engine_cfg.cfg
        key = (tuple(cfg.rocks_servers), query, version)
        cached = engine_cfg.manifest_cache.get(key)
        if cached is not None:
            logger.debug("search cache hit: %s %s", query, version or "")
            return Result.success("search", value=list(cached))

        args = ["search", "--porcelain", query]
        if version:
            args.append(version)
        result = self._run("search", args)
        if not result.ok:
            return result

        rocks = parse_porcelain(result.output)
        engine_cfg.manifest_cache[key] = rocks
        return result.model_copy(update={"value": list(rocks)})

    def install(self, name: str, version: str | None = None) -> Result:
        args = ["install", name]
        if version:
            args.append(version)
        return self._run("install", args)

    def remove(self, name: str, version: str | None, *flags: str) -> Result:
        args = ["remove", *flags, name]
        if version:
            args.append(version)
        return self._run("remove", args)

    def build(self, name: str, version: str | None, *flags: str) -> Result:
        args = ["build", *flags, name]
        if version:
            args.append(version)
        return self._run("build", args)

    def purge(self, *flags: str) -> Result:
        tree = None
        args = ["purge"]
        for flag in flags:
            if flag.startswith("--tree="):
                tree = flag[len("--tree="):]
            else:
                args.append(flag)
        if tree is None:
            return Result.failure("purge", "purge requires a --tree=<path> flag")
        if not Path(tree).is_dir():
            return Result.success("purge")
        return self._run("purge", args, tree=tree)

    def fulfill_dependencies(self, rock: RockDescriptor, deps_mode: str) -> Result:
        if not rock.dependencies:
            return Result.success("deps")

        filename, text = render_rockspec(rock)
        with tempfile.TemporaryDirectory(prefix="rocktree-deps-") as tmp:
            rockspec = Path(tmp) / filename
            rockspec.write_text(text, encoding="utf-8")
            return self._run(
                "deps",
                ["install", "--only-deps", f"--deps-mode={deps_mode}", str(rockspec)],
            )

    # ── Plumbing ────────────────────────────────────────────────

    def _run(self, operation: str, args: list[str], tree: str | None = None) -> Result:
        executable = shutil.which(self._executable)
        if executable is None:
            return Result.failure(operation, f"{self._executable} not found on PATH")

        cfg = engine_cfg.cfg
        command = [
            executable,
            f"--tree={tree or cfg.root_dir}",
            f"--lua-version={cfg.lua_version}",
            *args,
        ]

        with tempfile.TemporaryDirectory(prefix="rocktree-") as tmp:
            config_file = Path(tmp) / "config.lua"
            config_file.write_text(render_config(cfg), encoding="utf-8")
            env = {**os.environ, "LUAROCKS_CONFIG": str(config_file)}

            logger.debug("Executing: %s", " ".join(command))
            start = time.monotonic()
            try:
                proc = subprocess.run(command, capture_output=True, text=True, env=env)
            except OSError as e:
                return Result.failure(operation, f"luarocks execution error: {e}")
            elapsed_ms = int((time.monotonic() - start) * 1000)

        for line in proc.stdout.splitlines():
            output.printout(line)
        for line in proc.stderr.splitlines():
            output.printerr(line)

        metadata = {"command": command, "return_code": proc.returncode}
        if proc.returncode != 0:
            return Result.failure(
                operation,
                _error_message(operation, proc),
                output=proc.stdout.strip(),
                duration_ms=elapsed_ms,
                metadata=metadata,
            )
        return Result.success(
            operation,
            output=proc.stdout.strip(),
            duration_ms=elapsed_ms,
            metadata=metadata,
        )
