"""
CLI commands for rock management.

Thin wrappers over ``rocktree.core.use_cases.rocks``.
"""

from __future__ import annotations

import json
import sys

import click

from rocktree.core.models.flags import OperationFlags
from rocktree.core.models.result import Result, RockInfo


def _emit(result: Result, as_json: bool, success: str | None = None) -> None:
    """Print a result and exit non-zero on failure."""
    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2, default=str))
        sys.exit(0 if result.ok else 1)

    if result.failed:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    if result.output:
        click.echo(result.output)
    if success:
        click.secho(f"✅ {success}", fg="green")


def _repo_options(func):
    func = click.option(
        "--only-from", "only_from", default=None, metavar="URL",
        help="Search only this repository.",
    )(func)
    func = click.option(
        "--from", "from_", default=None, metavar="URL",
        help="Search this repository before the others.",
    )(func)
    return func


_json_option = click.option(
    "--json-output", "--json", "as_json", is_flag=True, help="Output as JSON."
)


# ── Observe ─────────────────────────────────────────────────────


@click.command("list")
@click.argument("pattern", required=False)
@click.argument("version", required=False)
@click.option("--outdated", is_flag=True, help="Only rocks with a newer version available.")
@click.option("--porcelain", is_flag=True, help="Machine-readable output.")
@_json_option
def list_cmd(
    pattern: str | None,
    version: str | None,
    outdated: bool,
    porcelain: bool,
    as_json: bool,
) -> None:
    """List rocks installed in the project tree."""
    from rocktree.core.use_cases.rocks import list_rocks

    flags = OperationFlags(outdated=outdated, porcelain=porcelain or as_json)
    _emit(list_rocks(pattern, version, flags), as_json)


@click.command("search")
@click.argument("query")
@click.argument("version", required=False)
@_repo_options
@_json_option
def search_cmd(
    query: str,
    version: str | None,
    from_: str | None,
    only_from: str | None,
    as_json: bool,
) -> None:
    """Search the project's repositories for rocks."""
    from rocktree.core.use_cases.rocks import search_rocks

    result = search_rocks(query, version, OperationFlags(from_=from_, only_from=only_from))
    if as_json or result.failed:
        _emit(result, as_json)
        return

    rocks: list[RockInfo] = result.value or []
    if not rocks:
        click.secho(f"⚠️  No rocks matching '{query}'", fg="yellow")
        return

    click.secho(f"🔍 {len(rocks)} result(s) for '{query}':", fg="cyan", bold=True)
    for rock in rocks:
        click.echo(f"   {rock.name:<30} {rock.version:<14} {rock.repo}")


@click.command("show")
@click.argument("name")
@click.argument("version", required=False)
@click.option("--field", default=None, help="Print a single field (name, version, status, repo).")
@_json_option
def show_cmd(name: str, version: str | None, field: str | None, as_json: bool) -> None:
    """Show an installed rock."""
    from rocktree.core.use_cases.rocks import show_rock

    result = show_rock(name, version, field)
    if as_json or result.failed:
        _emit(result, as_json)
        return

    if field:
        click.echo(result.value)
        return
    rock: RockInfo = result.value
    click.secho(f"📦 {rock.name} {rock.version}", fg="cyan", bold=True)
    if rock.status:
        click.echo(f"   Status: {rock.status}")
    if rock.repo:
        click.echo(f"   Tree:   {rock.repo}")


# ── Act ─────────────────────────────────────────────────────────


@click.command("install")
@click.argument("name")
@click.argument("version", required=False)
@_repo_options
@_json_option
def install_cmd(
    name: str,
    version: str | None,
    from_: str | None,
    only_from: str | None,
    as_json: bool,
) -> None:
    """Install a rock into the project tree."""
    from rocktree.core.use_cases.rocks import install_rock

    result = install_rock(name, version, OperationFlags(from_=from_, only_from=only_from))
    _emit(result, as_json, f"Installed {name} {version or ''}".strip())


@click.command("remove")
@click.argument("name")
@click.argument("version", required=False)
@click.option("--force", is_flag=True, help="Remove even if other rocks depend on it.")
@_json_option
def remove_cmd(name: str, version: str | None, force: bool, as_json: bool) -> None:
    """Remove a rock (all versions unless VERSION is given)."""
    from rocktree.core.use_cases.rocks import remove_rock

    result = remove_rock(name, version, OperationFlags(force=force))
    _emit(result, as_json, f"Removed {name} {version or ''}".strip())


@click.command("build")
@click.argument("name")
@click.argument("version", required=False)
@click.option("--only-deps", is_flag=True, help="Install dependencies only.")
@_repo_options
@_json_option
def build_cmd(
    name: str,
    version: str | None,
    only_deps: bool,
    from_: str | None,
    only_from: str | None,
    as_json: bool,
) -> None:
    """Build a rock from source into the project tree."""
    from rocktree.core.use_cases.rocks import build_rock

    flags = OperationFlags(only_deps=only_deps, from_=from_, only_from=only_from)
    _emit(build_rock(name, version, flags), as_json, f"Built {name} {version or ''}".strip())


@click.command("purge")
@click.option("--only-deps", is_flag=True, help="Passed to luarocks purge unchanged.")
@click.option("--force", is_flag=True, help="Purge even if rocks are in use.")
@_json_option
def purge_cmd(only_deps: bool, force: bool, as_json: bool) -> None:
    """Remove every rock from the project tree."""
    from rocktree.core.use_cases.rocks import purge_rocks

    result = purge_rocks(OperationFlags(only_deps=only_deps, force=force))
    _emit(result, as_json, "Project tree purged")


@click.command("deps")
@click.argument("specifiers", nargs=-1)
@click.option("--name", default=None, help="Project name (default: from rocktree.yml).")
@_repo_options
@_json_option
def deps_cmd(
    specifiers: tuple[str, ...],
    name: str | None,
    from_: str | None,
    only_from: str | None,
    as_json: bool,
) -> None:
    """Install dependencies (default: those listed in rocktree.yml)."""
    from rocktree.core.config.loader import ConfigError
    from rocktree.core.context import get_project_context
    from rocktree.core.use_cases.rocks import install_deps

    try:
        context = get_project_context()
    except ConfigError as e:
        _emit(Result.failure("deps", str(e), kind="config"), as_json)
        return

    wanted = list(specifiers) or context.config.dependencies
    if not wanted and not as_json:
        click.secho("✅ No dependencies to install", fg="green")
        return

    flags = OperationFlags(from_=from_, only_from=only_from)
    result = install_deps(name or context.name, wanted, flags)
    _emit(result, as_json, f"{len(wanted)} dependencies satisfied")


ROCK_COMMANDS = [
    list_cmd,
    search_cmd,
    show_cmd,
    install_cmd,
    remove_cmd,
    build_cmd,
    purge_cmd,
    deps_cmd,
]
