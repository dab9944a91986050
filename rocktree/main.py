"""
rocktree — CLI entrypoint.

Usage:
    rocktree --help
    rocktree install inspect
    rocktree --game path/to/game deps
    python -m rocktree.main list --outdated
"""

from __future__ import annotations

import os
from pathlib import Path

import click

from rocktree import __version__
from rocktree.core.observability.logging_config import setup_logging
from rocktree.ui.cli.rocks import ROCK_COMMANDS


@click.group()
@click.version_option(version=__version__, prog_name="rocktree")
@click.option("--verbose", "-v", is_flag=True, help="Show engine output and progress.")
@click.option("--quiet", "-q", is_flag=True, help="Only show errors.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--game",
    "-g",
    "game",
    type=click.Path(file_okay=False),
    default=None,
    help="Manage the game in this directory (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    game: str | None,
) -> None:
    """rocktree — per-project rock trees for LÖVE games."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug

    # Register the project root in core context (used by every rock operation)
    from rocktree.core.config.loader import find_project_root
    from rocktree.core.context import set_project_root

    root = Path(game) if game else (find_project_root() or Path.cwd())
    set_project_root(root)
    ctx.obj["project_root"] = root

    # ── Logging setup (once, at process start) ──────────────────
    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "ERROR"
    else:
        level = os.environ.get("ROCKTREE_LOG_LEVEL", "WARNING")

    setup_logging(
        level=level,
        log_file=os.environ.get("ROCKTREE_LOG_FILE"),
        log_file_level=os.environ.get("ROCKTREE_LOG_FILE_LEVEL"),
    )


for _command in ROCK_COMMANDS:
    cli.add_command(_command)


if __name__ == "__main__":
    cli()
