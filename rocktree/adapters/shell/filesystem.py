"""
Filesystem helpers — path normalisation and directory checks.

Everything the orchestrator needs from the filesystem: it only ever
resolves the project directory and makes sure the tree root exists.
What goes inside the tree is the engine's business.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)


def get_home() -> str:
    return os.environ.get("HOME") or os.environ.get("USERPROFILE") or str(Path.home())


def clean_path(path: str | Path, base: Path | None = None) -> Path:
    """Expand ``~/`` and make ``path`` absolute.

    Relative paths are resolved against ``base`` (default: cwd).
    """
    if not isinstance(path, (str, Path)) or not str(path):
        raise TypeError(f"Expected a non-empty path, got {path!r}")

    text = str(path)
    if text == "~" or text.startswith("~/"):
        text = get_home() + text[1:]

    result = Path(text)
    if not result.is_absolute():
        result = (base or Path.cwd()) / result
    return result.resolve()


def ensure_dir(path: Path) -> Path:
    """Create ``path`` (and parents) if it doesn't exist."""
    if not path.is_dir():
        logger.debug("mkdir %s", path)
        path.mkdir(parents=True, exist_ok=True)
    return path
