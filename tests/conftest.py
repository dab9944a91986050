"""
Shared test fixtures and configuration.

Every test starts from clean process-wide state: default engine config,
default output sinks, no cached project context, no open overlay.
"""

import logging
from pathlib import Path

import pytest

from rocktree.adapters.engine import cfg as engine_cfg
from rocktree.adapters.engine import output as engine_output
from rocktree.adapters.engine import set_engine
from rocktree.adapters.mock import MockEngine
from rocktree.core import context
from rocktree.core.services import overlay


@pytest.fixture(autouse=True)
def clean_process_state(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """Reset every process-wide singleton around each test."""
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    engine_cfg.reset_config()
    engine_output.reset_sinks()
    context.reset_project_context()
    set_engine(None)
    overlay._active = None
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
    engine_cfg.reset_config()
    engine_output.reset_sinks()
    context.reset_project_context()
    set_engine(None)
    overlay._active = None


@pytest.fixture
def project_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """An empty game directory, registered as the project root and cwd."""
    game = (tmp_path / "my-game").resolve()
    game.mkdir()
    monkeypatch.chdir(game)
    context.set_project_root(game)
    return game


@pytest.fixture
def mock_engine() -> MockEngine:
    """A MockEngine installed as the active engine."""
    engine = MockEngine()
    set_engine(engine)
    return engine
