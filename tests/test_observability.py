"""
Tests for logging setup — levels, engine formatting, file output.
"""

import logging
from pathlib import Path

from rocktree.core.observability.logging_config import (
    ENGINE_LOGGER,
    _EngineAwareFormatter,
    _parse_level,
    setup_logging,
)


def _record(name: str, msg: str, level: int = logging.INFO) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, msg, None, None)


class TestParseLevel:
    def test_names(self):
        assert _parse_level("debug") == logging.DEBUG
        assert _parse_level("ERROR") == logging.ERROR

    def test_fallback(self):
        assert _parse_level(None) == logging.WARNING
        assert _parse_level("chatty") == logging.WARNING


class TestFormatter:
    def test_engine_records_prefixed(self):
        fmt = _EngineAwareFormatter("%(name)s %(message)s")
        assert fmt.format(_record(ENGINE_LOGGER, "Installing inspect")) == (
            "luarocks: Installing inspect"
        )

    def test_other_records_use_format(self):
        fmt = _EngineAwareFormatter("%(name)s %(message)s")
        assert fmt.format(_record("rocktree.core", "hello")) == "rocktree.core hello"


class TestSetupLogging:
    def test_console_level(self):
        setup_logging("INFO")
        root = logging.getLogger()
        assert root.level == logging.INFO
        assert len(root.handlers) == 1

    def test_file_handler(self, tmp_path: Path):
        log_file = tmp_path / "rocktree.log"
        setup_logging("WARNING", log_file=str(log_file), log_file_level="DEBUG")

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        logging.getLogger("rocktree.test").debug("file only")
        for handler in root.handlers:
            handler.flush()

        assert "file only" in log_file.read_text()
