"""
Tests for engine output redirection.
"""

import logging

import pytest

from rocktree.adapters.engine import output as engine_output
from rocktree.core.services.output import redirected_output, unwrap, wrap


def _engine_records(caplog: pytest.LogCaptureFixture) -> list[tuple[int, str]]:
    return [(r.levelno, r.getMessage()) for r in caplog.records if r.name == "rocktree.engine"]


class TestWrap:
    def test_messages_logged_once_at_matching_level(self, caplog: pytest.LogCaptureFixture):
        caplog.set_level(logging.DEBUG)
        token = wrap()
        engine_output.printout("Installing", "inspect 3.1.3-0")
        engine_output.printerr("Warning: falling back to curl")
        unwrap(token)

        assert _engine_records(caplog) == [
            (logging.INFO, "Installing\tinspect 3.1.3-0"),
            (logging.WARNING, "Warning: falling back to curl"),
        ]

    def test_nothing_logged_after_unwrap(self, caplog: pytest.LogCaptureFixture, capsys):
        caplog.set_level(logging.DEBUG)
        token = wrap()
        unwrap(token)
        engine_output.printout("after")
        engine_output.printerr("after-err")

        assert _engine_records(caplog) == []
        captured = capsys.readouterr()
        assert "after" in captured.out
        assert "after-err" in captured.err

    def test_unwrap_restores_exact_sinks(self):
        def custom(*args):
            pass

        engine_output.printout = custom
        token = wrap()
        assert engine_output.printout is not custom
        unwrap(token)
        assert engine_output.printout is custom

    def test_custom_logger(self, caplog: pytest.LogCaptureFixture):
        caplog.set_level(logging.DEBUG)
        target = logging.getLogger("tests.custom")
        with redirected_output(target):
            engine_output.printout("hello")
        assert [(r.name, r.getMessage()) for r in caplog.records] == [("tests.custom", "hello")]


class TestRedirectedOutput:
    def test_restores_on_exception(self):
        before = (engine_output.printout, engine_output.printerr)
        with pytest.raises(RuntimeError):
            with redirected_output():
                raise RuntimeError("boom")
        assert (engine_output.printout, engine_output.printerr) == before
