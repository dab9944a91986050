"""
Tests for dependency fulfilment.
"""

import pytest

from rocktree.adapters.mock import MockEngine
from rocktree.core.services.deps import (
    DEPS_MODE,
    ParseError,
    fulfill,
    parse_specifiers,
)
from rocktree.core.services.overlay import ContractViolation


class TestParseSpecifiers:
    def test_parses_all(self):
        deps = parse_specifiers(["foo >= 1.0", "bar"])
        assert [d.name for d in deps] == ["foo", "bar"]

    def test_fail_fast_names_offender(self):
        with pytest.raises(ParseError) as excinfo:
            parse_specifiers(["foo >= 1.0", "!!invalid!!", "also bad !!"])
        assert excinfo.value.specifier == "!!invalid!!"
        assert "!!invalid!!" in str(excinfo.value)


class TestFulfill:
    def test_parse_error_makes_no_engine_calls(self):
        engine = MockEngine()
        with pytest.raises(ParseError, match="!!invalid!!"):
            fulfill("my-game", ["foo >= 1.0", "!!invalid!!"], engine)
        assert engine.call_count == 0

    def test_anonymous_descriptor(self):
        engine = MockEngine()
        result = fulfill("my-game", ["foo >= 1.0", "bar"], engine)

        assert result.ok
        call = engine.last_call
        rock = call.args[0]
        assert rock.name == "my-game"
        assert rock.version == ""
        assert [str(d) for d in rock.dependencies] == ["foo >= 1.0", "bar"]
        assert call.kwargs["deps_mode"] == DEPS_MODE == "all"

    def test_engine_failure_passed_through(self):
        engine = MockEngine()
        engine.set_failure("deps", "No results matching query were found for bar")
        result = fulfill("my-game", ["bar"], engine)
        assert result.failed
        assert result.error_kind == "engine"
        assert result.error == "No results matching query were found for bar"

    def test_project_name_must_be_string(self):
        with pytest.raises(ContractViolation):
            fulfill(None, ["foo"], MockEngine())  # type: ignore[arg-type]
