"""
Tests for engine version ordering and dependency string parsing.
"""

import pytest

from rocktree.adapters.engine.versions import (
    VersionError,
    compare_versions,
    parse_dep,
    parse_version,
)


class TestParseVersion:
    def test_numeric_segments(self):
        v = parse_version("1.2.3")
        assert v.segments == (1, 2, 3)
        assert v.revision == 0

    def test_revision_split(self):
        v = parse_version("3.1.1-0")
        assert v.segments == (3, 1, 1)
        assert v.revision == 0
        assert parse_version("1.0-2").revision == 2

    def test_missing_segments_are_zero(self):
        assert parse_version("1.0") == parse_version("1.0.0")
        assert hash(parse_version("1.0")) == hash(parse_version("1.0.0"))

    def test_empty_raises(self):
        with pytest.raises(VersionError):
            parse_version("")

    def test_unknown_word_weighs_first_byte(self):
        v = parse_version("1.0b")
        assert v.segments == (1, 0, ord("b") / 1000)

    def test_stray_characters_raise(self):
        with pytest.raises(VersionError):
            parse_version("1.0!")


class TestOrdering:
    def test_newer_minor(self):
        assert compare_versions("1.3.0", "1.2.0") is True

    def test_older_major(self):
        assert compare_versions("1.9.9", "2.0.0") is False

    def test_equal_is_not_newer(self):
        assert compare_versions("1.0.0", "1.0.0") is False

    def test_numeric_not_lexical(self):
        assert compare_versions("1.10", "1.9") is True

    def test_prerelease_before_release(self):
        assert parse_version("1.0rc1") < parse_version("1.0")
        assert parse_version("1.0beta2") < parse_version("1.0rc1")
        assert parse_version("1.0alpha") < parse_version("1.0beta")
        assert parse_version("1.0pre1") < parse_version("1.0rc1")

    def test_scm_newest(self):
        assert parse_version("scm-1") > parse_version("99.0-1")
        assert parse_version("dev-1") > parse_version("scm-1")

    def test_revision_breaks_ties(self):
        assert parse_version("1.0-2") > parse_version("1.0-1")
        assert parse_version("1.1-1") > parse_version("1.0-9")

    def test_unknown_word_sorts_after_release(self):
        assert compare_versions("1.0b", "1.0") is True
        assert compare_versions("0.3.1b-1", "0.3.1-1") is True
        assert compare_versions("0.3.1b-1", "0.3.2-1") is False


class TestParseDep:
    def test_name_only(self):
        dep = parse_dep("inspect")
        assert dep is not None
        assert dep.name == "inspect"
        assert dep.constraints == ()

    def test_single_constraint(self):
        dep = parse_dep("foo >= 1.2")
        assert dep is not None
        assert dep.name == "foo"
        assert [(c.op, c.version.text) for c in dep.constraints] == [(">=", "1.2")]

    def test_multiple_constraints(self):
        dep = parse_dep("foo >= 1.0, < 2.0")
        assert dep is not None
        assert [c.op for c in dep.constraints] == [">=", "<"]
        assert str(dep) == "foo >= 1.0, < 2.0"

    def test_bare_version_means_equal(self):
        dep = parse_dep("foo 1.0")
        assert dep is not None
        assert dep.constraints[0].op == "=="

    def test_no_space_before_operator(self):
        dep = parse_dep("foo>=1.0")
        assert dep is not None
        assert dep.name == "foo"

    def test_invalid_returns_none(self):
        assert parse_dep("!!invalid!!") is None
        assert parse_dep("foo >= ") is None
        assert parse_dep("foo >= 1.0!") is None
        assert parse_dep("") is None

