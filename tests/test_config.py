"""
Tests for configuration loading — rocktree.yml parsing and runtime version resolution.
"""

import textwrap
from pathlib import Path

import pytest

from rocktree.core.config.loader import (
    ConfigError,
    find_project_root,
    load_project_config,
)
from rocktree.core.services.versions import (
    DEFAULT_RUNTIME_VERSION,
    LEGACY_REPOSITORY,
    resolve,
)


@pytest.fixture
def valid_config(tmp_path: Path) -> Path:
    content = textwrap.dedent("""\
        name: space-game
        runtime_version: "11.4"
        repositories:
          - https://rocks.example.org
        dependencies:
          - inspect >= 3.0
          - middleclass
    """)
    path = tmp_path / "rocktree.yml"
    path.write_text(content)
    return path


class TestLoadProjectConfig:
    """Tests for load_project_config()."""

    def test_load_valid_config(self, valid_config: Path):
        config = load_project_config(valid_config)
        assert config.name == "space-game"
        assert config.runtime_version == "11.4"
        assert config.repositories == ["https://rocks.example.org"]
        assert config.dependencies == ["inspect >= 3.0", "middleclass"]

    def test_missing_file_gives_defaults(self, tmp_path: Path):
        config = load_project_config(tmp_path / "rocktree.yml")
        assert config.runtime_version is None
        assert config.repositories == []

    def test_empty_file_gives_defaults(self, tmp_path: Path):
        path = tmp_path / "rocktree.yml"
        path.write_text("")
        assert load_project_config(path).name == ""

    def test_float_version_is_stringified(self, tmp_path: Path):
        path = tmp_path / "rocktree.yml"
        path.write_text("runtime_version: 11.4\n")
        assert load_project_config(path).runtime_version == "11.4"

    def test_invalid_yaml_raises(self, tmp_path: Path):
        path = tmp_path / "rocktree.yml"
        path.write_text(":: invalid: yaml: [")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_project_config(path)

    def test_non_mapping_raises(self, tmp_path: Path):
        path = tmp_path / "rocktree.yml"
        path.write_text("- just\n- a\n- list\n")
        with pytest.raises(ConfigError, match="Expected a YAML mapping"):
            load_project_config(path)

    def test_unknown_key_raises(self, tmp_path: Path):
        path = tmp_path / "rocktree.yml"
        path.write_text("runtime_verison: '11.4'\n")
        with pytest.raises(ConfigError, match="runtime_verison"):
            load_project_config(path)


class TestResolve:
    """Tests for runtime version resolution."""

    def test_declared_version(self, valid_config: Path):
        info = resolve(valid_config)
        assert info.runtime_version == "11.4"
        assert info.lua_version == "5.1"
        assert info.provided == {"love": "11.4-1"}
        assert info.repositories == []

    def test_absent_file_uses_default(self, tmp_path: Path):
        info = resolve(tmp_path / "rocktree.yml")
        assert info.runtime_version == DEFAULT_RUNTIME_VERSION

    def test_legacy_version_adds_repository(self, tmp_path: Path):
        path = tmp_path / "rocktree.yml"
        path.write_text("runtime_version: '0.9.2'\n")
        info = resolve(path)
        assert info.repositories == [LEGACY_REPOSITORY]
        assert info.provided["love"] == "0.9.2-1"

    def test_unknown_version_names_value(self, tmp_path: Path):
        path = tmp_path / "rocktree.yml"
        path.write_text("runtime_version: '12.7'\n")
        with pytest.raises(ConfigError, match="'12.7'"):
            resolve(path)

    def test_malformed_version(self, tmp_path: Path):
        path = tmp_path / "rocktree.yml"
        path.write_text("runtime_version: eleven\n")
        with pytest.raises(ConfigError, match="'eleven'"):
            resolve(path)

    def test_deterministic(self, valid_config: Path):
        assert resolve(valid_config) == resolve(valid_config)


class TestFindProjectRoot:
    """Tests for find_project_root()."""

    def test_find_in_current_dir(self, tmp_path: Path):
        (tmp_path / "rocktree.yml").write_text("name: test\n")
        assert find_project_root(tmp_path) == tmp_path.resolve()

    def test_find_in_parent_dir(self, tmp_path: Path):
        (tmp_path / "rocktree.yml").write_text("name: test\n")
        subdir = tmp_path / "src" / "levels"
        subdir.mkdir(parents=True)
        assert find_project_root(subdir) == tmp_path.resolve()

    def test_not_found_returns_none(self, tmp_path: Path):
        subdir = tmp_path / "deep" / "nested"
        subdir.mkdir(parents=True)
        assert find_project_root(subdir) is None
