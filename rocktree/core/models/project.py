"""
Project models — what a game project declares and what we derive from it.

ProjectConfig is loaded from rocktree.yml.  VersionInfo is derived from
the declared runtime version.  ProjectContext bundles both with the
project's paths and is what every rock operation works against.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

PROJECT_TREE_DIR = "rocks"


class ProjectConfig(BaseModel):
    """Settings declared in rocktree.yml.  Every key is optional."""

    model_config = ConfigDict(extra="forbid")

    name: str = ""
    runtime_version: str | None = None
    repositories: list[str] = Field(default_factory=list)
    dependencies: list[str] = Field(default_factory=list)

    @field_validator("runtime_version", mode="before")
    @classmethod
    def _stringify_version(cls, value: object) -> object:
        # YAML reads ``11.4`` as a float
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class VersionInfo(BaseModel):
    """Engine defaults implied by a runtime version."""

    runtime_version: str
    lua_version: str = "5.1"
    provided: dict[str, str] = Field(default_factory=dict)
    repositories: list[str] = Field(default_factory=list)


class ProjectContext(BaseModel):
    """The project an operation runs against."""

    root: Path
    config: ProjectConfig = Field(default_factory=ProjectConfig)
    version_info: VersionInfo

    @property
    def tree(self) -> Path:
        """The project-local rock tree: always ``<root>/rocks``."""
        return self.root / PROJECT_TREE_DIR

    @property
    def name(self) -> str:
        return self.config.name or self.root.name

    @property
    def repositories(self) -> list[str]:
        """Project repositories first, then the version-implied ones."""
        seen: list[str] = []
        for repo in [*self.config.repositories, *self.version_info.repositories]:
            if repo not in seen:
                seen.append(repo)
        return seen
