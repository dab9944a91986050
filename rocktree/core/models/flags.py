"""
Operation flags — per-call options for the rock operations.

Precedence between the repository options:

    from       prepend one repository, highest priority
    only_from  replace the repository list with one repository

``from`` is checked first; when both are set ``only_from`` is ignored.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class OperationFlags(BaseModel):
    """Options for one façade call.  Immutable once built."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    from_: str | None = Field(default=None, alias="from")
    only_from: str | None = None

    # True: operate on <project>/rocks.  False: leave the engine's own tree.
    use_local: bool = True

    only_deps: bool = False
    force: bool = False

    # list only
    outdated: bool = False
    porcelain: bool = False

    def list_args(self) -> list[str]:
        args = []
        if self.outdated:
            args.append("--outdated")
        if self.porcelain:
            args.append("--porcelain")
        return args

    def build_args(self) -> list[str]:
        return ["--only-deps"] if self.only_deps else []

    def remove_args(self) -> list[str]:
        return ["--force"] if self.force else []

    def purge_args(self) -> list[str]:
        args = []
        if self.only_deps:
            args.append("--only-deps")
        if self.force:
            args.append("--force")
        return args
