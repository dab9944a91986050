"""
Domain models — Pydantic types for rocktree.

    from rocktree.core.models import OperationFlags, ProjectContext, Result
"""

from rocktree.core.models.flags import OperationFlags
from rocktree.core.models.project import ProjectConfig, ProjectContext, VersionInfo
from rocktree.core.models.result import Result, RockInfo

__all__ = [
    "OperationFlags",
    "ProjectConfig",
    "ProjectContext",
    "Result",
    "RockInfo",
    "VersionInfo",
]
