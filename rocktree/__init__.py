"""rocktree — project-scoped rock trees for LÖVE games."""

__version__ = "0.1.0"
