"""Git-related services for workbloom."""

from .operations import GitOperations
from .repository import RepositoryQueries
from .worktrees import WorktreeService

__all__ = [
    "GitOperations",
    "RepositoryQueries",
    "WorktreeService",
]
