"""Worktree data models."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class WorktreeRecord:
    """One working tree attached to the repository."""

    path: Path
    branch: Optional[str] = None
    detached: bool = False

    @property
    def name(self) -> str:
        """Directory name of the worktree, used to derive its session name."""
        return self.path.name

    def is_at(self, other: Path) -> bool:
        """Check whether this worktree lives at ``other`` (symlinks resolved)."""
        return _resolve(self.path) == _resolve(other)

    def __str__(self) -> str:
        """String representation of worktree."""
        if self.detached:
            return f"(detached HEAD) @ {self.path}"
        return f"{self.branch or '(no branch)'} @ {self.path}"


def _resolve(path: Path) -> Path:
    try:
        return Path(path).resolve()
    except OSError:
        return Path(path)
