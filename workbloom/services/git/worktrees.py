"""Worktree inventory and removal service for workbloom."""

import git
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Tuple

from workbloom.constants import BRANCH_MARKER, DETACHED_MARKER, HEADS_PREFIX, WORKTREE_MARKER
from workbloom.exceptions import RepositoryQueryError
from workbloom.models.worktree import WorktreeRecord
from workbloom.services.git.errors import format_git_error
from workbloom.utils.logging import get_logger

logger = get_logger(__name__)


def parse_worktree_list(output: str) -> List[WorktreeRecord]:
    """Parse ``git worktree list --porcelain`` output into records.

    Format:
        worktree /path/to/worktree
        HEAD commit_sha
        branch refs/heads/branch-name      (or "detached")
        (blank line between worktrees)

    A ``worktree`` line starts a new record and finalizes the previous one.
    Lines that are not a known marker are ignored, and nothing is emitted
    before the first ``worktree`` line.
    """
    records = []
    path: Optional[str] = None
    branch: Optional[str] = None
    detached = False

    for line in output.splitlines():
        line = line.rstrip("\r")

        if line.startswith(WORKTREE_MARKER):
            if path:
                records.append(WorktreeRecord(Path(path), branch, detached))
            path = line[len(WORKTREE_MARKER):].strip() or None
            branch = None
            detached = False
        elif path is None:
            continue
        elif line.startswith(BRANCH_MARKER):
            ref = line[len(BRANCH_MARKER):].strip()
            if ref.startswith(HEADS_PREFIX) and len(ref) > len(HEADS_PREFIX):
                branch = ref[len(HEADS_PREFIX):]
        elif line.strip() == DETACHED_MARKER:
            detached = True

    if path:
        records.append(WorktreeRecord(Path(path), branch, detached))

    return records


class WorktreeService:
    """Service for listing and removing git worktrees."""

    def __init__(self, repo_path: str):
        """Initialize the worktree service.

        Args:
            repo_path: Path to the git repository
        """
        self.repo_path = repo_path

    def _get_repo(self):
        """Get a git.Repo instance for the repository."""
        return git.Repo(self.repo_path)

    def list_worktrees(self) -> List[WorktreeRecord]:
        """Get all working trees attached to the repository.

        The first record is always the primary working tree.

        Raises:
            RepositoryQueryError: If the worktree list cannot be read
        """
        try:
            output = self._get_repo().git.worktree("list", "--porcelain")
        except git.exc.GitError as e:
            raise RepositoryQueryError(
                "list_worktrees", message=format_git_error(e, "git worktree list")
            ) from e

        records = parse_worktree_list(output)
        logger.debug(f"Found {len(records)} worktrees")
        for record in records:
            logger.debug(f"  {record}")
        return records

    def primary_root(self, records: Optional[List[WorktreeRecord]] = None) -> Path:
        """Get the path of the repository's primary working tree."""
        if records is None:
            records = self.list_worktrees()
        if not records:
            raise RepositoryQueryError("list_worktrees", message="no worktrees reported")
        return records[0].path

    def remove_worktree(self, path: str, force: bool = False) -> Tuple[bool, Optional[str]]:
        """Remove a worktree at the specified path.

        Args:
            path: Path to the worktree directory
            force: Force removal even if working tree is dirty or locked

        Returns:
            Tuple of (success, error_message). error_message is None on success.
        """
        try:
            args = ["remove", str(path)]
            if force:
                args.append("--force")

            self._get_repo().git.worktree(*args)
            logger.info(f"Removed worktree at {path}")
            return True, None
        except git.exc.GitError as e:
            error_msg = format_git_error(e, "git worktree remove")
            logger.error(f"Failed to remove worktree at {path}: {error_msg}")
            return False, error_msg

    @staticmethod
    def creation_time(path: Path) -> Optional[datetime]:
        """Get the creation time of a worktree directory.

        Uses the birth time where the platform reports one, otherwise the
        inode change time, which can only make a directory look younger.
        Returns None if the directory cannot be inspected.
        """
        try:
            stat = os.stat(path)
        except OSError as e:
            logger.debug(f"Could not stat worktree {path}: {e}")
            return None

        timestamp = getattr(stat, "st_birthtime", None) or stat.st_ctime
        return datetime.fromtimestamp(timestamp, tz=timezone.utc)
