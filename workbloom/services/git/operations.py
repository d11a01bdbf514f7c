"""Branch operations service"""

import git
from typing import Optional, Tuple

from workbloom.exceptions import RepositoryQueryError
from workbloom.services.git.errors import format_git_error
from workbloom.utils.logging import get_logger

logger = get_logger(__name__)


class GitOperations:
    """Service for mutating local branch refs."""

    def __init__(self, repo_path: str):
        """Initialize the service.

        Args:
            repo_path: Path to the git repository (string path, not repo object)
        """
        self.repo_path = repo_path

    def _get_repo(self):
        """Get a git.Repo instance for the repository."""
        return git.Repo(self.repo_path)

    def branch_exists(self, branch_name: str) -> bool:
        """Check whether a local branch ref exists."""
        try:
            self._get_repo().git.show_ref("--verify", "--quiet", f"refs/heads/{branch_name}")
            return True
        except git.exc.GitCommandError as e:
            if e.status == 1:
                return False
            raise RepositoryQueryError(
                "branch_exists", branch_name, format_git_error(e, "git show-ref")
            ) from e

    def delete_branch(self, branch_name: str, force: bool = True) -> Tuple[bool, Optional[str]]:
        """Delete a local branch.

        Args:
            branch_name: Name of the branch to delete
            force: Delete even if the branch is not merged into HEAD

        Returns:
            Tuple of (success, error_message). error_message is None on success.
        """
        try:
            self._get_repo().delete_head(branch_name, force=force)
            logger.info(f"Deleted local branch {branch_name}")
            return True, None
        except git.exc.GitError as e:
            error_msg = format_git_error(e, "git branch -D")
            logger.warning(f"Failed to delete branch {branch_name}: {error_msg}")
            return False, error_msg
