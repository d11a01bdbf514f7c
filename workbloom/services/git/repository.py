"""Read-only repository queries used by the cleanup decision engine.

Every query either returns a structured result or raises
:class:`RepositoryQueryError`. Callers treat a failed query as "unknown",
which never authorizes a deletion. The two exceptions are
:meth:`RepositoryQueries.remote_branch_names`, which degrades to an empty set
with a warning, and :meth:`RepositoryQueries.last_commit_time`, which returns
``None``.
"""

import git
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Set, Union, TYPE_CHECKING

from workbloom.exceptions import RepositoryQueryError
from workbloom.models.branch import MergeStatus
from workbloom.services.git.errors import format_git_error
from workbloom.utils.logging import get_logger

if TYPE_CHECKING:
    from workbloom.config import Config

logger = get_logger(__name__)


def parse_merged_branches(output: str, excluded: Iterable[str] = ()) -> List[str]:
    """Parse the output of ``git branch --merged``.

    Lines marked ``*`` (the current branch) and pseudo-entries such as
    ``(HEAD detached at ...)`` are skipped. Lines marked ``+`` belong to
    branches checked out in linked worktrees and are kept.
    """
    excluded = set(excluded)
    branches = []
    for line in output.splitlines():
        line = line.rstrip()
        if not line.strip():
            continue
        if line.lstrip().startswith("*"):
            continue
        name = line.strip()
        if name.startswith("+ "):
            name = name[2:].strip()
        if not name or name.startswith("(") or " " in name:
            continue
        if name in excluded:
            continue
        branches.append(name)
    return branches


def parse_remote_heads(output: str) -> Set[str]:
    """Parse ``git ls-remote --heads`` output into a set of branch names.

    Lines that do not look like ``<sha>\\trefs/heads/<name>`` are ignored.
    """
    names = set()
    for line in output.splitlines():
        parts = line.strip().split("\t")
        if len(parts) != 2:
            continue
        ref = parts[1].strip()
        if ref.startswith("refs/heads/") and len(ref) > len("refs/heads/"):
            names.add(ref[len("refs/heads/"):])
    return names


class RepositoryQueries:
    """Read-only queries against a git repository."""

    def __init__(self, repo_path: str, config: Union["Config", dict]):
        """Initialize the query service.

        Args:
            repo_path: Path to the git repository
            config: Configuration dictionary or Config object
        """
        self.repo_path = repo_path
        self.config = config
        self.main_branch = config.get("main_branch", "main")
        self.remote_name = config.get("remote_name", "origin")
        self.protected_branches = config.get("protected_branches", ["main", "master"])

        logger.debug("Repository queries initialized")

    def _get_repo(self):
        """Get a git.Repo instance.

        GitPython repos are lightweight - they don't clone, just open the existing repo.

        Returns:
            git.Repo: A fresh repository instance
        """
        return git.Repo(self.repo_path)

    def list_merged_branches(self, target_ref: Optional[str] = None) -> List[str]:
        """List local branches whose history is fully contained in ``target_ref``.

        The target itself, protected branches and the current branch are excluded.
        """
        target = target_ref or self.main_branch
        try:
            output = self._get_repo().git.branch("--merged", target)
        except git.exc.GitError as e:
            raise RepositoryQueryError(
                "list_merged_branches", target, format_git_error(e, "git branch --merged")
            ) from e

        branches = parse_merged_branches(output, excluded={target, *self.protected_branches})
        logger.debug(f"Branches merged into {target}: {branches}")
        return branches

    def branch_ancestry(self, branch: str, target_ref: Optional[str] = None) -> MergeStatus:
        """Check whether ``branch`` is a strict ancestor of ``target_ref``.

        A branch pointing at the target's own commit has not been merged yet
        and reports NOT_MERGED.
        """
        target = target_ref or self.main_branch
        try:
            self._get_repo().git.merge_base("--is-ancestor", branch, target)
        except git.exc.GitCommandError as e:
            # merge-base exits 1 for "not an ancestor" and >1 for real errors
            if e.status == 1:
                return MergeStatus.NOT_MERGED
            logger.debug(
                f"Could not check ancestry of {branch}: {format_git_error(e, 'git merge-base')}"
            )
            return MergeStatus.UNKNOWN
        except git.exc.GitError as e:
            logger.debug(f"Could not check ancestry of {branch}: {e}")
            return MergeStatus.UNKNOWN

        try:
            same_commit = self.commit_id_of(branch) == self.commit_id_of(target)
        except RepositoryQueryError as e:
            logger.debug(f"Could not compare {branch} with {target}: {e}")
            return MergeStatus.UNKNOWN
        return MergeStatus.NOT_MERGED if same_commit else MergeStatus.MERGED

    def commit_id_of(self, ref: str) -> str:
        """Resolve a branch or ref to its commit SHA."""
        try:
            sha = self._get_repo().git.rev_parse("--verify", "--quiet", f"{ref}^{{commit}}")
        except git.exc.GitError as e:
            raise RepositoryQueryError(
                "commit_id_of", ref, format_git_error(e, "git rev-parse")
            ) from e

        sha = sha.strip()
        if not sha:
            raise RepositoryQueryError("commit_id_of", ref, "empty commit id")
        return sha

    def remote_branch_names(self, remote: Optional[str] = None) -> Set[str]:
        """Get the branch names that exist on ``remote``.

        An absent or unreachable remote yields an empty set and a warning.
        """
        remote = remote or self.remote_name
        try:
            repo = self._get_repo()
            if remote not in [r.name for r in repo.remotes]:
                logger.warning(f"Remote '{remote}' is not configured; treating it as empty")
                return set()
            output = repo.git.ls_remote("--heads", remote)
        except git.exc.GitError as e:
            logger.warning(
                f"Could not list branches on remote '{remote}': "
                f"{format_git_error(e, 'git ls-remote')}"
            )
            return set()

        names = parse_remote_heads(output)
        logger.debug(f"Found {len(names)} branches on remote '{remote}'")
        return names

    def last_commit_time(self, branch: str) -> Optional[datetime]:
        """Get the commit time of the branch tip, or None if it cannot be resolved."""
        try:
            output = self._get_repo().git.log("-1", "--format=%ct", branch, "--")
            return datetime.fromtimestamp(int(output.strip()), tz=timezone.utc)
        except (git.exc.GitError, ValueError) as e:
            logger.debug(f"Error getting last commit time for {branch}: {e}")
            return None

    def unique_commit_count(self, branch: str, target_ref: Optional[str] = None) -> int:
        """Count the commits ``branch`` added on top of the first-parent line of ``target_ref``.

        Walks the branch's own first-parent chain until it meets a commit on the
        target's first-parent line. A branch merged in through a merge commit
        keeps its commits, while a branch created from the target and never
        committed to has none. A branch fast-forwarded into the target also
        counts zero.
        """
        target = target_ref or self.main_branch
        try:
            repo = self._get_repo()
            branch_line = repo.git.rev_list("--first-parent", branch, "--").split()
            target_line = set(repo.git.rev_list("--first-parent", target, "--").split())
        except git.exc.GitError as e:
            raise RepositoryQueryError(
                "unique_commit_count", branch, format_git_error(e, "git rev-list")
            ) from e

        count = 0
        for sha in branch_line:
            if sha in target_line:
                break
            count += 1
        return count

    def has_unique_commits(self, branch: str, target_ref: Optional[str] = None) -> bool:
        """Check whether ``branch`` carries at least one commit of its own.

        A branch freshly created from the target satisfies the ancestry check
        vacuously; this tells it apart from a branch that was actually merged.
        """
        return self.unique_commit_count(branch, target_ref) > 0
