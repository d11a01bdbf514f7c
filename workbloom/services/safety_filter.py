"""Safety filter pipeline that narrows merged branches down to deletable ones."""

from fnmatch import fnmatch
from typing import Iterable, List, Optional, Union, TYPE_CHECKING

from workbloom.exceptions import RepositoryQueryError
from workbloom.models.cleanup import FilterResult, RejectionReason, SafetyVerdict
from workbloom.utils.logging import get_logger

if TYPE_CHECKING:
    from workbloom.config import Config
    from workbloom.services.git.repository import RepositoryQueries

logger = get_logger(__name__)


class SafetyFilterPipeline:
    """Apply the safety stages to a list of merged branches, in order.

    1. exclude: drop the excluded branch silently, reject ignore-pattern matches
    2. unique commits: reject branches that never carried a commit of their own
    3. remote existence: reject branches missing from the remote (waived by force)
    4. identity: reject branches pointing at the target's commit, or unresolvable

    Each stage only sees what the previous stage passed. Any query failure
    rejects the branch.
    """

    def __init__(self, queries: "RepositoryQueries", config: Union["Config", dict]):
        self.queries = queries
        self.config = config
        self.target_ref = config.get("main_branch", "main")
        self.remote_name = config.get("remote_name", "origin")
        self.ignore_patterns = config.get("ignore_patterns", [])

    def run(
        self,
        branches: Iterable[str],
        force: bool = False,
        exclude: Optional[str] = None,
    ) -> FilterResult:
        """Run every stage and collect the eligible branches and rejections."""
        result = FilterResult()
        candidates = list(dict.fromkeys(branches))

        candidates = self._exclude(candidates, exclude, result)
        candidates = self._require_unique_commits(candidates, result)
        if force:
            logger.debug("Force mode: skipping remote existence check")
        else:
            candidates = self._require_remote(candidates, result)
        candidates = self._reject_identical_to_target(candidates, result)

        result.eligible = candidates
        logger.debug(f"Eligible branches: {candidates}")
        for verdict in result.rejected:
            logger.info(f"Rejected {verdict.branch}: {verdict.reason.value}")
        return result

    def _exclude(self, branches: List[str], exclude: Optional[str], result: FilterResult) -> List[str]:
        passed = []
        for branch in branches:
            if exclude and branch == exclude:
                logger.debug(f"Excluding branch {branch}")
                continue
            if any(fnmatch(branch, pattern) for pattern in self.ignore_patterns):
                result.rejected.append(SafetyVerdict.rejected(branch, RejectionReason.IGNORED))
                continue
            passed.append(branch)
        return passed

    def _require_unique_commits(self, branches: List[str], result: FilterResult) -> List[str]:
        passed = []
        for branch in branches:
            try:
                has_unique = self.queries.has_unique_commits(branch, self.target_ref)
            except RepositoryQueryError as e:
                result.rejected.append(
                    SafetyVerdict.rejected(branch, RejectionReason.UNIQUE_COMMITS_UNKNOWN, str(e))
                )
                continue

            if not has_unique:
                result.rejected.append(
                    SafetyVerdict.rejected(branch, RejectionReason.NO_UNIQUE_COMMITS)
                )
                continue
            passed.append(branch)
        return passed

    def _require_remote(self, branches: List[str], result: FilterResult) -> List[str]:
        if not branches:
            return branches

        # One remote query per run
        remote_branches = self.queries.remote_branch_names(self.remote_name)

        passed = []
        for branch in branches:
            if branch not in remote_branches:
                result.rejected.append(
                    SafetyVerdict.rejected(
                        branch, RejectionReason.NOT_ON_REMOTE, f"not found on '{self.remote_name}'"
                    )
                )
                continue
            passed.append(branch)
        return passed

    def _reject_identical_to_target(self, branches: List[str], result: FilterResult) -> List[str]:
        if not branches:
            return branches

        try:
            target_commit = self.queries.commit_id_of(self.target_ref)
        except RepositoryQueryError as e:
            for branch in branches:
                result.rejected.append(
                    SafetyVerdict.rejected(branch, RejectionReason.COMMIT_UNRESOLVED, str(e))
                )
            return []

        passed = []
        for branch in branches:
            try:
                branch_commit = self.queries.commit_id_of(branch)
            except RepositoryQueryError as e:
                result.rejected.append(
                    SafetyVerdict.rejected(branch, RejectionReason.COMMIT_UNRESOLVED, str(e))
                )
                continue

            if branch_commit == target_commit:
                result.rejected.append(
                    SafetyVerdict.rejected(
                        branch, RejectionReason.IDENTICAL_TO_TARGET, branch_commit[:7]
                    )
                )
                continue
            passed.append(branch)
        return passed
