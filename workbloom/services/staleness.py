"""Staleness classifier for branches shown by the status report."""

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Union, TYPE_CHECKING

from workbloom.constants import DEFAULT_MERGED_WARNING_HOURS, DEFAULT_STALE_DAYS
from workbloom.models.branch import BranchActivity, MergeStatus
from workbloom.utils.logging import get_logger

if TYPE_CHECKING:
    from workbloom.config import Config
    from workbloom.services.git.repository import RepositoryQueries

logger = get_logger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class StalenessClassifier:
    """Compute inactivity of branches and flag the ones worth a second look."""

    def __init__(
        self,
        queries: "RepositoryQueries",
        config: Union["Config", dict],
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.queries = queries
        self.stale_after = timedelta(days=config.get("stale_days", DEFAULT_STALE_DAYS))
        self.merged_warning_after = timedelta(
            hours=config.get("merged_warning_hours", DEFAULT_MERGED_WARNING_HOURS)
        )
        self.clock = clock or utc_now

    def classify(self, branch: str, merge_status: MergeStatus) -> BranchActivity:
        """Classify one branch.

        An unmerged branch is stale once its tip is at least ``stale_days`` old.
        A merged branch is annotated either as inactive (past the warning
        threshold) or as recently active. A branch whose last commit time
        cannot be resolved is never flagged.
        """
        last_commit = self.queries.last_commit_time(branch)
        if last_commit is None:
            logger.debug(f"No last commit time for {branch}, not classifying")
            return BranchActivity(branch, merge_status, None, None)

        # Clock skew can put a commit in the future
        age = max(self.clock() - last_commit, timedelta(0))

        stale = merge_status == MergeStatus.NOT_MERGED and age >= self.stale_after
        merged = merge_status == MergeStatus.MERGED
        activity = BranchActivity(
            name=branch,
            merge_status=merge_status,
            last_commit=last_commit,
            age=age,
            stale=stale,
            inactive=merged and age >= self.merged_warning_after,
            recently_active=merged and age < self.merged_warning_after,
        )
        logger.debug(f"Classified {branch}: {activity}")
        return activity
