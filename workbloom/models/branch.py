"""Branch model and related enums"""
from enum import Enum
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional


class MergeStatus(Enum):
    """Merge state of a branch relative to the target ref."""
    MERGED = "merged"
    NOT_MERGED = "not merged"
    UNKNOWN = "unknown"  # Query failed; never authorizes a deletion


@dataclass(frozen=True)
class BranchActivity:
    """Merge state and inactivity of a branch, as shown by the status report."""
    name: str
    merge_status: MergeStatus
    last_commit: Optional[datetime]
    age: Optional[timedelta]  # None = last commit time could not be resolved
    stale: bool = False  # Unmerged and inactive past the stale threshold
    inactive: bool = False  # Merged and inactive past the warning threshold
    recently_active: bool = False  # Merged but committed to within the warning threshold

    @property
    def is_stale_candidate(self) -> bool:
        """Unmerged stale branches are offered for opt-in removal."""
        return self.merge_status == MergeStatus.NOT_MERGED and self.stale
