"""Cleanup decision models: safety verdicts and per-worktree outcomes."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class CleanupMode(Enum):
    """Mutually exclusive entry modes of the cleanup command."""
    MERGED = "merged"
    PATTERN = "pattern"
    INTERACTIVE = "interactive"
    STATUS = "status"


class RejectionReason(Enum):
    """Why the safety filter pipeline dropped a branch. Values are user-visible."""
    IGNORED = "matches an ignore pattern"
    NO_UNIQUE_COMMITS = "has no commits of its own"
    UNIQUE_COMMITS_UNKNOWN = "could not count unique commits"
    NOT_ON_REMOTE = "does not exist on the remote"
    IDENTICAL_TO_TARGET = "points at the same commit as the target branch"
    COMMIT_UNRESOLVED = "could not resolve commit"


class SkipReason(Enum):
    """Why an otherwise matched worktree was not removed. Values are user-visible."""
    DETACHED = "detached HEAD"
    TOO_RECENT = "worktree was created recently"
    AGE_UNKNOWN = "worktree creation time is unknown"
    REMOVE_FAILED = "removal failed"
    DECLINED = "declined"


@dataclass(frozen=True)
class SafetyVerdict:
    """Result of running one branch through the safety filter pipeline."""
    branch: str
    reason: Optional[RejectionReason] = None
    detail: Optional[str] = None

    @classmethod
    def rejected(cls, branch: str, reason: RejectionReason, detail: Optional[str] = None):
        return cls(branch=branch, reason=reason, detail=detail)


@dataclass
class FilterResult:
    """Branches that survived the pipeline plus a verdict for every rejected one."""
    eligible: List[str] = field(default_factory=list)
    rejected: List[SafetyVerdict] = field(default_factory=list)

    def is_eligible(self, branch: Optional[str]) -> bool:
        return branch is not None and branch in self.eligible


class OutcomeKind(Enum):
    REMOVED = "removed"
    SKIPPED = "skipped"
    IGNORED = "ignored"


@dataclass(frozen=True)
class CleanupOutcome:
    """Per-worktree result of a cleanup attempt."""
    kind: OutcomeKind
    path: Optional[str] = None
    branch: Optional[str] = None
    reason: Optional[SkipReason] = None
    detail: Optional[str] = None

    @classmethod
    def removed(cls, path: str, branch: Optional[str] = None):
        return cls(OutcomeKind.REMOVED, path=path, branch=branch)

    @classmethod
    def skipped(cls, path: str, branch: Optional[str], reason: SkipReason, detail: Optional[str] = None):
        return cls(OutcomeKind.SKIPPED, path=path, branch=branch, reason=reason, detail=detail)

    @classmethod
    def ignored(cls, path: Optional[str] = None, branch: Optional[str] = None):
        return cls(OutcomeKind.IGNORED, path=path, branch=branch)


@dataclass
class CleanupSummary:
    """Aggregated outcome counts for one run."""
    outcomes: List[CleanupOutcome] = field(default_factory=list)

    def record(self, outcome: CleanupOutcome) -> CleanupOutcome:
        self.outcomes.append(outcome)
        return outcome

    @property
    def removed_count(self) -> int:
        return sum(1 for o in self.outcomes if o.kind == OutcomeKind.REMOVED)

    @property
    def skipped_count(self) -> int:
        return sum(1 for o in self.outcomes if o.kind == OutcomeKind.SKIPPED)

    @property
    def removed_paths(self) -> List[str]:
        return [o.path for o in self.outcomes if o.kind == OutcomeKind.REMOVED]

    @property
    def nothing_to_clean(self) -> bool:
        return self.removed_count == 0 and self.skipped_count == 0


@dataclass
class StatusReport:
    """What the status mode saw, plus the outcome of its stale-branch removal pass."""
    rows: list = field(default_factory=list)  # (WorktreeRecord, Optional[BranchActivity])
    stale_candidates: list = field(default_factory=list)  # (WorktreeRecord, BranchActivity)
    summary: CleanupSummary = field(default_factory=CleanupSummary)
