"""Status and outcome formatting utilities."""

from workbloom.constants import (
    SYMBOL_MERGED,
    SYMBOL_NOT_MERGED,
    SYMBOL_UNKNOWN,
    SYMBOL_WARNING,
    StatusStyleType,
)
from workbloom.formatters.date import format_age
from workbloom.models.branch import BranchActivity, MergeStatus
from workbloom.models.cleanup import CleanupOutcome, SafetyVerdict


def format_merge_status(status: MergeStatus) -> str:
    """
    Format a merge status with its symbol.

    Args:
        status: Merge status enum value

    Returns:
        Display text, e.g. "✅ merged"
    """
    symbol = {
        MergeStatus.MERGED: SYMBOL_MERGED,
        MergeStatus.NOT_MERGED: SYMBOL_NOT_MERGED,
    }.get(status, SYMBOL_UNKNOWN)
    return f"{symbol} {status.value}"


def format_activity_notes(activity: BranchActivity, stale_days: int) -> str:
    """Build the stale/warning annotation shown next to a branch."""
    if activity.stale:
        return f"{SYMBOL_WARNING} stale (no commits for {format_age(activity.age)}, >= {stale_days}d)"
    if activity.recently_active:
        return f"{SYMBOL_WARNING} merged but active {format_age(activity.age)} ago, may still be in review"
    if activity.inactive:
        return f"{SYMBOL_WARNING} merged and inactive for {format_age(activity.age)}"
    if activity.merge_status == MergeStatus.UNKNOWN:
        return "merge status could not be determined"
    return ""


def format_rejection(verdict: SafetyVerdict) -> str:
    """
    Format why a branch was rejected by the safety filters.

    Returns:
        Text such as "feature-x: has no commits of its own"
    """
    text = f"{verdict.branch}: {verdict.reason.value}"
    if verdict.detail:
        text += f" ({verdict.detail})"
    return text


def format_skip(outcome: CleanupOutcome) -> str:
    """Format why a worktree was skipped."""
    text = outcome.reason.value if outcome.reason else "skipped"
    if outcome.detail:
        text += f": {outcome.detail}"
    return text


def get_activity_style_type(activity: BranchActivity) -> str:
    """
    Determine the row style for a branch based on its activity.

    Returns:
        StatusStyleType value
    """
    if activity.stale:
        return StatusStyleType.STALE
    if activity.recently_active or activity.merge_status == MergeStatus.UNKNOWN:
        return StatusStyleType.WARNING
    if activity.merge_status == MergeStatus.MERGED:
        return StatusStyleType.MERGED
    return StatusStyleType.ACTIVE
