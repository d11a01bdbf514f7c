"""Tests for display formatters"""
from datetime import timedelta

import pytest

from workbloom.constants import StatusStyleType
from workbloom.formatters import (
    format_activity_notes,
    format_age,
    format_merge_status,
    format_rejection,
    format_skip,
    get_activity_style_type,
)
from workbloom.models.branch import BranchActivity, MergeStatus
from workbloom.models.cleanup import CleanupOutcome, RejectionReason, SafetyVerdict, SkipReason


class TestFormatAge:

    @pytest.mark.parametrize("age, expected", [
        (None, "unknown"),
        (timedelta(days=20, hours=5), "20d"),
        (timedelta(hours=5, minutes=59), "5h"),
        (timedelta(minutes=12), "12m"),
        (timedelta(seconds=30), "0m"),
    ])
    def test_format_age(self, age, expected):
        assert format_age(age) == expected


class TestStatusFormatting:

    def test_merge_status(self):
        assert format_merge_status(MergeStatus.MERGED).endswith("merged")
        assert format_merge_status(MergeStatus.NOT_MERGED).endswith("not merged")
        assert format_merge_status(MergeStatus.UNKNOWN).endswith("unknown")

    def test_stale_notes_and_style(self):
        activity = BranchActivity("b", MergeStatus.NOT_MERGED, None, timedelta(days=20), stale=True)

        assert "stale" in format_activity_notes(activity, 14)
        assert ">= 14d" in format_activity_notes(activity, 14)
        assert get_activity_style_type(activity) == StatusStyleType.STALE

    def test_recently_active_merged(self):
        activity = BranchActivity("b", MergeStatus.MERGED, None, timedelta(hours=2), recently_active=True)

        assert "may still be in review" in format_activity_notes(activity, 14)
        assert get_activity_style_type(activity) == StatusStyleType.WARNING

    def test_inactive_merged(self):
        activity = BranchActivity("b", MergeStatus.MERGED, None, timedelta(days=3), inactive=True)

        assert "inactive for 3d" in format_activity_notes(activity, 14)
        assert get_activity_style_type(activity) == StatusStyleType.MERGED

    def test_active_unmerged(self):
        activity = BranchActivity("b", MergeStatus.NOT_MERGED, None, timedelta(days=1))

        assert format_activity_notes(activity, 14) == ""
        assert get_activity_style_type(activity) == StatusStyleType.ACTIVE

    def test_rejection(self):
        verdict = SafetyVerdict.rejected("feature-x", RejectionReason.NOT_ON_REMOTE, "not found on 'origin'")

        assert format_rejection(verdict) == (
            "feature-x: does not exist on the remote (not found on 'origin')"
        )

    def test_skip(self):
        outcome = CleanupOutcome.skipped("/wt", "b", SkipReason.TOO_RECENT, "created 2h ago")

        assert format_skip(outcome) == "worktree was created recently: created 2h ago"
