"""Tests for the staleness classifier"""
from datetime import datetime, timedelta, timezone
from unittest.mock import Mock

from workbloom.models.branch import MergeStatus
from workbloom.services.staleness import StalenessClassifier


NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def classifier_for(last_commit, config):
    queries = Mock()
    queries.last_commit_time.return_value = last_commit
    return StalenessClassifier(queries, config, clock=lambda: NOW)


class TestStalenessClassifier:
    """Test staleness and activity annotations."""

    def test_unmerged_at_threshold_is_stale(self, config):
        activity = classifier_for(NOW - timedelta(days=14), config).classify("b", MergeStatus.NOT_MERGED)

        assert activity.stale is True
        assert activity.is_stale_candidate is True
        assert activity.age == timedelta(days=14)

    def test_unmerged_below_threshold_is_not_stale(self, config):
        activity = classifier_for(
            NOW - timedelta(days=14) + timedelta(seconds=1), config
        ).classify("b", MergeStatus.NOT_MERGED)

        assert activity.stale is False
        assert activity.is_stale_candidate is False

    def test_custom_threshold(self, config):
        config['stale_days'] = 3

        activity = classifier_for(NOW - timedelta(days=4), config).classify("b", MergeStatus.NOT_MERGED)

        assert activity.stale is True

    def test_merged_branch_is_never_stale(self, config):
        activity = classifier_for(NOW - timedelta(days=100), config).classify("b", MergeStatus.MERGED)

        assert activity.stale is False
        assert activity.inactive is True
        assert activity.recently_active is False

    def test_merged_recently_active(self, config):
        activity = classifier_for(NOW - timedelta(hours=2), config).classify("b", MergeStatus.MERGED)

        assert activity.inactive is False
        assert activity.recently_active is True

    def test_unknown_merge_status_is_not_flagged(self, config):
        activity = classifier_for(NOW - timedelta(days=100), config).classify("b", MergeStatus.UNKNOWN)

        assert not (activity.stale or activity.inactive or activity.recently_active)

    def test_unresolved_commit_time_is_not_flagged(self, config):
        activity = classifier_for(None, config).classify("b", MergeStatus.NOT_MERGED)

        assert activity.age is None
        assert activity.last_commit is None
        assert activity.stale is False

    def test_future_commit_clamps_to_zero(self, config):
        activity = classifier_for(NOW + timedelta(hours=1), config).classify("b", MergeStatus.NOT_MERGED)

        assert activity.age == timedelta(0)
        assert activity.stale is False
