"""Tests for the worktree inventory"""
from pathlib import Path

import pytest

from workbloom.exceptions import RepositoryQueryError
from workbloom.models.worktree import WorktreeRecord
from workbloom.services.git.worktrees import WorktreeService, parse_worktree_list

from conftest import add_worktree


PORCELAIN = """worktree /repo
HEAD 1111111111111111111111111111111111111111
branch refs/heads/main

worktree /repo-wt/feature-a
HEAD 2222222222222222222222222222222222222222
branch refs/heads/feature/a
locked reason here

worktree /repo-wt/detached
HEAD 3333333333333333333333333333333333333333
detached
prunable gitdir file points to non-existent location
"""


class TestParseWorktreeList:
    """Test parsing of `git worktree list --porcelain`."""

    def test_parses_all_records(self):
        records = parse_worktree_list(PORCELAIN)

        assert records == [
            WorktreeRecord(Path("/repo"), "main", False),
            WorktreeRecord(Path("/repo-wt/feature-a"), "feature/a", False),
            WorktreeRecord(Path("/repo-wt/detached"), None, True),
        ]

    def test_last_record_without_trailing_blank_line(self):
        records = parse_worktree_list("worktree /a\nbranch refs/heads/x\nworktree /b\nbranch refs/heads/y")

        assert [r.branch for r in records] == ["x", "y"]

    def test_lines_before_first_worktree_are_ignored(self):
        records = parse_worktree_list("branch refs/heads/orphan\ndetached\nworktree /a\nHEAD abc\n")

        assert records == [WorktreeRecord(Path("/a"), None, False)]

    def test_detached_flag_does_not_leak_into_next_record(self):
        records = parse_worktree_list("worktree /a\ndetached\n\nworktree /b\nbranch refs/heads/b\n")

        assert records[0].detached is True
        assert records[1].detached is False
        assert records[1].branch == "b"

    def test_bare_primary_and_unknown_markers(self):
        records = parse_worktree_list("worktree /repo.git\nbare\n\nworktree /wt\nbranch refs/heads/b\nunknown-marker x\n")

        assert records[0] == WorktreeRecord(Path("/repo.git"), None, False)
        assert records[1].branch == "b"

    def test_non_heads_branch_ref_is_not_attached(self):
        records = parse_worktree_list("worktree /a\nbranch refs/remotes/origin/x\n")

        assert records[0].branch is None

    def test_empty_worktree_marker_is_dropped(self):
        records = parse_worktree_list("worktree \nbranch refs/heads/x\n")

        assert records == []

    @pytest.mark.parametrize("output", ["", "\n\n", "garbage\nmore garbage"])
    def test_empty_or_garbage_input(self, output):
        assert parse_worktree_list(output) == []


class TestWorktreeRecord:

    def test_name_is_directory_name(self):
        assert WorktreeRecord(Path("/tmp/worktree-feature-x"), "feature-x").name == "worktree-feature-x"

    def test_is_at_resolves_paths(self, tmp_path):
        record = WorktreeRecord(tmp_path / "a" / ".." / "b")

        assert record.is_at(tmp_path / "b")
        assert not record.is_at(tmp_path / "a")


class TestWorktreeService:
    """Test the worktree service against a real repository."""

    def test_list_worktrees_primary_first(self, git_repo, tmp_path):
        git_repo.git.branch('feature')
        path = add_worktree(git_repo, 'feature', tmp_path)

        service = WorktreeService(git_repo.working_dir)
        records = service.list_worktrees()

        assert records[0].is_at(Path(git_repo.working_dir))
        assert records[0].branch == "main"
        assert any(r.is_at(path) and r.branch == "feature" for r in records)
        assert service.primary_root(records) == records[0].path

    def test_list_worktrees_detached(self, git_repo, tmp_path):
        path = tmp_path / "detached-wt"
        git_repo.git.worktree('add', '--detach', str(path), 'main')

        records = WorktreeService(git_repo.working_dir).list_worktrees()
        detached = next(r for r in records if r.is_at(path))

        assert detached.detached is True
        assert detached.branch is None

    def test_list_worktrees_outside_repository(self, tmp_path):
        service = WorktreeService(str(tmp_path))

        with pytest.raises(RepositoryQueryError):
            service.list_worktrees()

    def test_primary_root_without_records(self, git_repo):
        service = WorktreeService(git_repo.working_dir)

        with pytest.raises(RepositoryQueryError):
            service.primary_root([])

    def test_remove_worktree(self, git_repo, tmp_path):
        git_repo.git.branch('feature')
        path = add_worktree(git_repo, 'feature', tmp_path)
        (path / "dirty.txt").write_text("uncommitted\n")

        success, error = WorktreeService(git_repo.working_dir).remove_worktree(str(path), force=True)

        assert success is True
        assert error is None
        assert not path.exists()

    def test_remove_missing_worktree_reports_error(self, git_repo, tmp_path):
        success, error = WorktreeService(git_repo.working_dir).remove_worktree(
            str(tmp_path / "nope"), force=True
        )

        assert success is False
        assert "git worktree remove failed" in error

    def test_creation_time(self, tmp_path):
        created = WorktreeService.creation_time(tmp_path)

        assert created is not None
        assert created.tzinfo is not None

    def test_creation_time_missing_directory(self, tmp_path):
        assert WorktreeService.creation_time(tmp_path / "missing") is None
