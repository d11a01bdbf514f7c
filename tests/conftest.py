"""Pytest fixtures for workbloom tests"""
from datetime import datetime, timedelta, timezone
from pathlib import Path
from types import SimpleNamespace

import git
import pytest

from workbloom.exceptions import SessionError
from workbloom.output import console, set_machine_output
from workbloom.services.session_service import SessionManager


class FakeSessionManager(SessionManager):
    """In-memory session backend."""

    def __init__(self, sessions=(), available=True, fail=False):
        self.sessions = set(sessions)
        self.available = available
        self.fail = fail
        self.killed = []

    def is_available(self):
        return self.available

    def session_exists(self, name):
        if self.fail:
            raise SessionError(name, "backend exploded")
        return name in self.sessions

    def kill_session(self, name):
        if not self.session_exists(name):
            return False
        self.sessions.discard(name)
        self.killed.append(name)
        return True


def clock_at(offset: timedelta):
    """A clock running ``offset`` ahead of real time."""
    return lambda: datetime.now(timezone.utc) + offset


def commit_file(repo, name, content=None, message=None):
    """Write a file in the repo's working tree and commit it."""
    path = Path(repo.working_dir) / name
    path.write_text(content or f"{name}\n")
    repo.index.add([name])
    return repo.index.commit(message or f"Add {name}")


@pytest.fixture(autouse=True)
def reset_machine_output():
    yield
    set_machine_output(False)


@pytest.fixture
def config():
    """A configuration dictionary for cleanup runs."""
    return {
        'main_branch': 'main',
        'remote_name': 'origin',
        'protected_branches': ['main', 'master'],
        'stale_days': 14,
        'merged_warning_hours': 24,
        'min_worktree_age_hours': 24,
        'force': False,
        'manage_sessions': True,
    }


@pytest.fixture
def sessions():
    return FakeSessionManager()


@pytest.fixture
def git_repo(tmp_path):
    """Create a real Git repository with a bare 'origin' remote."""
    repo_path = tmp_path / "project"
    repo_path.mkdir()

    repo = git.Repo.init(repo_path)
    repo.config_writer().set_value("user", "name", "Test User").release()
    repo.config_writer().set_value("user", "email", "test@example.com").release()

    commit_file(repo, "README.md", "# Test Repository\n", "Initial commit")
    repo.git.branch('-M', 'main')

    origin = git.Repo.init(tmp_path / "origin.git", bare=True)
    repo.create_remote('origin', str(tmp_path / "origin.git"))
    repo.git.push('origin', 'main')

    yield repo

    repo.close()
    origin.close()


def add_worktree(repo, branch, tmp_path, name=None):
    """Check ``branch`` out in a new linked worktree next to the repository."""
    path = tmp_path / (name or f"worktree-{branch.replace('/', '-')}")
    repo.git.worktree('add', str(path), branch)
    return path


@pytest.fixture
def merged_repo(git_repo, tmp_path):
    """Repository with a merged branch and an unmerged one, each in a worktree.

    - feature-x: 3 commits, pushed, merged into main with a merge commit
    - feature-y: 1 commit, pushed, not merged
    """
    repo = git_repo

    repo.git.checkout('-b', 'feature-x')
    for i in range(3):
        commit_file(repo, f"x{i}.txt")
    repo.git.push('origin', 'feature-x')

    repo.git.checkout('main')
    repo.git.merge('feature-x', '--no-ff', '-m', 'Merge feature-x')
    repo.git.push('origin', 'main')

    repo.git.checkout('-b', 'feature-y')
    commit_file(repo, "y.txt")
    repo.git.push('origin', 'feature-y')
    repo.git.checkout('main')

    worktrees = {
        'feature-x': add_worktree(repo, 'feature-x', tmp_path),
        'feature-y': add_worktree(repo, 'feature-y', tmp_path),
    }
    yield SimpleNamespace(repo=repo, worktrees=worktrees)


@pytest.fixture
def wide_console():
    """Keep long temporary paths on one console line."""
    width = console.width
    console.width = 1000
    yield console
    console.width = width
