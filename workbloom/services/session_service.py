"""Terminal-multiplexer sessions attached to worktrees.

The cleanup engine only needs to know whether a session exists for a
worktree and to stop it. A missing tmux binary is not an error: the manager
reports itself unavailable and teardown becomes a no-op.
"""

import hashlib
import re
import shutil
import subprocess
from enum import Enum
from pathlib import Path
from typing import List, Optional

from workbloom.constants import SESSION_FALLBACK_NAME, SESSION_PREFIX
from workbloom.exceptions import SessionError
from workbloom.utils.logging import get_logger

logger = get_logger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


class SessionNameVersion(Enum):
    """Session naming schemes, newest first."""
    CURRENT = "sha1"
    # Kept so sessions created under the old scheme are still found on cleanup
    LEGACY = "legacy"


def sanitize_session_name(name: str) -> str:
    """Reduce a name to characters tmux accepts in a session name."""
    sanitized = _UNSAFE_CHARS.sub("-", name).strip("-")
    return sanitized or SESSION_FALLBACK_NAME


def _repo_hash(repo_root: Path, version: SessionNameVersion) -> str:
    data = str(repo_root).encode("utf-8", errors="surrogateescape")
    if version == SessionNameVersion.CURRENT:
        return hashlib.sha1(data).hexdigest()[:8]
    return hashlib.md5(data).hexdigest()[:16]


def session_name(
    repo_root: Path,
    identifier: str,
    version: SessionNameVersion = SessionNameVersion.CURRENT,
) -> str:
    """Derive the deterministic session name for a worktree.

    Format: ``wb-<repo-name>-<repo-hash>-<identifier>``. The hash keeps
    sessions of equally named repositories apart.
    """
    repo_root = Path(repo_root)
    repo_slug = sanitize_session_name(repo_root.name or "repo")
    identifier_slug = sanitize_session_name(identifier)
    return sanitize_session_name(
        f"{SESSION_PREFIX}-{repo_slug}-{_repo_hash(repo_root, version)}-{identifier_slug}"
    )


def session_names(repo_root: Path, identifier: str) -> List[str]:
    """All names a session for this worktree may have, current scheme first."""
    names = []
    for version in SessionNameVersion:
        name = session_name(repo_root, identifier, version)
        if name not in names:
            names.append(name)
    return names


class SessionManager:
    """Interface of a terminal session backend."""

    def is_available(self) -> bool:
        raise NotImplementedError

    def session_exists(self, name: str) -> bool:
        raise NotImplementedError

    def kill_session(self, name: str) -> bool:
        """Stop a session. Returns True if a session was stopped."""
        raise NotImplementedError

    def close_worktree_sessions(self, repo_root: Path, identifier: str) -> List[str]:
        """Stop every session belonging to a worktree, under any naming scheme.

        Returns:
            Names of the sessions that were stopped

        Raises:
            SessionError: If the backend fails unexpectedly
        """
        if not self.is_available():
            logger.debug("Session manager not available, nothing to close")
            return []

        closed = []
        for name in session_names(repo_root, identifier):
            if self.kill_session(name):
                closed.append(name)
        return closed


class TmuxSessionManager(SessionManager):
    """Session backend that drives the tmux binary."""

    def __init__(self, binary: str = "tmux"):
        self.binary = binary

    def is_available(self) -> bool:
        return shutil.which(self.binary) is not None

    def _run(self, *args: str) -> subprocess.CompletedProcess:
        try:
            return subprocess.run(
                [self.binary, *args],
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
                text=True,
                check=False,
            )
        except OSError as e:
            raise SessionError(args[-1], str(e)) from e

    def session_exists(self, name: str) -> bool:
        result = self._run("has-session", "-t", f"={name}")
        if result.returncode == 0:
            return True
        if result.returncode == 1:
            return False
        raise SessionError(name, f"tmux has-session exited with {result.returncode}")

    def kill_session(self, name: str) -> bool:
        if not self.is_available():
            return False
        if not self.session_exists(name):
            return False

        result = self._run("kill-session", "-t", f"={name}")
        if result.returncode != 0:
            raise SessionError(
                name,
                f"tmux kill-session exited with {result.returncode}: {(result.stderr or '').strip()}",
            )
        logger.info(f"Stopped tmux session {name}")
        return True


class NullSessionManager(SessionManager):
    """Backend used when session management is disabled."""

    def is_available(self) -> bool:
        return False

    def session_exists(self, name: str) -> bool:
        return False

    def kill_session(self, name: str) -> bool:
        return False


_current_manager: Optional[SessionManager] = None


def get_session_manager() -> SessionManager:
    """Get the process-wide default backend, creating the tmux one on first use."""
    global _current_manager
    if _current_manager is None:
        _current_manager = TmuxSessionManager()
    return _current_manager


def set_session_manager(manager: Optional[SessionManager]) -> None:
    """Install the process-wide default backend. Call once at startup."""
    global _current_manager
    _current_manager = manager
