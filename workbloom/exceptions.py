"""Custom exceptions for workbloom"""

from typing import Optional


class WorkbloomError(Exception):
    """Base exception for all workbloom errors."""
    pass


class GitOperationError(WorkbloomError):
    """Exception raised for errors in Git operations."""

    def __init__(self, operation: str, branch: Optional[str] = None, message: Optional[str] = None):
        self.operation = operation
        self.branch = branch
        self.message = message

        error_msg = f"Git operation '{operation}' failed"
        if branch:
            error_msg += f" for branch '{branch}'"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class RepositoryQueryError(GitOperationError):
    """A read-only repository query did not complete.

    Callers must treat this as "unknown", which never authorizes a deletion.
    """
    pass


class RepositoryNotFoundError(WorkbloomError):
    """Exception raised when the repository root or its worktrees cannot be resolved."""

    def __init__(self, path: str, message: Optional[str] = None):
        self.path = path
        error_msg = f"Could not open git repository at '{path}'"
        if message:
            error_msg += f": {message}"
        super().__init__(error_msg)


class SessionError(WorkbloomError):
    """Exception raised when the session manager returns an unexpected result."""

    def __init__(self, session_name: str, message: Optional[str] = None):
        self.session_name = session_name
        error_msg = f"Session operation failed for '{session_name}'"
        if message:
            error_msg += f": {message}"
        super().__init__(error_msg)
