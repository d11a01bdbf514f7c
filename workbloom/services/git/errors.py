"""Helpers for turning GitPython errors into readable messages."""

import git


def format_git_error(error: Exception, action: str) -> str:
    """Build an informative message from a GitPython exception.

    Args:
        error: The exception raised by GitPython
        action: Short description of the command, e.g. "git worktree remove"

    Returns:
        Message including the exit status and stderr when available
    """
    if isinstance(error, git.exc.GitCommandError):
        stderr = (error.stderr or "").strip()
        # GitPython wraps stderr as "\n  stderr: '...'"
        if stderr.startswith("stderr:"):
            stderr = stderr[len("stderr:"):].strip().strip("'")
        status = error.status if error.status is not None else "unknown"
        if stderr:
            return f"{action} failed (exit {status}): {stderr}"
        return f"{action} failed with exit code {status}"
    return f"{action} failed: {error}"
