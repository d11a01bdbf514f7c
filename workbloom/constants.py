"""Shared constants for workbloom."""

# Thresholds
DEFAULT_STALE_DAYS = 14
DEFAULT_MERGED_WARNING_HOURS = 24
DEFAULT_MIN_WORKTREE_AGE_HOURS = 24

# Session naming
SESSION_PREFIX = "wb"
SESSION_FALLBACK_NAME = "worktree"

# Porcelain markers of `git worktree list --porcelain`
WORKTREE_MARKER = "worktree "
BRANCH_MARKER = "branch "
DETACHED_MARKER = "detached"
HEADS_PREFIX = "refs/heads/"

# Symbol constants
SYMBOL_MERGED = "✅"
SYMBOL_NOT_MERGED = "❌"
SYMBOL_UNKNOWN = "❔"
SYMBOL_ROOT = "📍"
SYMBOL_WARNING = "⚠️"
SYMBOL_REMOVE = "🗑️"
SYMBOL_CLEAN = "🧹"
SYMBOL_DONE = "✨"
SYMBOL_SUMMARY = "📊"


class StatusStyleType:
    """Style types for status rows."""

    MERGED = "merged"
    STALE = "stale"
    WARNING = "warning"
    ACTIVE = "active"
    ROOT = "root"


# CLI colors (Rich color names)
CLI_COLORS = {
    StatusStyleType.MERGED: "green",
    StatusStyleType.STALE: "red",  # Offered for removal
    StatusStyleType.WARNING: "yellow",
    StatusStyleType.ACTIVE: None,  # Default color
    StatusStyleType.ROOT: "cyan",
}
