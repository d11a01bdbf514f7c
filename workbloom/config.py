"""Configuration handling for workbloom"""

from dataclasses import dataclass, field
from typing import Optional, List

from workbloom.constants import (
    DEFAULT_MERGED_WARNING_HOURS,
    DEFAULT_MIN_WORKTREE_AGE_HOURS,
    DEFAULT_STALE_DAYS,
)


@dataclass
class Config:
    """Configuration for a cleanup run with validation."""

    # Branch selection
    main_branch: str = "main"
    remote_name: str = "origin"
    protected_branches: List[str] = field(default_factory=lambda: ["main", "master"])
    ignore_patterns: List[str] = field(default_factory=list)

    # Thresholds
    stale_days: int = DEFAULT_STALE_DAYS
    merged_warning_hours: int = DEFAULT_MERGED_WARNING_HOURS
    min_worktree_age_hours: int = DEFAULT_MIN_WORKTREE_AGE_HOURS

    # Execution modes
    force: bool = False  # Waives the remote-existence check only
    exclude_branch: Optional[str] = None
    manage_sessions: bool = True
    machine_output: bool = False
    verbose: bool = False
    debug: bool = False

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_thresholds()
        self._validate_main_branch()
        self._validate_remote_name()
        self._validate_protected_branches()

    def _validate_thresholds(self):
        """Validate that every threshold is positive."""
        for name in ("stale_days", "merged_warning_hours", "min_worktree_age_hours"):
            value = getattr(self, name)
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")

    def _validate_main_branch(self):
        """Validate main_branch is not empty."""
        if not self.main_branch or not self.main_branch.strip():
            raise ValueError("main_branch cannot be empty")
        self.main_branch = self.main_branch.strip()

    def _validate_remote_name(self):
        if not self.remote_name or not self.remote_name.strip():
            raise ValueError("remote_name cannot be empty")
        self.remote_name = self.remote_name.strip()

    def _validate_protected_branches(self):
        """Validate protected_branches list."""
        if not isinstance(self.protected_branches, list):
            raise ValueError("protected_branches must be a list")

        # Ensure main_branch is in protected_branches
        if self.main_branch not in self.protected_branches:
            self.protected_branches.append(self.main_branch)

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return {
            "main_branch": self.main_branch,
            "remote_name": self.remote_name,
            "protected_branches": self.protected_branches,
            "ignore_patterns": self.ignore_patterns,
            "stale_days": self.stale_days,
            "merged_warning_hours": self.merged_warning_hours,
            "min_worktree_age_hours": self.min_worktree_age_hours,
            "force": self.force,
            "exclude_branch": self.exclude_branch,
            "manage_sessions": self.manage_sessions,
            "machine_output": self.machine_output,
            "verbose": self.verbose,
            "debug": self.debug,
        }

    def get(self, key: str, default=None):
        """Get config value by key."""
        return getattr(self, key, default)

    @classmethod
    def from_dict(cls, config_dict: dict) -> "Config":
        """Create Config from dictionary, ignoring unknown keys."""
        known_fields = set(cls.__dataclass_fields__)
        filtered = {k: v for k, v in config_dict.items() if k in known_fields}
        return cls(**filtered)
