"""Core cleanup orchestration for workbloom."""

from .cleanup import WorktreeCleaner

__all__ = ["WorktreeCleaner"]
