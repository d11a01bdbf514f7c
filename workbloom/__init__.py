"""
workbloom - safe cleanup of git worktrees once their branches are merged
"""

from .__version__ import __version__
from .core import WorktreeCleaner
from .cli.main import main

__all__ = ["WorktreeCleaner", "main", "__version__"]
