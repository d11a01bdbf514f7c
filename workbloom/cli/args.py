"""Command-line argument parsing for workbloom."""

import argparse

from workbloom.__version__ import __version__
from workbloom.constants import DEFAULT_MIN_WORKTREE_AGE_HOURS, DEFAULT_STALE_DAYS
from workbloom.models.cleanup import CleanupMode


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="workbloom",
        description="A Git worktree management tool",
    )
    parser.add_argument("--version", action="version", version=f"workbloom {__version__}")
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    cleanup = subparsers.add_parser(
        "cleanup",
        help="Clean up worktrees",
        description="Clean up worktrees. Without a mode flag, removes worktrees of merged branches.",
    )
    mode = cleanup.add_mutually_exclusive_group()
    mode.add_argument("--merged", action="store_true", help="Remove only merged worktrees (default)")
    mode.add_argument(
        "--pattern",
        metavar="PATTERN",
        help="Remove worktrees whose path contains PATTERN (no merge checks)",
    )
    mode.add_argument("--interactive", action="store_true", help="Interactive removal")
    mode.add_argument(
        "--status", action="store_true", help="Show merge status and activity of all worktrees"
    )

    cleanup.add_argument(
        "--force",
        action="store_true",
        help="Skip the remote existence check (all other safety checks still apply)",
    )
    cleanup.add_argument(
        "--exclude", metavar="BRANCH", help="Never clean up this branch during this run"
    )
    cleanup.add_argument("--main-branch", default="main", help="Target branch for merge checks")
    cleanup.add_argument("--remote", default="origin", help="Remote used for the existence check")
    cleanup.add_argument(
        "--stale-days",
        type=int,
        default=DEFAULT_STALE_DAYS,
        help=f"Days without commits until an unmerged branch is stale (default: {DEFAULT_STALE_DAYS})",
    )
    cleanup.add_argument(
        "--min-age-hours",
        type=int,
        default=DEFAULT_MIN_WORKTREE_AGE_HOURS,
        help=f"Skip worktrees created less than this many hours ago (default: {DEFAULT_MIN_WORKTREE_AGE_HOURS})",
    )
    cleanup.add_argument(
        "--protected", nargs="*", default=["main", "master"], help="Protected branches"
    )
    cleanup.add_argument("--ignore", nargs="*", default=[], help="Branch patterns to ignore")
    cleanup.add_argument(
        "--no-sessions", action="store_true", help="Do not stop tmux sessions of removed worktrees"
    )
    cleanup.add_argument(
        "--machine-output",
        action="store_true",
        help="Print only removed worktree paths on stdout; everything else goes to stderr",
    )
    cleanup.add_argument("-v", "--verbose", action="store_true", help="Show verbose output")
    cleanup.add_argument(
        "--debug", action="store_true", help="Show debug information for troubleshooting"
    )

    return parser


def parse_args(argv=None):
    """Parse command-line arguments."""
    args = build_parser().parse_args(argv)
    if args.pattern is not None and not args.pattern.strip():
        build_parser().error("--pattern cannot be empty")
    return args


def get_mode(args) -> CleanupMode:
    """Map parsed flags to a cleanup mode; merged is the default."""
    if args.pattern is not None:
        return CleanupMode.PATTERN
    if args.interactive:
        return CleanupMode.INTERACTIVE
    if args.status:
        return CleanupMode.STATUS
    return CleanupMode.MERGED
