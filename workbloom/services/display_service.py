"""Display service for cleanup progress, status reports and summaries"""
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from rich.markup import escape
from rich.table import Table

from workbloom.constants import (
    CLI_COLORS,
    SYMBOL_CLEAN,
    SYMBOL_DONE,
    SYMBOL_ROOT,
    SYMBOL_SUMMARY,
    StatusStyleType,
)
from workbloom.formatters import (
    format_activity_notes,
    format_age,
    format_merge_status,
    format_rejection,
    get_activity_style_type,
)
from workbloom.models.branch import BranchActivity
from workbloom.models.cleanup import CleanupSummary, SafetyVerdict
from workbloom.models.worktree import WorktreeRecord
from workbloom.output import console
from workbloom.utils.logging import get_logger

logger = get_logger(__name__)


class DisplayService:
    def __init__(self, verbose: bool = False):
        self.verbose = verbose

    def display_cleanup_start(self, target: str) -> None:
        console.print(f"{SYMBOL_CLEAN} Cleaning up worktrees for branches merged into [cyan]{escape(target)}[/cyan]...")

    def display_merged_branches(self, branches: Sequence[str], exclude: Optional[str] = None) -> None:
        """Show the branches that survived the safety filters."""
        console.print("Found merged branches:")
        for branch in branches:
            console.print(f"  - {escape(branch)}")
        if exclude:
            console.print(f"  (excluding: [cyan]{escape(exclude)}[/cyan])")
        console.print()

    def display_rejections(self, rejected: Sequence[SafetyVerdict]) -> None:
        """List every branch the safety filters dropped, with the reason."""
        if not rejected:
            return
        console.print("[yellow]Not eligible for cleanup:[/yellow]")
        for verdict in rejected:
            console.print(f"[yellow]  - {escape(format_rejection(verdict))}[/yellow]")
        console.print()

    def display_status_table(
        self,
        rows: List[Tuple[WorktreeRecord, Optional[BranchActivity]]],
        root: Path,
        stale_days: int,
    ) -> None:
        """Display merge state and activity of every worktree."""
        table = Table()
        for label in ("Branch", "Worktree", "Merge", "Last Activity", "Notes"):
            table.add_column(label)

        for record, activity in rows:
            if record.is_at(root):
                table.add_row(
                    f"{SYMBOL_ROOT} {escape(record.branch or '(detached)')}",
                    escape(str(record.path)),
                    "primary worktree",
                    "",
                    "",
                    style=CLI_COLORS[StatusStyleType.ROOT],
                )
                continue

            if activity is None:
                table.add_row(
                    "(detached HEAD)" if record.detached else "(no branch)",
                    escape(str(record.path)),
                    "",
                    "",
                    "",
                    style=CLI_COLORS[StatusStyleType.WARNING],
                )
                continue

            table.add_row(
                escape(activity.name),
                escape(str(record.path)),
                format_merge_status(activity.merge_status),
                format_age(activity.age),
                format_activity_notes(activity, stale_days),
                style=CLI_COLORS.get(get_activity_style_type(activity)),
            )

        console.print(table)

    def display_summary(self, summary: CleanupSummary) -> None:
        """Print the final counts for a cleanup run."""
        console.print()
        console.print(f"{SYMBOL_SUMMARY} Summary:")
        console.print(f"  - Cleaned up: {summary.removed_count} worktree(s)")
        console.print(f"  - Skipped: {summary.skipped_count} worktree(s)")
        if self.verbose:
            for path in summary.removed_paths:
                console.print(f"    removed {escape(path)}")
        console.print()

        if summary.nothing_to_clean:
            console.print(f"[green]{SYMBOL_DONE} Nothing to clean up[/green]")
        else:
            console.print(
                f"[bold green]Cleanup completed! Cleaned up: {summary.removed_count}, "
                f"Skipped: {summary.skipped_count}[/bold green]"
            )
