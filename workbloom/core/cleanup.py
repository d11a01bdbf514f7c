"""Cleanup orchestrator: decides which worktrees to remove and removes them"""

from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable, List, Optional, Union

import git
from rich.markup import escape

from workbloom.config import Config
from workbloom.constants import SYMBOL_REMOVE, SYMBOL_WARNING
from workbloom.exceptions import RepositoryNotFoundError, RepositoryQueryError, SessionError
from workbloom.formatters import format_age, format_skip
from workbloom.models.cleanup import (
    CleanupMode,
    CleanupOutcome,
    CleanupSummary,
    FilterResult,
    SkipReason,
    StatusReport,
)
from workbloom.models.worktree import WorktreeRecord
from workbloom.output import console, emit, is_machine_output
from workbloom.services.display_service import DisplayService
from workbloom.services.git import GitOperations, RepositoryQueries, WorktreeService
from workbloom.services.safety_filter import SafetyFilterPipeline
from workbloom.services.session_service import (
    NullSessionManager,
    SessionManager,
    get_session_manager,
)
from workbloom.services.staleness import StalenessClassifier, utc_now
from workbloom.utils.logging import get_logger

logger = get_logger(__name__)


class WorktreeCleaner:
    """Drive worktree cleanup for each mode of the cleanup command."""

    def __init__(
        self,
        repo_path: str,
        config: Union[Config, dict],
        session_manager: Optional[SessionManager] = None,
        clock: Optional[Callable[[], datetime]] = None,
        confirm: Optional[Callable[[str], bool]] = None,
    ):
        """Initialize WorktreeCleaner.

        Args:
            repo_path: Any path inside the repository or one of its worktrees
            config: Configuration dict or Config object
            session_manager: Session backend; defaults to the process-wide one
            clock: Returns the current UTC time; injectable for tests
            confirm: Asks a yes/no question; defaults to a console prompt

        Raises:
            RepositoryNotFoundError: If no repository is found at repo_path
            RepositoryQueryError: If the worktrees cannot be enumerated
        """
        if isinstance(config, dict):
            self.config = Config.from_dict(config)
        else:
            self.config = config

        try:
            repo = git.Repo(repo_path, search_parent_directories=True)
        except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError) as e:
            raise RepositoryNotFoundError(str(repo_path), "not a git repository") from e

        working_dir = repo.working_tree_dir or repo.git_dir
        repo.close()

        # All queries run from the primary worktree, which is the first one listed
        self.worktree_service = WorktreeService(working_dir)
        self.root = self.worktree_service.primary_root()
        self.repo_path = str(self.root)
        self.worktree_service = WorktreeService(self.repo_path)

        self.main_branch = self.config.main_branch
        self.queries = RepositoryQueries(self.repo_path, self.config)
        self.git_ops = GitOperations(self.repo_path)
        self.safety_filter = SafetyFilterPipeline(self.queries, self.config)
        self.clock = clock or utc_now
        self.classifier = StalenessClassifier(self.queries, self.config, clock=self.clock)
        self.display_service = DisplayService(verbose=self.config.verbose)
        self.min_worktree_age = timedelta(hours=self.config.min_worktree_age_hours)
        self.confirm = confirm or self._prompt

        if not self.config.manage_sessions:
            self.session_manager = NullSessionManager()
        else:
            self.session_manager = session_manager or get_session_manager()

        logger.debug(f"Repository root: {self.root}")

    def run(self, mode: CleanupMode, pattern: Optional[str] = None) -> CleanupSummary:
        """Run one cleanup mode and return its summary."""
        if mode == CleanupMode.MERGED:
            return self.cleanup_merged()
        if mode == CleanupMode.PATTERN:
            return self.cleanup_by_pattern(pattern)
        if mode == CleanupMode.INTERACTIVE:
            return self.cleanup_interactive()
        return self.show_status().summary

    def _linked_worktrees(self) -> List[WorktreeRecord]:
        """All worktrees except the primary one."""
        return [wt for wt in self.worktree_service.list_worktrees() if not wt.is_at(self.root)]

    # Automatic mode

    def get_eligible_branches(
        self, force: bool = False, exclude: Optional[str] = None
    ) -> Optional[FilterResult]:
        """Run the merged-branch query through the safety filters.

        Returns:
            The filter result, or None if the merged branches could not be listed
        """
        try:
            merged = self.queries.list_merged_branches(self.main_branch)
        except RepositoryQueryError as e:
            logger.warning(f"Could not list merged branches: {e}")
            console.print(f"[yellow]{SYMBOL_WARNING} Could not determine merged branches: {escape(str(e))}[/yellow]")
            return None

        return self.safety_filter.run(merged, force=force, exclude=exclude)

    def cleanup_merged(
        self, force: Optional[bool] = None, exclude: Optional[str] = None
    ) -> CleanupSummary:
        """Remove worktrees whose branches are merged and pass every safety check."""
        force = self.config.force if force is None else force
        exclude = self.config.exclude_branch if exclude is None else exclude
        summary = CleanupSummary()

        self.display_service.display_cleanup_start(self.main_branch)
        result = self.get_eligible_branches(force=force, exclude=exclude)
        if result is None:
            return summary

        self.display_service.display_rejections(result.rejected)
        if not result.eligible:
            console.print("[green]No merged branches found[/green]")
            self.display_service.display_summary(summary)
            return summary

        self.display_service.display_merged_branches(result.eligible, exclude)

        for worktree in self._linked_worktrees():
            summary.record(self._process_merged_worktree(worktree, result))

        self.display_service.display_summary(summary)
        return summary

    def _process_merged_worktree(self, worktree: WorktreeRecord, result: FilterResult) -> CleanupOutcome:
        """Apply the per-worktree gates and remove the worktree if they all pass."""
        path = str(worktree.path)

        if worktree.detached:
            console.print(f"[yellow]{SYMBOL_WARNING} Skipping detached HEAD worktree: {escape(path)}[/yellow]")
            return CleanupOutcome.skipped(path, None, SkipReason.DETACHED)

        if not result.is_eligible(worktree.branch):
            return CleanupOutcome.ignored(path, worktree.branch)

        created = self.worktree_service.creation_time(worktree.path)
        if created is None:
            outcome = CleanupOutcome.skipped(path, worktree.branch, SkipReason.AGE_UNKNOWN)
            console.print(f"[yellow]{SYMBOL_WARNING} Skipping {escape(worktree.branch)}: {escape(format_skip(outcome))}[/yellow]")
            return outcome

        age = self.clock() - created
        if age < self.min_worktree_age:
            outcome = CleanupOutcome.skipped(
                path, worktree.branch, SkipReason.TOO_RECENT, f"created {format_age(age)} ago"
            )
            console.print(f"[yellow]{SYMBOL_WARNING} Skipping {escape(worktree.branch)}: {escape(format_skip(outcome))}[/yellow]")
            return outcome

        return self.remove_worktree(worktree)

    # Pattern and interactive modes

    def cleanup_by_pattern(self, pattern: str) -> CleanupSummary:
        """Remove every worktree whose path contains ``pattern``, without merge checks."""
        if not pattern:
            raise ValueError("pattern cannot be empty")

        console.print(f"Removing worktrees matching pattern: [cyan]{escape(pattern)}[/cyan]")
        console.print()

        summary = CleanupSummary()
        for worktree in self._linked_worktrees():
            if pattern in str(worktree.path):
                summary.record(self.remove_worktree(worktree))

        console.print(
            f"Removed {summary.removed_count} worktree(s) matching pattern '{escape(pattern)}'"
        )
        self.display_service.display_summary(summary)
        return summary

    def cleanup_interactive(self) -> CleanupSummary:
        """Ask about every linked worktree and remove the ones confirmed."""
        console.print("Interactive worktree removal")
        console.print()

        summary = CleanupSummary()
        for worktree in self._linked_worktrees():
            console.print(f"Worktree: {escape(str(worktree.path))}")
            console.print(f"Branch: [cyan]{escape(worktree.branch or '(detached HEAD)')}[/cyan]")

            if self.confirm(f"Remove worktree '{worktree.name}'?"):
                summary.record(self.remove_worktree(worktree))
            else:
                console.print("  Skipped")
                summary.record(
                    CleanupOutcome.skipped(str(worktree.path), worktree.branch, SkipReason.DECLINED)
                )
            console.print()

        self.display_service.display_summary(summary)
        return summary

    # Status mode

    def show_status(self) -> StatusReport:
        """Report merge state and activity of every worktree.

        Nothing is removed unless the user confirms one of the stale,
        unmerged branches offered at the end.
        """
        console.print(f"Checking merge status of all worktrees against [cyan]{escape(self.main_branch)}[/cyan]...")
        console.print()

        report = StatusReport()
        for worktree in self.worktree_service.list_worktrees():
            if worktree.is_at(self.root) or worktree.branch is None:
                report.rows.append((worktree, None))
                continue

            merge_status = self.queries.branch_ancestry(worktree.branch, self.main_branch)
            activity = self.classifier.classify(worktree.branch, merge_status)
            report.rows.append((worktree, activity))
            if activity.is_stale_candidate:
                report.stale_candidates.append((worktree, activity))

        self.display_service.display_status_table(report.rows, self.root, self.config.stale_days)

        if report.stale_candidates:
            console.print(
                f"\n[yellow]Found {len(report.stale_candidates)} unmerged branch(es) with no commits "
                f"for {self.config.stale_days} days or more[/yellow]"
            )
            for worktree, activity in report.stale_candidates:
                question = (
                    f"Remove worktree and branch '{activity.name}' "
                    f"(last commit {format_age(activity.age)} ago)?"
                )
                if self.confirm(question):
                    report.summary.record(self.remove_worktree(worktree))
                else:
                    console.print("  Kept")
                    report.summary.record(
                        CleanupOutcome.skipped(str(worktree.path), worktree.branch, SkipReason.DECLINED)
                    )
            self.display_service.display_summary(report.summary)

        return report

    # Removal

    def remove_worktree(self, worktree: WorktreeRecord) -> CleanupOutcome:
        """Remove a worktree, then stop its sessions and delete its branch.

        Session teardown and branch deletion are best-effort: their failures
        are logged and never change the outcome of the worktree removal.
        """
        path = str(worktree.path)
        if worktree.is_at(self.root):
            # Never reached through the public modes
            raise ValueError(f"Refusing to remove the primary worktree at {path}")

        console.print(f"[red]{SYMBOL_REMOVE}[/red] Removing worktree for branch: {escape(worktree.branch or '(detached HEAD)')}")
        console.print(f"    Path: {escape(path)}")

        success, error_message = self.worktree_service.remove_worktree(path, force=True)
        if not success:
            console.print(f"    [red]✗ Failed to remove: {escape(error_message or '')}[/red]")
            return CleanupOutcome.skipped(path, worktree.branch, SkipReason.REMOVE_FAILED, error_message)

        console.print("    [green]✓ Successfully removed[/green]")
        if is_machine_output():
            emit(path)

        self._close_sessions(worktree)
        if worktree.branch:
            self._delete_branch(worktree.branch)

        return CleanupOutcome.removed(path, worktree.branch)

    def _close_sessions(self, worktree: WorktreeRecord) -> None:
        try:
            closed = self.session_manager.close_worktree_sessions(Path(self.root), worktree.name)
        except SessionError as e:
            logger.warning(f"Could not stop session for {worktree.path}: {e}")
            return

        for name in closed:
            console.print(f"    [green]✓ Stopped session {escape(name)}[/green]")

    def _delete_branch(self, branch: str) -> None:
        try:
            exists = self.git_ops.branch_exists(branch)
        except RepositoryQueryError as e:
            logger.warning(f"Could not check branch {branch}: {e}")
            return

        if not exists:
            logger.debug(f"Branch {branch} already gone")
            return

        success, error_message = self.git_ops.delete_branch(branch, force=True)
        if success:
            console.print(f"    [green]✓ Branch '{escape(branch)}' deleted[/green]")
        else:
            console.print(f"    [yellow]{SYMBOL_WARNING} Could not delete branch '{escape(branch)}': {escape(error_message or '')}[/yellow]")

    @staticmethod
    def _prompt(question: str) -> bool:
        try:
            response = console.input(f"{escape(question)} \\[y/N] ")
        except EOFError:
            return False
        return response.strip().lower() in ("y", "yes")
