"""Command-line entry point for workbloom"""

import os
import sys

from rich.markup import escape

from workbloom.cli.args import get_mode, parse_args
from workbloom.config import Config
from workbloom.core import WorktreeCleaner
from workbloom.output import console, set_machine_output
from workbloom.services.session_service import TmuxSessionManager, set_session_manager
from workbloom.utils.logging import setup_logging


def main(argv=None) -> int:
    """Main entry point for the application."""
    parsed_args = None
    try:
        parsed_args = parse_args(argv)

        # Setup logging before anything talks to git
        setup_logging(verbose=parsed_args.verbose, debug=parsed_args.debug)
        set_machine_output(parsed_args.machine_output)

        config = Config(
            main_branch=parsed_args.main_branch,
            remote_name=parsed_args.remote,
            protected_branches=parsed_args.protected,
            ignore_patterns=parsed_args.ignore,
            stale_days=parsed_args.stale_days,
            min_worktree_age_hours=parsed_args.min_age_hours,
            force=parsed_args.force,
            exclude_branch=parsed_args.exclude,
            manage_sessions=not parsed_args.no_sessions,
            machine_output=parsed_args.machine_output,
            verbose=parsed_args.verbose,
            debug=parsed_args.debug,
        )

        if parsed_args.debug:
            console.print("[yellow]Debug mode enabled[/yellow]")
            console.print("[yellow]Configuration:[/yellow]")
            for key, value in config.to_dict().items():
                console.print(f"  {key}: {value}")

        if config.manage_sessions:
            set_session_manager(TmuxSessionManager())

        cleaner = WorktreeCleaner(os.getcwd(), config)
        cleaner.run(get_mode(parsed_args), pattern=parsed_args.pattern)
        return 0
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        return 1
    except Exception as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        if parsed_args is not None and parsed_args.debug:
            console.print_exception()
        return 1


if __name__ == "__main__":
    sys.exit(main())
