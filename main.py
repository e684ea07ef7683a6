#!/usr/bin/env python3
"""
gtdnota - Getting Things Done item store

Command-line entry point. Each subcommand maps to one GtdService operation
on the configured TOML document.
"""

import argparse
import logging
import sys

from gtdnota.config import config
from gtdnota.errors import GtdError
from gtdnota.service import GtdService
from gtdnota.storage import Storage
from gtdnota.versioning import VersionManager


def setup_logging():
    """Configure logging for the application."""
    level = getattr(logging, config.log_level.upper(), logging.WARNING)
    format_str = config.log_format
    log_file = config.log_filename

    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(log_file)
        ]
    )


def parse_arguments(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="gtdnota - Getting Things Done item store",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py inbox call-john "Call John"                 # Capture a task
  python main.py inbox Office "Office" --status context       # Create a context
  python main.py list --status next_action --keyword report   # Review next actions
  python main.py change-status call-john done                 # Complete a task
  python main.py --sync-git empty-trash                       # Purge trash and push
        """
    )

    parser.add_argument(
        "--file",
        type=str,
        default=config.storage_file,
        help=f"Path to the TOML document (default: {config.storage_file})"
    )

    parser.add_argument(
        "--sync-git",
        action="store_true",
        default=config.git_sync,
        help="Commit and push the document after every change"
    )

    parser.add_argument(
        "--version",
        action="version",
        version="gtdnota 0.1.0"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    inbox = subparsers.add_parser("inbox", help="Capture a new task, project or context")
    inbox.add_argument("id", help="Unique id; use '-' to generate one")
    inbox.add_argument("title", help="Short description")
    inbox.add_argument("--status", default="inbox", help="Initial status (default: inbox)")
    inbox.add_argument("--project", help="Parent project id")
    inbox.add_argument("--context", help="Context id")
    inbox.add_argument("--notes", help="Notes in Markdown")
    inbox.add_argument("--start-date", help="YYYY-MM-DD, required for calendar")
    inbox.add_argument("--recurrence", choices=["daily", "weekly", "monthly", "yearly"])
    inbox.add_argument("--recurrence-config", help='e.g. "Monday,Friday", "1,15" or "12-25"')

    list_parser = subparsers.add_parser("list", help="List notas")
    list_parser.add_argument("--status", help="Only notas with this status")
    list_parser.add_argument("--date", help="Hide calendar notas starting after this date")
    list_parser.add_argument("--exclude-notes", action="store_true", help="Leave notes out")
    list_parser.add_argument("--keyword", help="Search id, title and notes")
    list_parser.add_argument("--project", help="Only notas in this project")
    list_parser.add_argument("--context", help="Only notas in this context")

    update = subparsers.add_parser("update", help="Change fields of a nota ('' clears a field)")
    update.add_argument("id")
    update.add_argument("--title")
    update.add_argument("--status")
    update.add_argument("--project")
    update.add_argument("--context")
    update.add_argument("--notes")
    update.add_argument("--start-date")

    change = subparsers.add_parser("change-status", help="Move notas to a new status")
    change.add_argument("ids", nargs="+", help="One or more nota ids")
    change.add_argument("new_status")
    change.add_argument("--start-date", help="YYYY-MM-DD, required for calendar")

    subparsers.add_parser("empty-trash", help="Permanently delete trashed notas")

    return parser.parse_args(argv)


def run_command(service: GtdService, args) -> str:
    """Dispatch parsed arguments to the matching service operation."""
    if args.command == "inbox":
        return service.inbox(
            None if args.id == "-" else args.id,
            args.title,
            status=args.status,
            project=args.project,
            context=args.context,
            notes=args.notes,
            start_date=args.start_date,
            recurrence=args.recurrence,
            recurrence_config=args.recurrence_config,
        )
    if args.command == "list":
        return service.list_items(
            status=args.status,
            date=args.date,
            exclude_notes=args.exclude_notes,
            keyword=args.keyword,
            project=args.project,
            context=args.context,
        )
    if args.command == "update":
        return service.update(
            args.id,
            title=args.title,
            status=args.status,
            project=args.project,
            context=args.context,
            notes=args.notes,
            start_date=args.start_date,
        )
    if args.command == "change-status":
        return service.change_status(args.ids, args.new_status, start_date=args.start_date)
    if args.command == "empty-trash":
        return service.empty_trash()
    raise ValueError(f"Unknown command: {args.command}")


def main(argv=None):
    """Main entry point."""
    args = parse_arguments(argv)
    setup_logging()

    version_manager = VersionManager.from_config(args.file, config) if args.sync_git else None
    storage = Storage(args.file, sync_git=args.sync_git, version_manager=version_manager)

    try:
        service = GtdService(storage)
        print(run_command(service, args))

    except GtdError as e:
        logging.info(f"{args.command} failed: {e}")
        print(e)
        sys.exit(1)

    finally:
        storage.shutdown()


if __name__ == "__main__":
    main()
