"""Command-line interface for Inbox Threads.

This module provides the main entry point for the CLI application.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import structlog

from inbox_threads import __version__
from inbox_threads.config import Settings, get_settings
from inbox_threads.exceptions import InboxThreadsError
from inbox_threads.index import MemStore
from inbox_threads.render import (
    render_header_line,
    render_message,
    render_thread,
    render_thread_overview,
)

logger = structlog.get_logger()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="inbox-threads",
        description="Browse the threads of a raw mail archive",
    )
    parser.add_argument(
        "--archive",
        type=Path,
        default=None,
        help="Archive directory, one message per file (default: settings archive_dir)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("list", help="List the most recent threads")

    show_parser = subparsers.add_parser("show", help="Show one message")
    show_parser.add_argument("id", help="Message-ID without angle brackets")

    thread_parser = subparsers.add_parser("thread", help="Show the thread containing a message")
    thread_parser.add_argument("id", help="Message-ID of any message in the thread")
    thread_parser.add_argument(
        "--full",
        action="store_true",
        help="Print every message of the thread, not only the overview",
    )

    count_parser = subparsers.add_parser("count", help="Count the messages of a thread")
    count_parser.add_argument("id", help="Message-ID of any message in the thread")

    return parser


def _log_level(settings: Settings) -> int:
    if settings.debug:
        return logging.DEBUG
    return getattr(logging, settings.log_level.upper(), logging.INFO)


def _configure_logging(settings: Settings) -> None:
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(_log_level(settings)),
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
    )


def _cmd_list(store: MemStore) -> int:
    headers = store.list()
    if not headers:
        print("No messages")
        return 0

    for header in headers:
        print(render_header_line(header, store.thread_count(header.id)))
    return 0


def _cmd_show(store: MemStore, args: argparse.Namespace) -> int:
    print(render_message(store.get(args.id)), end="")
    return 0


def _cmd_thread(store: MemStore, args: argparse.Namespace) -> int:
    root = store.thread(args.id)
    if args.full:
        print(render_thread(root), end="")
    else:
        print(render_thread_overview(root), end="")
    return 0


def _cmd_count(store: MemStore, args: argparse.Namespace) -> int:
    print(store.thread_count(args.id))
    return 0


def main(args: list[str] | None = None) -> int:
    """Main entry point for the Inbox Threads CLI.

    Args:
        args: Command-line arguments. If None, uses sys.argv.

    Returns:
        Exit code (0 for success, 1 for lookup or parse failures, 2 for
        usage errors).
    """
    if args is None:
        args = sys.argv[1:]

    parser = _build_parser()
    parsed = parser.parse_args(args)

    settings = get_settings()
    if parsed.archive is not None:
        settings = settings.model_copy(update={"archive_dir": parsed.archive})

    _configure_logging(settings)
    logger.info(
        "inbox_threads_started",
        version=__version__,
        archive=str(settings.archive_dir),
        debug=settings.debug,
    )

    try:
        store = MemStore.from_settings(settings)

        if parsed.command == "list":
            return _cmd_list(store)
        if parsed.command == "show":
            return _cmd_show(store, parsed)
        if parsed.command == "thread":
            return _cmd_thread(store, parsed)
        if parsed.command == "count":
            return _cmd_count(store, parsed)
    except InboxThreadsError as exc:
        logger.error("command_failed", command=parsed.command, error=str(exc))
        print(f"error: {exc}", file=sys.stderr)
        return 1

    logger.error("unknown_command", command=parsed.command)
    return 2


if __name__ == "__main__":
    sys.exit(main())
