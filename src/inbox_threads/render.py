"""Plain-text rendering of headers, messages and threads."""

from __future__ import annotations

from datetime import timezone

import structlog

from inbox_threads.exceptions import ParseError
from inbox_threads.models import BodyBlock, BodyBlockType, Message, MessageHeader, ThreadNode
from inbox_threads.parsing import split_diff

logger = structlog.get_logger()

DATE_FORMAT = "%Y-%m-%d %H:%M:%S UTC"
OVERVIEW_DATE_FORMAT = "%Y-%m-%d %H:%M"


def _utc(header: MessageHeader, fmt: str) -> str:
    return header.date.astimezone(timezone.utc).strftime(fmt)


def render_header_line(header: MessageHeader, thread_count: int | None = None) -> str:
    """One listing line: date, subject and optionally the thread size."""
    line = f"{_utc(header, DATE_FORMAT)}  {header.title or '(no subject)'}"
    if thread_count is not None:
        noun = "message" if thread_count == 1 else "messages"
        line += f"  ({thread_count} {noun})"
    return f"{line}\n    <{header.id}>"


def render_block(block: BodyBlock) -> str:
    """Render one body block.

    Patch blocks are split into per-file diffs separated by a blank line.
    A patch that cannot be split is shown as it was received.
    """
    if block.type != BodyBlockType.PATCH:
        return block.body

    try:
        diffs = split_diff(block.body)
    except ParseError as exc:
        logger.debug("patch_split_failed", error=str(exc))
        return block.body
    if not diffs:
        return block.body
    return "\n\n".join(diffs) + "\n"


def render_message(message: Message) -> str:
    """Render a message with its headers followed by its body blocks."""
    lines = [
        f"From: {message.author}",
        f"To: {message.to}",
    ]
    if message.cc:
        lines.append(f"Cc: {message.cc}")
    lines += [
        f"Subject: {message.title}",
        f"Date: {_utc(message, DATE_FORMAT)}",
        f"Message-ID: <{message.id}>",
    ]
    if message.reply_to:
        lines.append(f"In-Reply-To: <{message.reply_to}>")
    if message.signed_off:
        lines.append("Signed-off: yes")

    head = "\n".join(lines) + "\n\n"
    return head + "".join(render_block(b) for b in message.body)


def render_thread_overview(root: ThreadNode) -> str:
    """Render a thread as one indented line per message."""
    lines = [f"Thread overview: {root.size} messages"]
    for node in root.walk():
        msg = node.message
        author = msg.author.name or msg.author.address
        indent = "  " * node.level
        lines.append(f"{_utc(msg, OVERVIEW_DATE_FORMAT)} {indent}{msg.title} [{author}]")
    return "\n".join(lines) + "\n"


def render_thread(root: ThreadNode) -> str:
    """Render every message of a thread in overview order, then the overview."""
    parts = []
    for node in root.walk():
        parts.append(render_message(node.message))
        parts.append("-" * 72 + "\n")
    parts.append(render_thread_overview(root))
    return "".join(parts)
