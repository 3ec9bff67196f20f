"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from email.utils import format_datetime

import pytest
import structlog

BASE_DATE = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


def raw_message(
    message_id: str | None,
    *,
    subject: str = "Test subject",
    sender: str = "Alice Example <alice@example.com>",
    date: datetime | str | None = BASE_DATE,
    to: str | None = "Bob Example <bob@example.com>",
    cc: str | None = None,
    in_reply_to: str | None = None,
    body: str = "Hello\n",
) -> str:
    """Build the raw RFC 5322 text of a simple message."""
    lines = []
    if message_id is not None:
        lines.append(f"Message-ID: <{message_id}>")
    if in_reply_to is not None:
        lines.append(f"In-Reply-To: <{in_reply_to}>")
    lines.append(f"Subject: {subject}")
    lines.append(f"From: {sender}")
    if date is not None:
        value = format_datetime(date) if isinstance(date, datetime) else date
        lines.append(f"Date: {value}")
    if to is not None:
        lines.append(f"To: {to}")
    if cc is not None:
        lines.append(f"Cc: {cc}")
    lines.append("Content-Type: text/plain; charset=utf-8")
    return "\n".join(lines) + "\n\n" + body


@pytest.fixture
def make_raw() -> Callable[..., str]:
    """Provide the raw message builder."""
    return raw_message


@pytest.fixture
def at() -> Callable[[int], datetime]:
    """Provide a helper returning BASE_DATE shifted by N minutes."""

    def _at(minutes: int) -> datetime:
        return BASE_DATE + timedelta(minutes=minutes)

    return _at


@pytest.fixture
def sample_patch() -> str:
    """Provide a two-file patch as sent by git format-patch."""
    return (
        "---\n"
        " a.txt | 2 +-\n"
        " b.txt | 1 +\n"
        " 2 files changed, 2 insertions(+), 1 deletion(-)\n"
        "\n"
        "diff --git a/a.txt b/a.txt\n"
        "index 1111111..2222222 100644\n"
        "--- a/a.txt\n"
        "+++ b/a.txt\n"
        "@@ -1,2 +1,2 @@\n"
        " first\n"
        "-second\n"
        "+second line\n"
        "diff --git a/b.txt b/b.txt\n"
        "new file mode 100644\n"
        "index 0000000..3333333\n"
        "--- /dev/null\n"
        "+++ b/b.txt\n"
        "@@ -0,0 +1 @@\n"
        "+hello\n"
        "-- \n"
        "2.43.0\n"
    )


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo logging configuration done by the CLI."""
    yield
    structlog.reset_defaults()
