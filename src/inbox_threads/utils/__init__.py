"""Utility functions for Inbox Threads."""

from __future__ import annotations

import time
from collections.abc import Iterator

from inbox_threads.exceptions import DeadlineExceededError


def iter_lines(text: str) -> Iterator[str]:
    """Iterate over the lines of ``text`` without their line terminators.

    Lines are split on "\\n" only, a single trailing "\\r" is dropped and a
    final terminator does not produce an extra empty line.

    Args:
        text: Text to split.

    Yields:
        Each line of the text.
    """
    if not text:
        return

    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()

    for line in lines:
        if line.endswith("\r"):
            line = line[:-1]
        yield line


class Deadline:
    """A point in monotonic time after which work must stop."""

    def __init__(self, timeout: float | None = None) -> None:
        """Create a deadline.

        Args:
            timeout: Seconds from now. None means the deadline never expires.
        """
        self.timeout = timeout
        self._expires_at = None if timeout is None else time.monotonic() + timeout

    @property
    def expired(self) -> bool:
        return self._expires_at is not None and time.monotonic() >= self._expires_at

    def check(self, operation: str) -> None:
        """Raise if the deadline has passed.

        Args:
            operation: Name of the operation, used in the error message.

        Raises:
            DeadlineExceededError: If the deadline has passed.
        """
        if self.expired:
            raise DeadlineExceededError(f"{operation} exceeded its {self.timeout}s deadline")
