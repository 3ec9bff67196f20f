"""Splitting of patch blocks into per-file unified diffs."""

from __future__ import annotations

from enum import Enum

from inbox_threads.exceptions import ParseError
from inbox_threads.utils import iter_lines

# Extended git headers allowed between "diff -" and the first hunk.
GIT_HEADER_PREFIXES = (
    "index ",
    "--- ",
    "+++ ",
    "old mode ",
    "new mode ",
    "deleted file mode ",
    "new file mode ",
    "copy from ",
    "copy to ",
    "rename old ",
    "rename new ",
    "rename from ",
    "rename to ",
    "similarity index ",
    "dissimilarity index ",
    "Binary files ",
)

HUNK_LINE_MARKERS = (" ", "+", "-")


class DiffState(str, Enum):
    """States of the diff splitter."""

    IDLE = "idle"
    HEADER = "header"
    HUNK = "hunk"
    FOOTER = "footer"


class DiffSplitter:
    """Incrementally collects "diff -" delimited sections of a patch."""

    def __init__(self) -> None:
        self.state = DiffState.IDLE
        self.diffs: list[str] = []
        self._current: list[str] | None = None
        self._transitions = {
            DiffState.IDLE: self._on_idle,
            DiffState.HEADER: self._on_header,
            DiffState.HUNK: self._on_hunk,
            DiffState.FOOTER: self._on_footer,
        }

    def feed(self, line: str) -> None:
        """Consume one line (without its terminator).

        Raises:
            ParseError: If a hunk contains a line without a valid marker.
        """
        if line.startswith("diff -"):
            self._flush()
            self._current = [line]
            self.state = DiffState.HEADER
            return
        self._transitions[self.state](line)

    def finish(self) -> list[str]:
        """Emit the open diff, if any, and return all diffs."""
        self._flush()
        return list(self.diffs)

    def _on_idle(self, line: str) -> None:
        # Leading "---" separator, diffstat and cover text before the first diff.
        return

    def _on_header(self, line: str) -> None:
        if line.startswith("@@ "):
            self._accumulate(line)
            self.state = DiffState.HUNK
        elif line.startswith(GIT_HEADER_PREFIXES):
            self._accumulate(line)

    def _on_hunk(self, line: str) -> None:
        if line.startswith("@@ "):
            self._accumulate(line)
        elif line.startswith("-- "):
            self.state = DiffState.FOOTER
        elif line and not line.startswith(HUNK_LINE_MARKERS):
            raise ParseError(f"incorrect line in hunk: {line}")
        else:
            self._accumulate(line)

    def _on_footer(self, line: str) -> None:
        # Signature after the patch; dropped until the next "diff -".
        return

    def _accumulate(self, line: str) -> None:
        if self._current is not None:
            self._current.append(line)

    def _flush(self) -> None:
        if self._current:
            self.diffs.append("\n".join(self._current))
        self._current = None


def split_diff(text: str) -> list[str]:
    """Split a patch into one unified diff text per file.

    Args:
        text: Body of a patch block, possibly holding several file diffs.

    Returns:
        Diff texts in patch order. Empty input gives an empty list.

    Raises:
        ParseError: If a hunk body line is malformed.
    """
    splitter = DiffSplitter()
    for line in iter_lines(text):
        splitter.feed(line)
    return splitter.finish()
