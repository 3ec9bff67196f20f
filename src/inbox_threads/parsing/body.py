"""Body segmentation into plain, quoted and patch blocks.

The segmenter is a line-driven state machine. It starts in ``PLAIN``; a
quoted line switches to ``IN_QUOTES`` until the first unquoted line, and a
patch break switches to ``IN_PATCH`` for the rest of the message.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from inbox_threads.models import BodyBlock, BodyBlockType
from inbox_threads.utils import iter_lines

SIGNED_OFF_PREFIX = "Signed-off-by:"
QUOTE_PREFIX = ">"


class SegmenterState(str, Enum):
    """States of the body segmenter."""

    PLAIN = "plain"
    IN_QUOTES = "in_quotes"
    IN_PATCH = "in_patch"


@dataclass(frozen=True)
class SegmentedBody:
    """Result of segmenting one message body."""

    blocks: list[BodyBlock]
    signed_off: bool


def is_patch_break(line: str) -> bool:
    """Return whether ``line`` starts the patch part of a message.

    A patch starts at a ``diff -`` or ``Index: `` line, at a ``--- <file>``
    line, or at a bare ``---`` separator optionally followed by spaces.
    """
    if line.startswith("diff -") or line.startswith("Index: "):
        return True

    if len(line) < 3 or not line.startswith("---"):
        return False

    # "--- <filename>" starts a patch without a diff header.
    if len(line) >= 5 and line[3] == " " and line[4] != " ":
        return True

    # "---" followed only by spaces is a manual separator.
    return all(c == " " for c in line[3:])


class BodySegmenter:
    """Incrementally splits body lines into typed blocks."""

    def __init__(self) -> None:
        self.state = SegmenterState.PLAIN
        self.signed_off = False
        self._blocks: list[BodyBlock] = []
        self._type = BodyBlockType.PLAIN
        self._lines: list[str] = []
        self._transitions = {
            SegmenterState.PLAIN: self._on_plain,
            SegmenterState.IN_QUOTES: self._on_quotes,
            SegmenterState.IN_PATCH: self._on_patch,
        }

    def feed(self, line: str) -> None:
        """Consume one line (without its terminator)."""
        self._transitions[self.state](line)

    def finish(self) -> SegmentedBody:
        """Close the open block and return everything collected so far."""
        self._close()
        return SegmentedBody(blocks=list(self._blocks), signed_off=self.signed_off)

    def _on_plain(self, line: str) -> None:
        if line.startswith(SIGNED_OFF_PREFIX):
            # Not checked against the author; the trailer line is consumed.
            self.signed_off = True
            return
        if line.startswith(QUOTE_PREFIX):
            self._open(BodyBlockType.QUOTES, SegmenterState.IN_QUOTES)
        elif is_patch_break(line):
            self._open(BodyBlockType.PATCH, SegmenterState.IN_PATCH)
        self._lines.append(line)

    def _on_quotes(self, line: str) -> None:
        if not line.startswith(QUOTE_PREFIX):
            self._open(BodyBlockType.PLAIN, SegmenterState.PLAIN)
        self._lines.append(line)

    def _on_patch(self, line: str) -> None:
        # There is no end-of-patch detection: trailing text stays in the patch.
        self._lines.append(line)

    def _open(self, block_type: BodyBlockType, state: SegmenterState) -> None:
        self._close()
        self._type = block_type
        self.state = state

    def _close(self) -> None:
        if self._lines:
            body = "".join(line + "\n" for line in self._lines)
            self._blocks.append(BodyBlock(type=self._type, body=body))
        self._lines = []


def segment_body(text: str) -> SegmentedBody:
    """Split a message body into ordered plain, quoted and patch blocks.

    Args:
        text: Decoded message body.

    Returns:
        SegmentedBody: Blocks in body order and the Signed-off-by flag.
    """
    segmenter = BodySegmenter()
    for line in iter_lines(text):
        segmenter.feed(line)
    return segmenter.finish()
