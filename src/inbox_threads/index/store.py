"""In-memory query store over a raw message source.

Only headers and the reply graph are kept in memory. Message bodies are
re-read from the source and parsed again on every query that needs them.
"""

from __future__ import annotations

import structlog

from inbox_threads.config import Settings
from inbox_threads.exceptions import NotFoundError, ParseError
from inbox_threads.index.graph import ThreadIndex
from inbox_threads.models import Message, MessageHeader, ThreadNode
from inbox_threads.parsing import extract_header, parse_message
from inbox_threads.source import DirectorySource, RawMessageSource
from inbox_threads.utils import Deadline

logger = structlog.get_logger()

LIST_PAGE_SIZE = 20


class MemStore:
    """Read-only store answering listing, message and thread queries.

    The index is built once, in the constructor, from a full scan of the
    source. Messages whose headers cannot be parsed are skipped and logged
    rather than failing the whole archive.
    """

    def __init__(
        self,
        source: RawMessageSource,
        *,
        page_size: int = LIST_PAGE_SIZE,
        timeout: float | None = None,
    ) -> None:
        """Scan the source and build the index.

        Args:
            source: Backend holding the raw messages.
            page_size: Maximum number of roots returned by :meth:`list`.
            timeout: Seconds allowed for the scan, also the default for
                :meth:`get` and :meth:`thread`. None disables deadlines.

        Raises:
            SourceError: If the source fails while being scanned.
            DeadlineExceededError: If the scan takes longer than ``timeout``.
        """
        self._source = source
        self._page_size = page_size
        self._timeout = timeout
        self._index = self._build_index(Deadline(timeout))
        self._roots = self._index.roots(page_size)

    @classmethod
    def from_settings(cls, settings: Settings) -> MemStore:
        """Create a store over the directory archive described by ``settings``."""
        source = DirectorySource(settings.archive_dir, settings.ignored_dirs)
        return cls(source, page_size=settings.list_page_size, timeout=settings.source_timeout)

    @property
    def index(self) -> ThreadIndex:
        return self._index

    def _build_index(self, deadline: Deadline) -> ThreadIndex:
        headers: list[MessageHeader] = []
        skipped = 0
        for raw in self._source.all():
            deadline.check("archive scan")
            try:
                header = extract_header(raw.headers)
            except ParseError as exc:
                skipped += 1
                logger.warning("message_skipped", location=raw.location, error=str(exc))
                continue
            if not header.id:
                continue
            headers.append(header)

        index = ThreadIndex(headers)
        logger.info("archive_scan_complete", indexed=len(index), skipped=skipped)
        return index

    def list(self) -> list[MessageHeader]:
        """Return the most recent thread roots, newest first."""
        return list(self._roots)

    def get(self, message_id: str, timeout: float | None = None) -> Message:
        """Return the fully parsed message for ``message_id``.

        Raises:
            NotFoundError: If the message is not indexed.
            ParseError: If the message can no longer be parsed.
            SourceError: If the source fails to read the message.
            DeadlineExceededError: If the read does not start before the deadline.
        """
        if message_id not in self._index:
            raise NotFoundError(f"message not found: {message_id!r}")
        return self._hydrate(message_id, self._deadline(timeout))

    def thread_count(self, message_id: str) -> int:
        """Return the number of messages in the thread containing ``message_id``.

        Raises:
            NotFoundError: If the message is not indexed.
            CycleDetectedError: If the reply chain loops.
        """
        head = self._index.thread_head(message_id)
        return sum(1 for _ in self._index.descendants(head.id))

    def thread(self, message_id: str, timeout: float | None = None) -> ThreadNode:
        """Return the whole thread containing ``message_id``, from its root.

        Raises:
            NotFoundError: If the message is not indexed.
            CycleDetectedError: If the reply chain loops.
            ParseError: If any message of the thread can no longer be parsed.
            SourceError: If the source fails to read a message.
            DeadlineExceededError: If hydration runs past the deadline.
        """
        deadline = self._deadline(timeout)
        head = self._index.thread_head(message_id)

        order = list(self._index.descendants(head.id))
        levels = {head.id: 0}
        messages: dict[str, Message] = {}
        for node in order:
            if node.parent is not None and node.id != head.id:
                levels[node.id] = levels[node.parent] + 1
            messages[node.id] = self._hydrate(node.id, deadline)

        # Reverse pre-order builds every child before its parent.
        built: dict[str, ThreadNode] = {}
        for node in reversed(order):
            built[node.id] = ThreadNode(
                message=messages[node.id],
                children=[built[c] for c in node.children],
                level=levels[node.id],
            )
        return built[head.id]

    def _deadline(self, timeout: float | None) -> Deadline:
        return Deadline(timeout if timeout is not None else self._timeout)

    def _hydrate(self, message_id: str, deadline: Deadline) -> Message:
        deadline.check(f"reading message {message_id!r}")
        raw = self._source.one(message_id)
        logger.debug("message_hydrated", message_id=message_id, location=raw.location)
        return parse_message(raw.headers, raw.body_text())
