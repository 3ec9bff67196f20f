"""In-memory reply graph over message headers.

The graph is built once from every indexable header and never mutated
afterwards, so it can be shared by concurrent readers.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

import structlog

from inbox_threads.exceptions import CycleDetectedError, NotFoundError
from inbox_threads.models import MessageHeader

logger = structlog.get_logger()


@dataclass(frozen=True)
class GraphNode:
    """Position of one message in the reply graph."""

    id: str
    parent: str | None
    children: tuple[str, ...] = ()


class ThreadIndex:
    """Message headers and the reply graph that links them.

    A message whose In-Reply-To is empty or points to an unknown message is
    a thread root. Children are ordered oldest first, roots newest first.
    """

    def __init__(self, headers: Iterable[MessageHeader]) -> None:
        """Build the index.

        Headers with an empty ID are ignored. When two headers share an ID
        the first one wins.

        Args:
            headers: Parsed headers of the whole archive.
        """
        self._headers: dict[str, MessageHeader] = {}
        for header in headers:
            if not header.id:
                continue
            if header.id in self._headers:
                logger.warning("duplicate_message_id_ignored", message_id=header.id)
                continue
            self._headers[header.id] = header

        parents: dict[str, str | None] = {}
        children: dict[str, list[str]] = {message_id: [] for message_id in self._headers}
        for message_id, header in self._headers.items():
            parent = header.reply_to if header.reply_to in self._headers else None
            if header.reply_to and parent is None:
                logger.debug("dangling_reply_to", message_id=message_id, reply_to=header.reply_to)
            parents[message_id] = parent
            if parent is not None:
                children[parent].append(message_id)

        self._nodes: dict[str, GraphNode] = {}
        for message_id, child_ids in children.items():
            # sort() is stable: equal dates keep archive order.
            child_ids.sort(key=lambda child: self._headers[child].date)
            self._nodes[message_id] = GraphNode(
                id=message_id,
                parent=parents[message_id],
                children=tuple(child_ids),
            )

        self._roots = sorted(
            (self._headers[n.id] for n in self._nodes.values() if n.parent is None),
            key=lambda h: h.date,
            reverse=True,
        )

        logger.debug("index_ready", messages=len(self._nodes), roots=len(self._roots))

    def __len__(self) -> int:
        return len(self._headers)

    def __contains__(self, message_id: object) -> bool:
        return message_id in self._headers

    def header(self, message_id: str) -> MessageHeader:
        """Return the indexed header for ``message_id``.

        Raises:
            NotFoundError: If the ID is not indexed.
        """
        try:
            return self._headers[message_id]
        except KeyError:
            raise NotFoundError(f"message not found: {message_id!r}") from None

    def node(self, message_id: str) -> GraphNode:
        """Return the graph node for ``message_id``.

        Raises:
            NotFoundError: If the ID is not indexed.
        """
        try:
            return self._nodes[message_id]
        except KeyError:
            raise NotFoundError(f"message not found: {message_id!r}") from None

    def roots(self, limit: int | None = None) -> list[MessageHeader]:
        """Return thread roots, newest first, at most ``limit`` of them."""
        if limit is None:
            return list(self._roots)
        return self._roots[:limit]

    def thread_head(self, message_id: str) -> GraphNode:
        """Walk up the parent chain of ``message_id`` to its thread root.

        Raises:
            NotFoundError: If the ID is not indexed.
            CycleDetectedError: If the parent chain loops.
        """
        node = self.node(message_id)
        seen = {node.id}
        while node.parent is not None:
            node = self._nodes[node.parent]
            if node.id in seen:
                raise CycleDetectedError(f"reply chain of {message_id!r} loops at {node.id!r}")
            seen.add(node.id)
        return node

    def descendants(self, message_id: str) -> Iterator[GraphNode]:
        """Yield the node and its subtree, parents first, replies oldest first.

        Raises:
            NotFoundError: If the ID is not indexed.
            CycleDetectedError: If a node is reached twice.
        """
        stack = [self.node(message_id)]
        seen: set[str] = set()
        while stack:
            node = stack.pop()
            if node.id in seen:
                raise CycleDetectedError(f"reply graph below {message_id!r} loops at {node.id!r}")
            seen.add(node.id)
            yield node
            stack.extend(self._nodes[c] for c in reversed(node.children))
