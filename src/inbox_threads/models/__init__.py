"""Data models for Inbox Threads.

This module contains Pydantic models for parsed messages and thread trees.
"""

from __future__ import annotations

from collections.abc import Iterator
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from inbox_threads.models.message_header import Address, MessageHeader


class BodyBlockType(str, Enum):
    """Kind of content held by a body block."""

    PLAIN = "plain"
    QUOTES = "quotes"
    PATCH = "patch"


class BodyBlock(BaseModel):
    """A contiguous run of body lines of the same kind."""

    model_config = ConfigDict(frozen=True)

    type: BodyBlockType = Field(default=BodyBlockType.PLAIN, description="Block kind")
    body: str = Field(default="", description="Raw text including line breaks")


class Message(MessageHeader):
    """A message header together with its segmented body."""

    body: list[BodyBlock] = Field(default_factory=list, description="Ordered body blocks")
    signed_off: bool = Field(
        default=False,
        description="Whether the body carries a Signed-off-by trailer",
    )

    @property
    def header(self) -> MessageHeader:
        """Return the header-only view of this message."""
        return MessageHeader(**self.model_dump(include=set(MessageHeader.model_fields)))

    def blocks_of(self, block_type: BodyBlockType) -> list[BodyBlock]:
        """Return the blocks of a given type, in body order."""
        return [b for b in self.body if b.type == block_type]


class ThreadNode(BaseModel):
    """A hydrated message placed in its reply tree."""

    message: Message = Field(description="The hydrated message")
    children: list[ThreadNode] = Field(
        default_factory=list,
        description="Direct replies, oldest first",
    )
    level: int = Field(default=0, ge=0, description="Depth from the thread root")

    def walk(self) -> Iterator[ThreadNode]:
        """Yield this node and its descendants, parents before children.

        Children are visited in the order they are stored (Date ascending).
        """
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    @property
    def size(self) -> int:
        """Number of messages in this subtree, including this one."""
        return sum(1 for _ in self.walk())


ThreadNode.model_rebuild()


__all__ = [
    "Address",
    "BodyBlock",
    "BodyBlockType",
    "Message",
    "MessageHeader",
    "ThreadNode",
]
