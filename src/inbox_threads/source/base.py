"""Raw message source protocol and the in-memory implementation."""

from __future__ import annotations

import email
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from email.message import Message as EmailMessage
from email.policy import compat32
from typing import Protocol

import structlog

from inbox_threads.exceptions import NotFoundError
from inbox_threads.parsing.headers import normalize_message_id

logger = structlog.get_logger()


@dataclass(frozen=True)
class RawMessage:
    """One unparsed archived message and where it came from."""

    message: EmailMessage
    location: str

    @property
    def message_id(self) -> str:
        return normalize_message_id(self.message.get("Message-ID"))

    @property
    def headers(self) -> EmailMessage:
        """Header fields, exposed as (name, value) pairs through ``items()``."""
        return self.message

    def body_text(self) -> str:
        """Return the decoded text of the first text/plain part.

        Transfer encodings are undone and the declared charset is used, with
        undecodable bytes replaced. Messages without a text part give "".
        """
        for part in self.message.walk():
            if part.get_content_type() != "text/plain":
                continue
            payload = part.get_payload(decode=True)
            if not isinstance(payload, bytes):
                return ""
            charset = part.get_content_charset() or "utf-8"
            try:
                text = payload.decode(charset, "replace")
            except LookupError:
                text = payload.decode("utf-8", "replace")
            # No-break spaces break quote and diff markers.
            return text.replace("\xa0", " ")
        return ""


def parse_raw_message(data: bytes | str, location: str) -> RawMessage:
    """Parse raw RFC 5322 text into a RawMessage."""
    if isinstance(data, str):
        data = data.encode("utf-8", "surrogateescape")
    return RawMessage(message=email.message_from_bytes(data, policy=compat32), location=location)


class RawMessageSource(Protocol):
    """Backend that stores the raw messages of an archive."""

    def all(self) -> Iterator[RawMessage]:
        """Yield every message carrying a valid Message-ID.

        Raises:
            SourceError: If the backend cannot be read.
        """
        ...

    def one(self, message_id: str) -> RawMessage:
        """Return the message with the given Message-ID.

        Raises:
            NotFoundError: If no such message exists.
            SourceError: If the backend cannot be read.
        """
        ...


class MemorySource:
    """Raw message source over messages held in memory."""

    def __init__(self, messages: Iterable[bytes | str] = ()) -> None:
        self._messages: dict[str, RawMessage] = {}
        for i, data in enumerate(messages):
            self.add(data, location=f"memory:{i}")

    def add(self, data: bytes | str, location: str | None = None) -> str:
        """Add a raw message and return its Message-ID.

        Messages without a valid Message-ID, or whose Message-ID was already
        added, are ignored and an empty string is returned.
        """
        raw = parse_raw_message(data, location or f"memory:{len(self._messages)}")
        message_id = raw.message_id
        if not message_id:
            logger.debug("message_without_id_skipped", location=raw.location)
            return ""
        if message_id in self._messages:
            logger.warning(
                "duplicate_message_id_skipped",
                message_id=message_id,
                location=raw.location,
                kept=self._messages[message_id].location,
            )
            return ""
        self._messages[message_id] = raw
        return message_id

    def __len__(self) -> int:
        return len(self._messages)

    def all(self) -> Iterator[RawMessage]:
        yield from list(self._messages.values())

    def one(self, message_id: str) -> RawMessage:
        try:
            return self._messages[message_id]
        except KeyError:
            raise NotFoundError(f"message not found: {message_id!r}") from None
