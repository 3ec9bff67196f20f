"""Header extraction for raw archived messages.

Turns the header fields of one raw message into a validated
:class:`~inbox_threads.models.MessageHeader`.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import datetime, timezone
from email.errors import HeaderParseError
from email.header import decode_header, make_header
from email.utils import getaddresses, parsedate_to_datetime
from typing import Any, Protocol

import structlog

from inbox_threads.exceptions import ParseError
from inbox_threads.models import Address, MessageHeader

logger = structlog.get_logger()

# RFC 5322 group: "display-name: [mailbox-list];"
_GROUP_RE = re.compile(r":[^;]*;")


class HeaderFields(Protocol):
    """Anything exposing raw header (name, value) pairs, e.g. email.message.Message."""

    def items(self) -> Iterable[tuple[str, Any]]: ...


def _unfold(value: str) -> str:
    return " ".join(line.strip() for line in value.splitlines()).strip()


def _header_map(fields: HeaderFields) -> dict[str, str]:
    result: dict[str, str] = {}
    for name, value in fields.items():
        if value is None:
            continue
        # Duplicated headers happen in old archives; keep the first.
        result.setdefault(str(name).lower(), _unfold(str(value)))
    return result


def normalize_message_id(value: str | None) -> str:
    """Strip the angle brackets around a Message-ID style identifier.

    Args:
        value: Raw header value, e.g. ``<1234@example.com>``.

    Returns:
        The bare identifier, or an empty string when the value is missing,
        too short, or not wrapped in angle brackets.
    """
    if not value:
        return ""
    value = value.strip()
    if len(value) > 3 and value[0] == "<" and value[-1] == ">":
        return value[1:-1]
    return ""


def decode_words(value: str) -> str:
    """Decode RFC 2047 encoded words, keeping the raw value when that fails."""
    if "=?" not in value:
        return value
    try:
        return str(make_header(decode_header(value)))
    except (HeaderParseError, LookupError, UnicodeDecodeError):
        return value


def _parse_date(value: str | None) -> datetime:
    if not value:
        raise ParseError("missing Date header")
    try:
        date = parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError, OverflowError) as exc:
        raise ParseError(f"invalid Date header: {value!r}") from exc
    if date is None:
        raise ParseError(f"invalid Date header: {value!r}")
    if date.tzinfo is None:
        # "-0000" means no zone information; read it as UTC.
        date = date.replace(tzinfo=timezone.utc)
    return date


def parse_address_list(value: str) -> list[Address]:
    """Parse an address list header value.

    Groups are flattened to their members, so an empty group such as
    ``undisclosed-recipients:;`` gives an empty list.

    Raises:
        ParseError: If the value holds no address or any entry lacks a
            mailbox of the form ``local@domain``.
    """
    pairs = getaddresses([value])
    if _GROUP_RE.search(value):
        # Group names and empty groups come back without a mailbox.
        return [
            _to_address(value, name, addr)
            for name, addr in pairs
            if addr and ":" not in addr
        ]
    if not pairs:
        raise ParseError(f"no address in {value!r}")

    return [_to_address(value, name, addr) for name, addr in pairs]


def _to_address(value: str, name: str, addr: str) -> Address:
    if not addr or "@" not in addr or addr.startswith("@") or addr.endswith("@"):
        raise ParseError(f"invalid address in {value!r}")
    return Address(name=decode_words(name), address=addr)


def parse_address(value: str | None) -> Address:
    """Parse a header value holding exactly one address.

    Raises:
        ParseError: If the value is missing or is not a single valid address.
    """
    if not value:
        raise ParseError("missing address")
    addresses = parse_address_list(value)
    if len(addresses) != 1:
        raise ParseError(f"expected a single address in {value!r}")
    return addresses[0]


def _display_names(addresses: list[Address]) -> str:
    return ", ".join(a.name for a in addresses)


def extract_header(fields: HeaderFields) -> MessageHeader:
    """Convert the header fields of a raw message to a MessageHeader.

    Date and From are mandatory, To must parse when present. A malformed Cc
    is logged and dropped instead of failing the message.

    Args:
        fields: Raw header fields, e.g. an ``email.message.Message``.

    Returns:
        MessageHeader: Parsed header. Its ``id`` is empty when the message
        carries no valid Message-ID.

    Raises:
        ParseError: If Date, From or To cannot be parsed.
    """
    hm = _header_map(fields)
    message_id = normalize_message_id(hm.get("message-id"))

    date = _parse_date(hm.get("date"))
    author = parse_address(hm.get("from"))

    to = ""
    if hm.get("to"):
        to = _display_names(parse_address_list(hm["to"]))

    cc = ""
    if hm.get("cc"):
        try:
            cc = _display_names(parse_address_list(hm["cc"]))
        except ParseError:
            logger.warning("cc_header_unparsable", message_id=message_id, cc=hm["cc"])

    return MessageHeader(
        id=message_id,
        reply_to=normalize_message_id(hm.get("in-reply-to")),
        title=decode_words(hm.get("subject") or ""),
        author=author,
        date=date,
        to=to,
        cc=cc,
    )
