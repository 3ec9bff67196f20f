"""Parsing of raw archived messages into headers, body blocks and diffs."""

from __future__ import annotations

from inbox_threads.models import Message
from inbox_threads.parsing.body import SegmentedBody, is_patch_break, segment_body
from inbox_threads.parsing.diff import split_diff
from inbox_threads.parsing.headers import (
    HeaderFields,
    extract_header,
    normalize_message_id,
    parse_address,
    parse_address_list,
)


def parse_message(fields: HeaderFields, body: str) -> Message:
    """Build a fully hydrated Message from raw header fields and body text.

    Raises:
        ParseError: If the headers cannot be parsed.
    """
    header = extract_header(fields)
    segmented = segment_body(body)
    return Message(**dict(header), body=segmented.blocks, signed_off=segmented.signed_off)


__all__ = [
    "HeaderFields",
    "SegmentedBody",
    "extract_header",
    "is_patch_break",
    "normalize_message_id",
    "parse_address",
    "parse_address_list",
    "parse_message",
    "segment_body",
    "split_diff",
]
