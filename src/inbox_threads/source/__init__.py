"""Raw message sources.

A source enumerates the raw messages of an archive and fetches single
messages again by Message-ID. Sources do no header validation beyond
recognising a Message-ID.
"""

from .base import MemorySource, RawMessage, RawMessageSource, parse_raw_message
from .directory import DirectorySource

__all__ = [
    "DirectorySource",
    "MemorySource",
    "RawMessage",
    "RawMessageSource",
    "parse_raw_message",
]
