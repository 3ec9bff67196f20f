"""Header-only message metadata model.

This model intentionally excludes the message body so that the thread index
stays small: bodies are re-read from the archive whenever a query needs them.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class Address(BaseModel):
    """A single mail address with its display name."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(default="", description="Display name, may be empty")
    address: str = Field(description="Mailbox address (local@domain)")

    def __str__(self) -> str:
        if self.name:
            return f"{self.name} <{self.address}>"
        return f"<{self.address}>"


class MessageHeader(BaseModel):
    """Structured headers of one archived message."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Message-ID without angle brackets")
    reply_to: str = Field(default="", description="Parent Message-ID, empty for thread starters")
    title: str = Field(default="", description="Subject header")
    author: Address = Field(description="Parsed From header")
    date: datetime = Field(description="Parsed Date header (always timezone aware)")

    # Display names only, joined with ", ".
    to: str = Field(default="", description="Display names of To recipients")
    cc: str = Field(default="", description="Display names of Cc recipients")
