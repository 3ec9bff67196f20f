"""Custom exceptions for Inbox Threads."""


class InboxThreadsError(Exception):
    """Base exception for all Inbox Threads errors."""


class ParseError(InboxThreadsError):
    """Exception raised when a message header, body or diff is malformed."""


class NotFoundError(InboxThreadsError):
    """Exception raised when a message identifier is not known."""


class SourceError(InboxThreadsError):
    """Exception raised when the raw message source fails to read."""


class CycleDetectedError(InboxThreadsError):
    """Exception raised when a reply chain loops back on itself."""


class DeadlineExceededError(InboxThreadsError):
    """Exception raised when an operation runs past its deadline."""


class ConfigurationError(InboxThreadsError):
    """Exception raised for configuration related errors."""
