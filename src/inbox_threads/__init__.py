"""Inbox Threads - thread reconstruction for raw mail archives.

This package turns a flat collection of raw mail messages (a patch or
discussion archive) into a queryable index of reply trees, with message
bodies split into plain, quoted and patch blocks.
"""

__version__ = "0.1.0"
__author__ = "Trickl"

from inbox_threads.config import Settings, get_settings

__all__ = ["Settings", "get_settings", "__version__", "__author__"]
