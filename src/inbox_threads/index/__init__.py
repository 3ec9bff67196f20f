"""Thread indexing.

This package builds the reply graph of an archive from message headers and
serves listing, message and thread queries on top of it.
"""

from .graph import GraphNode, ThreadIndex
from .store import LIST_PAGE_SIZE, MemStore

__all__ = ["GraphNode", "LIST_PAGE_SIZE", "MemStore", "ThreadIndex"]
