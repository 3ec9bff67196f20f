"""Raw message source backed by a directory with one message per file."""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator
from pathlib import Path

import structlog

from inbox_threads.exceptions import ConfigurationError, NotFoundError, SourceError
from inbox_threads.source.base import RawMessage, parse_raw_message

logger = structlog.get_logger()


class DirectorySource:
    """Recursively scans a directory where every file is one raw message.

    Files are visited in sorted path order, so when two files share a
    Message-ID the first one in that order is the one served.
    """

    def __init__(self, root: Path, ignored_dirs: Iterable[str] = (".git",)) -> None:
        """Create a directory source.

        Args:
            root: Archive directory.
            ignored_dirs: Directory names that are not descended into.

        Raises:
            ConfigurationError: If ``root`` is not a directory.
        """
        self._root = Path(root)
        self._ignored = frozenset(ignored_dirs)
        self._paths: dict[str, Path] = {}

        if not self._root.is_dir():
            raise ConfigurationError(f"Archive directory not found: {self._root}")

    @property
    def root(self) -> Path:
        return self._root

    def all(self) -> Iterator[RawMessage]:
        """Yield every message with a valid Message-ID and remember its path.

        Raises:
            SourceError: If a directory or file cannot be read.
        """
        self._paths = {}
        for path in self._walk():
            raw = self._read(path)
            message_id = raw.message_id
            if not message_id:
                logger.debug("message_without_id_skipped", path=str(path))
                continue
            if message_id in self._paths:
                logger.warning(
                    "duplicate_message_id_skipped",
                    message_id=message_id,
                    path=str(path),
                    kept=str(self._paths[message_id]),
                )
                continue

            self._paths[message_id] = path
            yield raw

    def one(self, message_id: str) -> RawMessage:
        """Re-read the file holding ``message_id``.

        Only messages seen by a previous :meth:`all` call can be found.

        Raises:
            NotFoundError: If the Message-ID is unknown.
            SourceError: If the file cannot be read.
        """
        path = self._paths.get(message_id)
        if path is None:
            raise NotFoundError(f"message file for id {message_id!r} not found")
        return self._read(path)

    def _walk(self) -> Iterator[Path]:
        def on_error(exc: OSError) -> None:
            raise SourceError(f"can not read archive directory: {exc}") from exc

        for dirpath, dirnames, filenames in os.walk(self._root, onerror=on_error):
            dirnames[:] = sorted(d for d in dirnames if d not in self._ignored)
            for filename in sorted(filenames):
                yield Path(dirpath) / filename

    def _read(self, path: Path) -> RawMessage:
        try:
            data = path.read_bytes()
        except OSError as exc:
            raise SourceError(f"can not read message file {path}: {exc}") from exc
        return parse_raw_message(data, location=str(path))
