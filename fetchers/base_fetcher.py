"""Abstract archive fetcher interface and the archive entry model."""

import logging
import posixpath
from abc import ABC, abstractmethod
from typing import Callable, Iterator, List, Optional


class FetcherError(Exception):
    """Base exception for fetcher-related errors."""
    pass


class ArchiveEntry:
    """
    One file-like unit inside an export archive.

    Bodies are read lazily through the opener supplied by the fetcher; the
    entry is only readable while the fetcher is iterating over its archive.
    """

    def __init__(
        self,
        archive: str,
        filepath: str,
        size: int,
        opener: Callable[[], bytes]
    ):
        """
        Initialize an archive entry.

        Args:
            archive: Label of the archive the entry belongs to
            filepath: Forward-slash path of the entry inside the archive
            size: Uncompressed size in bytes
            opener: Callable returning the entry's raw bytes
        """
        self.archive = archive
        self.filepath = filepath
        self.size = size
        self._opener = opener

    @property
    def name(self) -> str:
        """Filename with extension."""
        return posixpath.basename(self.filepath)

    @property
    def extension(self) -> str:
        """Lower-case extension without the dot."""
        name = self.name
        if '.' not in name:
            return ''
        return name.rsplit('.', 1)[1].lower()

    @property
    def basename(self) -> str:
        """Filename without extension."""
        name = self.name
        if '.' not in name:
            return name
        return name.rsplit('.', 1)[0]

    def read_bytes(self) -> bytes:
        """Read the entry's binary content."""
        return self._opener()

    def read_text(self, encoding: str = 'utf-8') -> str:
        """Read the entry's content as text."""
        return self.read_bytes().decode(encoding, errors='replace')

    def __repr__(self) -> str:
        return f"ArchiveEntry({self.archive!r}, {self.filepath!r}, size={self.size})"


class BaseFetcher(ABC):
    """Abstract base class for export archive fetchers."""

    def __init__(self, paths: List[str], logger: Optional[logging.Logger] = None):
        """
        Initialize base fetcher with the user-selected export paths.

        Args:
            paths: Export archive paths
            logger: Logger instance (optional, uses module logger if not provided)
        """
        self.paths = list(paths)
        self.logger = logger or logging.getLogger('notion_markdown_importer.fetcher')

    @abstractmethod
    def iter_entries(self) -> Iterator[ArchiveEntry]:
        """
        Yield every file entry of every archive, in archive order.

        Returns:
            Iterator of ArchiveEntry objects, readable only while iterating
        """
        pass

    @staticmethod
    def _normalize_entry_path(path: str) -> str:
        """Normalize an entry path to forward slashes without leading separators."""
        return path.replace('\\', '/').lstrip('/')


__all__ = ['ArchiveEntry', 'BaseFetcher', 'FetcherError']
