"""Fetchers package for reading Notion export archives and directories."""

import os
from typing import Iterator, List, Tuple

from .base_fetcher import ArchiveEntry, BaseFetcher, FetcherError
from .directory_fetcher import DirectoryFetcher
from .zip_fetcher import ZipFetcher


class ChainedFetcher(BaseFetcher):
    """Iterates several fetchers one after another, preserving the user's order."""

    def __init__(self, fetchers: List[BaseFetcher], logger=None):
        super().__init__([path for fetcher in fetchers for path in fetcher.paths], logger)
        self.fetchers = fetchers

    @property
    def failed_archives(self) -> List[Tuple[str, str]]:
        failed = []
        for fetcher in self.fetchers:
            failed.extend(getattr(fetcher, 'failed_archives', []))
        return failed

    def iter_entries(self) -> Iterator[ArchiveEntry]:
        for fetcher in self.fetchers:
            yield from fetcher.iter_entries()


class FetcherFactory:
    """Factory for creating fetcher instances for the selected export paths."""

    @staticmethod
    def create_fetcher(paths: List[str], logger=None) -> BaseFetcher:
        """Create appropriate fetcher for each path.

        Args:
            paths: Zip files or extracted export directories
            logger: Logger instance

        Returns:
            BaseFetcher instance iterating every path in order

        Raises:
            FetcherError: If a path does not exist
        """
        fetchers: List[BaseFetcher] = []
        # The same export selected twice is read once
        unique_paths = {}
        for path in paths:
            unique_paths.setdefault(os.path.abspath(path), path)

        for path in unique_paths.values():
            if os.path.isdir(path):
                fetchers.append(DirectoryFetcher([path], logger))
            elif os.path.isfile(path):
                fetchers.append(ZipFetcher([path], logger))
            else:
                raise FetcherError(f"Export path does not exist: {path}")

        if len(fetchers) == 1:
            return fetchers[0]
        return ChainedFetcher(fetchers, logger)


__all__ = [
    'ArchiveEntry',
    'BaseFetcher',
    'ChainedFetcher',
    'DirectoryFetcher',
    'FetcherError',
    'FetcherFactory',
    'ZipFetcher'
]
