"""Fetcher for Notion exports that were already extracted to a directory."""

import os
from pathlib import Path
from typing import Iterator

from .base_fetcher import ArchiveEntry, BaseFetcher


class DirectoryFetcher(BaseFetcher):
    """Walks extracted export directories in a stable, sorted order."""

    def iter_entries(self) -> Iterator[ArchiveEntry]:
        for path in self.paths:
            root = Path(path)
            self.logger.debug(f"Walking export directory {root}")

            for dirpath, dirnames, filenames in os.walk(root):
                dirnames.sort()
                for filename in sorted(filenames):
                    file_path = Path(dirpath) / filename
                    filepath = self._normalize_entry_path(file_path.relative_to(root).as_posix())
                    yield ArchiveEntry(
                        archive=str(root),
                        filepath=filepath,
                        size=file_path.stat().st_size,
                        opener=file_path.read_bytes
                    )


__all__ = ['DirectoryFetcher']
