"""Fetcher for Notion export zip archives, including nested part archives."""

import io
import logging
import zipfile
from typing import IO, Iterator, List, Optional, Tuple, Union

from .base_fetcher import ArchiveEntry, BaseFetcher

# Nested archives up to this size are buffered; larger ones are streamed
MAX_BUFFERED_NESTED_ARCHIVE = 256 * 1024 * 1024


class ZipFetcher(BaseFetcher):
    """
    Iterates entries of Notion export zip files.

    Large Notion exports are delivered as an outer zip wrapping one or more
    ``Export-<uuid>-Part-N.zip`` archives. Zip files at the root of an archive
    are expanded in place; zip files inside page folders are regular
    attachments and are yielded as entries.
    """

    def __init__(self, paths: List[str], logger: Optional[logging.Logger] = None):
        super().__init__(paths, logger)
        self.failed_archives: List[Tuple[str, str]] = []

    def iter_entries(self) -> Iterator[ArchiveEntry]:
        self.failed_archives = []
        for path in self.paths:
            self.logger.debug(f"Reading zip archive {path}")
            try:
                with zipfile.ZipFile(path) as zf:
                    yield from self._iter_zip(zf, label=str(path))
            except (zipfile.BadZipFile, OSError) as e:
                self.logger.error(f"Cannot read archive {path}: {e}")
                self.failed_archives.append((str(path), str(e)))

    def _iter_zip(self, zf: zipfile.ZipFile, label: str) -> Iterator[ArchiveEntry]:
        for info in zf.infolist():
            if info.is_dir():
                continue

            filepath = self._normalize_entry_path(info.filename)

            if self._is_nested_archive(filepath):
                yield from self._iter_nested(zf, info, f"{label}!{filepath}")
                continue

            yield ArchiveEntry(
                archive=label,
                filepath=filepath,
                size=info.file_size,
                opener=self._make_opener(zf, info)
            )

    def _iter_nested(self, zf: zipfile.ZipFile, info: zipfile.ZipInfo, label: str) -> Iterator[ArchiveEntry]:
        self.logger.info(f"Expanding nested archive {label}")
        try:
            source: Union[IO[bytes], io.BytesIO]
            if info.file_size <= MAX_BUFFERED_NESTED_ARCHIVE:
                source = io.BytesIO(zf.read(info))
            else:
                source = zf.open(info)
            with zipfile.ZipFile(source) as nested:
                yield from self._iter_zip(nested, label)
        except zipfile.BadZipFile as e:
            self.logger.error(f"Cannot read nested archive {label}: {e}")
            self.failed_archives.append((label, str(e)))

    @staticmethod
    def _is_nested_archive(filepath: str) -> bool:
        return '/' not in filepath and filepath.lower().endswith('.zip')

    @staticmethod
    def _make_opener(zf: zipfile.ZipFile, info: zipfile.ZipInfo):
        def opener() -> bytes:
            return zf.read(info)
        return opener


__all__ = ['ZipFetcher']
