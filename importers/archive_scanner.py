"""
Archive scanner: first-pass metadata extraction for Notion export entries.

Each entry is classified as a document, an attachment, or an ignored database
export, and registered in the ImportIndex. Only metadata is kept; document
bodies are discarded right after the title has been read.
"""

import logging
import posixpath
from typing import Callable, Iterable, Optional

from bs4 import BeautifulSoup, SoupStrainer

from errors import MissingIdentityError
from models import AttachmentInfo, DocumentInfo, EntryKind, ImportIndex
from .notion_ids import (
    get_notion_id,
    is_database_export,
    parent_ids_from_path,
    sanitize_filename,
    strip_notion_id,
)

DOCUMENT_EXTENSIONS = {'html', 'htm'}

TITLE_STRAINER = SoupStrainer('title')


def classify_entry(entry) -> EntryKind:
    """
    Classify an archive entry.

    Args:
        entry: ArchiveEntry (anything with ``name`` and ``extension``)

    Returns:
        EntryKind.IGNORED for database CSV exports of known pages,
        EntryKind.DOCUMENT for id-bearing HTML pages, else EntryKind.ATTACHMENT
    """
    if is_database_export(entry.name):
        return EntryKind.IGNORED
    if entry.extension in DOCUMENT_EXTENSIONS and get_notion_id(entry.name):
        return EntryKind.DOCUMENT
    return EntryKind.ATTACHMENT


class ArchiveScanner:
    """Builds the id -> DocumentInfo and path -> AttachmentInfo mappings."""

    def __init__(
        self,
        on_skipped: Optional[Callable[[str, str], None]] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the archive scanner.

        Args:
            on_skipped: Callback receiving (archive path, reason) for entries
                whose metadata could not be extracted
            logger: Logger instance
        """
        self.on_skipped = on_skipped
        self.logger = logger or logging.getLogger('notion_markdown_importer.importers.archive_scanner')
        self.stats = {
            'documents': 0,
            'attachments': 0,
            'ignored': 0,
            'skipped': 0
        }
        self.skipped_origins = set()

    def scan(self, entries: Iterable, index: Optional[ImportIndex] = None) -> ImportIndex:
        """
        Scan every entry and register its metadata.

        Args:
            entries: Iterable of ArchiveEntry, in archive order
            index: Existing index to extend (a new one is created if omitted)

        Returns:
            The populated ImportIndex
        """
        if index is None:
            index = ImportIndex()

        for entry in entries:
            kind = classify_entry(entry)
            if kind is EntryKind.IGNORED:
                self.stats['ignored'] += 1
                self.logger.debug(f"Ignoring database export {entry.filepath}")
                continue

            index.entry_count += 1

            try:
                if kind is EntryKind.DOCUMENT:
                    index.add_document(self.parse_document(entry))
                    self.stats['documents'] += 1
                else:
                    index.add_attachment(self.parse_attachment(entry))
                    self.stats['attachments'] += 1
            except Exception as e:
                self.stats['skipped'] += 1
                self.skipped_origins.add((entry.archive, entry.filepath))
                self.logger.warning(f"Skipping {entry.filepath}: {e}")
                if self.on_skipped:
                    self.on_skipped(entry.filepath, str(e))

        self.logger.info(
            f"Scanned {index.entry_count} entries: {self.stats['documents']} documents, "
            f"{self.stats['attachments']} attachments, {self.stats['ignored']} database exports ignored, "
            f"{self.stats['skipped']} skipped"
        )
        return index

    def parse_document(self, entry) -> DocumentInfo:
        """Extract id, title and parent id of a Notion page entry."""
        notion_id = get_notion_id(entry.name)
        if not notion_id:
            raise MissingIdentityError(f"No Notion id in filename {entry.filepath}")

        title = self._read_title(entry) or strip_notion_id(entry.name)

        parent_ids = parent_ids_from_path(entry.filepath)
        # A page folder can contain the page's own id when Notion nests exports
        parent_ids = [parent_id for parent_id in parent_ids if parent_id != notion_id]

        return DocumentInfo(
            id=notion_id,
            title=sanitize_filename(title),
            path=entry.filepath,
            archive=entry.archive,
            parent_id=parent_ids[-1] if parent_ids else None,
            size=entry.size
        )

    def parse_attachment(self, entry) -> AttachmentInfo:
        """Extract display name and owning page id of an attachment entry."""
        owner_ids = parent_ids_from_path(entry.filepath)
        return AttachmentInfo(
            path=entry.filepath,
            name=sanitize_filename(posixpath.basename(entry.filepath)),
            archive=entry.archive,
            owner_id=owner_ids[-1] if owner_ids else None,
            size=entry.size
        )

    def _read_title(self, entry) -> Optional[str]:
        """Read only the <title> element of an HTML page."""
        soup = BeautifulSoup(entry.read_text(), 'lxml', parse_only=TITLE_STRAINER)
        title = soup.find('title')
        if title is None:
            return None
        text = ' '.join(title.get_text().split())
        return text or None


__all__ = ['ArchiveScanner', 'classify_entry', 'DOCUMENT_EXTENSIONS']
