"""Data models for the Notion export import pipeline."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

logger = logging.getLogger('notion_markdown_importer')


class EntryKind(Enum):
    """Classification of a single archive entry."""
    DOCUMENT = "document"
    ATTACHMENT = "attachment"
    IGNORED = "ignored"


class LinkStyle(Enum):
    """Link syntax written into converted notes."""
    WIKILINK = "wikilink"
    MARKDOWN = "markdown"


@dataclass
class DocumentInfo:
    """Metadata for one Notion page discovered in an export archive."""

    id: str
    title: str
    path: str  # path inside the archive
    archive: str = ''
    parent_id: Optional[str] = None
    size: int = 0
    original_title: Optional[str] = None
    ancestor_titles: List[str] = field(default_factory=list)
    target_path: Optional[str] = None
    full_link_path_needed: bool = False

    def __post_init__(self) -> None:
        """Remember the scanned title so title disambiguation can be recomputed."""
        if self.original_title is None:
            self.original_title = self.title

    @property
    def origin(self) -> tuple:
        """Archive location used for deterministic duplicate tie-breaks."""
        return (self.archive, self.path)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize document info to dictionary."""
        return {
            'id': self.id,
            'title': self.title,
            'original_title': self.original_title,
            'path': self.path,
            'archive': self.archive,
            'parent_id': self.parent_id,
            'size': self.size,
            'ancestor_titles': list(self.ancestor_titles),
            'target_path': self.target_path,
            'full_link_path_needed': self.full_link_path_needed
        }


@dataclass
class AttachmentInfo:
    """Metadata for one non-document entry (image, file, html without id)."""

    path: str  # path inside the archive, also the mapping key
    name: str  # display name with extension
    archive: str = ''
    owner_id: Optional[str] = None
    size: int = 0
    target_parent_folder: Optional[str] = None
    target_path: Optional[str] = None
    full_link_path_needed: bool = False

    @property
    def origin(self) -> tuple:
        """Archive location used for deterministic duplicate tie-breaks."""
        return (self.archive, self.path)

    @property
    def extension(self) -> str:
        """Lower-case extension without the dot."""
        if '.' not in self.name:
            return ''
        return self.name.rsplit('.', 1)[1].lower()

    def to_dict(self) -> Dict[str, Any]:
        """Serialize attachment info to dictionary."""
        return {
            'path': self.path,
            'name': self.name,
            'archive': self.archive,
            'owner_id': self.owner_id,
            'size': self.size,
            'target_parent_folder': self.target_parent_folder,
            'target_path': self.target_path,
            'full_link_path_needed': self.full_link_path_needed
        }


@dataclass
class NotionProperty:
    """A single page property extracted from the export's properties table."""

    key: str
    value: Any


@dataclass
class ConversionResult:
    """Output of the markup conversion transform."""

    body: str
    properties: List[NotionProperty] = field(default_factory=list)


@dataclass
class ImportIndex:
    """Metadata mappings that persist between the two import passes."""

    documents: Dict[str, DocumentInfo] = field(default_factory=dict)
    attachments: Dict[str, AttachmentInfo] = field(default_factory=dict)
    shadowed_documents: List[DocumentInfo] = field(default_factory=list)
    shadowed_attachments: List[AttachmentInfo] = field(default_factory=list)
    attachment_aliases: Dict[str, str] = field(default_factory=dict)
    entry_count: int = 0

    def add_document(self, info: DocumentInfo) -> None:
        """Register a document, shadowing it if its id is already known."""
        if info.id in self.documents:
            logger.debug(f"Duplicate document id {info.id} at {info.path}")
            self.shadowed_documents.append(info)
        else:
            self.documents[info.id] = info

    def add_attachment(self, info: AttachmentInfo) -> None:
        """Register an attachment, shadowing it if its archive path is already known."""
        if info.path in self.attachments:
            logger.debug(f"Duplicate attachment path {info.path}")
            self.shadowed_attachments.append(info)
        else:
            self.attachments[info.path] = info

    def resolve_attachment(self, path: str) -> Optional[AttachmentInfo]:
        """Look up an attachment by archive path, following duplicate aliases."""
        attachment = self.attachments.get(path)
        if attachment is None and path in self.attachment_aliases:
            attachment = self.attachments.get(self.attachment_aliases[path])
        return attachment

    def get_statistics(self) -> Dict[str, int]:
        """Get mapping statistics."""
        return {
            'documents': len(self.documents),
            'attachments': len(self.attachments),
            'shadowed_documents': len(self.shadowed_documents),
            'shadowed_attachments': len(self.shadowed_attachments),
            'aliases': len(self.attachment_aliases),
            'entries': self.entry_count
        }


__all__ = [
    'AttachmentInfo',
    'ConversionResult',
    'DocumentInfo',
    'EntryKind',
    'ImportIndex',
    'LinkStyle',
    'NotionProperty'
]
