"""Link processor for resolving Notion export links to planned vault paths."""

import logging
import posixpath
from dataclasses import dataclass
from typing import NamedTuple, Optional
from urllib.parse import quote, unquote, urlparse

from importers.notion_ids import get_notion_id, get_notion_url_id
from models import ImportIndex, LinkStyle

logger = logging.getLogger('notion_markdown_importer.converters.linkprocessor')

NOTION_HOSTS = ('notion.so', 'notion.site')
NOTE_EXTENSION = '.md'


@dataclass
class LinkContext:
    """Where the document being converted comes from and where it is written."""

    source_path: str  # archive path of the document
    target_path: str  # planned vault path of the document
    index: ImportIndex
    link_style: LinkStyle = LinkStyle.WIKILINK


class LinkTarget(NamedTuple):
    """A resolved link destination."""

    path: str
    is_attachment: bool
    full_link_path_needed: bool


class LinkProcessor:
    """Resolves hrefs found in Notion HTML and renders them as vault links."""

    def __init__(self, context: LinkContext, logger: logging.Logger = None):
        """Initialize link processor for one document."""
        self.context = context
        self.logger = logger or logging.getLogger('notion_markdown_importer.converters.linkprocessor')
        self.stats = {
            'links_internal': 0,
            'links_attachment': 0,
            'links_external': 0
        }

    def resolve(self, href: Optional[str]) -> Optional[LinkTarget]:
        """
        Resolve an href to a planned document or attachment path.

        Args:
            href: Raw href or src attribute value

        Returns:
            LinkTarget, or None when the href points outside the import
        """
        if not href:
            return None

        parsed = urlparse(href)
        if parsed.scheme or parsed.netloc:
            host = parsed.netloc.lower()
            if any(host == name or host.endswith('.' + name) for name in NOTION_HOSTS):
                return self._document_target(get_notion_url_id(parsed.path))
            self.stats['links_external'] += 1
            return None

        path = unquote(parsed.path)
        if not path:
            return None

        archive_path = posixpath.normpath(posixpath.join(posixpath.dirname(self.context.source_path), path))
        attachment = self.context.index.resolve_attachment(archive_path)
        if attachment is not None and attachment.target_path:
            self.stats['links_attachment'] += 1
            return LinkTarget(attachment.target_path, True, attachment.full_link_path_needed)

        return self._document_target(get_notion_id(path))

    def _document_target(self, doc_id: Optional[str]) -> Optional[LinkTarget]:
        document = self.context.index.documents.get(doc_id) if doc_id else None
        if document is None or not document.target_path:
            if doc_id:
                self.logger.debug(f"Link to page {doc_id} outside this import, keeping as is")
            return None
        self.stats['links_internal'] += 1
        return LinkTarget(document.target_path, False, document.full_link_path_needed)

    @staticmethod
    def link_name(target: LinkTarget) -> str:
        """Wikilink target: basename, or full vault path when the basename is ambiguous."""
        name = target.path if target.full_link_path_needed else posixpath.basename(target.path)
        if not target.is_attachment and name.endswith(NOTE_EXTENSION):
            name = name[:-len(NOTE_EXTENSION)]
        return name

    def wikilink(self, target: LinkTarget, text: str = '', embed: bool = False) -> str:
        """Render ``[[target|text]]`` (``![[...]]`` for embeds)."""
        name = self.link_name(target)
        text = (text or '').strip()
        body = name if not text or text == name or embed else f"{name}|{text}"
        return f"{'!' if embed else ''}[[{body}]]"

    def relative_path(self, target: LinkTarget) -> str:
        """URL-quoted path of a target relative to the current document's folder."""
        start = posixpath.dirname(self.context.target_path) or '.'
        return quote(posixpath.relpath(target.path, start))

    def format_link(self, target: LinkTarget, text: str, embed: bool = False) -> str:
        """Render a link in the configured style."""
        if self.context.link_style is LinkStyle.WIKILINK:
            return self.wikilink(target, text, embed)

        text = (text or '').strip()
        if not text:
            text = posixpath.splitext(posixpath.basename(target.path))[0]
        return f"{'!' if embed else ''}[{text}]({self.relative_path(target)})"


__all__ = ['LinkContext', 'LinkProcessor', 'LinkTarget']
