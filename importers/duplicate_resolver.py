"""
Duplicate resolver for overlapping Notion exports.

Repeated or partial exports of the same workspace produce several archive
entries for one logical page or attachment. The resolver keeps the most
complete entry (largest uncompressed size, then smallest archive location),
redirects references to discarded attachments, breaks parent cycles, and
assigns every document the folder segment it contributes to its children.
"""

import logging
import posixpath
from collections import defaultdict
from typing import Dict, List, Optional, Tuple

from models import AttachmentInfo, DocumentInfo, ImportIndex
from .hierarchy_mapper import HierarchyMapper
from .notion_ids import canonical_name

ID_SUFFIX_LENGTH = 8


def _completeness_key(info) -> Tuple[int, tuple]:
    # Larger size wins; equal sizes fall back to the smaller archive location
    return (-info.size, info.origin)


class DuplicateResolver:
    """Collapses duplicate documents and attachments in an ImportIndex."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize the duplicate resolver.

        Args:
            logger: Optional logger instance
        """
        self.logger = logger or logging.getLogger('notion_markdown_importer.importers.duplicate_resolver')

    def clean_duplicates(self, index: ImportIndex) -> Dict[str, int]:
        """
        Resolve duplicates in place. Running it again changes nothing.

        Args:
            index: ImportIndex populated by the ArchiveScanner

        Returns:
            Statistics dictionary
        """
        stats = {
            'documents_merged': self._merge_documents(index),
            'attachments_merged': self._merge_attachments(index),
            'cycles_broken': HierarchyMapper(index.documents, self.logger).break_cycles(),
            'titles_disambiguated': self._disambiguate_titles(index)
        }

        if any(stats.values()):
            self.logger.info(
                f"Duplicate resolution: {stats['documents_merged']} documents merged, "
                f"{stats['attachments_merged']} attachments merged, "
                f"{stats['cycles_broken']} cycles broken, "
                f"{stats['titles_disambiguated']} titles disambiguated"
            )
        return stats

    def _merge_documents(self, index: ImportIndex) -> int:
        merged = 0
        for candidate in index.shadowed_documents:
            current = index.documents.get(candidate.id)
            if current is None:
                index.documents[candidate.id] = candidate
                continue

            retained, discarded = self._pick(current, candidate)
            index.documents[candidate.id] = retained
            merged += 1
            self.logger.debug(
                f"Document {candidate.id}: keeping {retained.path} ({retained.size} bytes), "
                f"discarding {discarded.path} ({discarded.size} bytes)"
            )

        index.shadowed_documents.clear()
        return merged

    def _merge_attachments(self, index: ImportIndex) -> int:
        merged = 0

        # Same archive path from different archives
        for candidate in index.shadowed_attachments:
            current = index.attachments.get(candidate.path)
            if current is None:
                index.attachments[candidate.path] = candidate
                continue
            retained, _ = self._pick(current, candidate)
            index.attachments[candidate.path] = retained
            merged += 1
        index.shadowed_attachments.clear()

        # Same owner and equivalent display name at different paths; attachments
        # without an owner only match within their own folder
        groups: Dict[Tuple[str, str], List[AttachmentInfo]] = defaultdict(list)
        for attachment in index.attachments.values():
            owner = attachment.owner_id or posixpath.dirname(attachment.path)
            key = (owner, canonical_name(attachment.name).casefold())
            groups[key].append(attachment)

        for group in groups.values():
            if len(group) < 2:
                continue
            group.sort(key=_completeness_key)
            retained = group[0]
            for discarded in group[1:]:
                del index.attachments[discarded.path]
                self._alias(index, discarded.path, retained.path)
                merged += 1
                self.logger.debug(f"Attachment {discarded.path} merged into {retained.path}")

        return merged

    @staticmethod
    def _alias(index: ImportIndex, discarded_path: str, retained_path: str) -> None:
        index.attachment_aliases[discarded_path] = retained_path
        # Re-point aliases that targeted the discarded entry
        for alias, target in index.attachment_aliases.items():
            if target == discarded_path:
                index.attachment_aliases[alias] = retained_path

    @staticmethod
    def _pick(first, second):
        ordered = sorted([first, second], key=_completeness_key)
        return ordered[0], ordered[1]

    def _disambiguate_titles(self, index: ImportIndex) -> int:
        """Give siblings with colliding titles an id suffix, recomputed from original titles."""
        hierarchy = HierarchyMapper(index.documents, self.logger)
        siblings: Dict[Tuple[Optional[str], str], List[DocumentInfo]] = defaultdict(list)

        for document in index.documents.values():
            document.title = document.original_title
            key = (hierarchy.effective_parent_id(document), document.title.casefold())
            siblings[key].append(document)

        changed = 0
        for group in siblings.values():
            if len(group) < 2:
                continue
            group.sort(key=lambda doc: doc.id)
            for document in group[1:]:
                document.title = f"{document.original_title} {document.id[:ID_SUFFIX_LENGTH]}"
                changed += 1
                self.logger.debug(f"Title collision: '{document.original_title}' renamed to '{document.title}'")

        return changed


__all__ = ['DuplicateResolver']
