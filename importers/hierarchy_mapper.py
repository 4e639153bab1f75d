"""
Hierarchy mapper for Notion export documents.

Parent pointers are ids into the id -> DocumentInfo mapping. Ancestor walks
stop at a missing parent (the page was exported without its ancestor) and at
any id already visited, so malformed archives with parent cycles still
terminate.
"""

import logging
from typing import Dict, Iterator, List, Optional

from models import DocumentInfo

PATH_SEPARATOR = "/"


def iter_ancestors(document: DocumentInfo, documents: Dict[str, DocumentInfo]) -> Iterator[DocumentInfo]:
    """
    Yield a document's ancestors from its immediate parent up to its root.

    Args:
        document: Document whose ancestors are walked
        documents: id -> DocumentInfo mapping

    Yields:
        Ancestor DocumentInfo objects, nearest first
    """
    visited = {document.id}
    parent_id = document.parent_id

    while parent_id and parent_id not in visited:
        parent = documents.get(parent_id)
        if parent is None:
            return
        visited.add(parent_id)
        yield parent
        parent_id = parent.parent_id


def folder_segment(title: str) -> str:
    """Folder path segment contributed by a document title."""
    return title + PATH_SEPARATOR


def assemble_parent_ids(document: DocumentInfo, documents: Dict[str, DocumentInfo]) -> List[str]:
    """
    Build the folder segments from root to the document's immediate parent.

    Args:
        document: Document to place
        documents: id -> DocumentInfo mapping

    Returns:
        List of ``"Title/"`` segments, root first, excluding the document itself
    """
    segments = [folder_segment(ancestor.title) for ancestor in iter_ancestors(document, documents)]
    segments.reverse()
    return segments


class HierarchyMapper:
    """Caches ancestor chains per document id and repairs parent cycles."""

    def __init__(self, documents: Dict[str, DocumentInfo], logger: Optional[logging.Logger] = None):
        """
        Initialize the hierarchy mapper.

        Args:
            documents: id -> DocumentInfo mapping (shared, not copied)
            logger: Optional logger instance
        """
        self.documents = documents
        self.logger = logger or logging.getLogger('notion_markdown_importer.importers.hierarchy_mapper')
        self._cache: Dict[str, List[str]] = {}

    def invalidate(self) -> None:
        """Drop cached chains; required after any change to titles or parent ids."""
        self._cache.clear()

    def parent_segments(self, document: DocumentInfo) -> List[str]:
        """Cached ``assemble_parent_ids`` for a document."""
        if document.id not in self._cache:
            self._cache[document.id] = assemble_parent_ids(document, self.documents)
        return list(self._cache[document.id])

    def ancestor_titles(self, document: DocumentInfo) -> List[str]:
        """Titles of a document's ancestors, root first."""
        return [segment[:-len(PATH_SEPARATOR)] for segment in self.parent_segments(document)]

    def effective_parent_id(self, document: DocumentInfo) -> Optional[str]:
        """Parent id if the parent exists in the mapping, else None (effective root)."""
        if document.parent_id and document.parent_id in self.documents and document.parent_id != document.id:
            return document.parent_id
        return None

    def find_cycles(self) -> List[List[str]]:
        """
        Find parent-id cycles.

        Returns:
            List of cycles, each a list of document ids in parent order
        """
        cycles = []
        state: Dict[str, int] = {}  # 1 = on current path, 2 = done

        for start_id in sorted(self.documents):
            if start_id in state:
                continue

            path: List[str] = []
            current: Optional[str] = start_id
            while current and current in self.documents and current not in state:
                state[current] = 1
                path.append(current)
                current = self.documents[current].parent_id

            if current and state.get(current) == 1:
                cycles.append(path[path.index(current):])

            for doc_id in path:
                state[doc_id] = 2

        return cycles

    def break_cycles(self) -> int:
        """
        Detach the smallest id of every parent cycle so the hierarchy becomes a forest.

        Returns:
            Number of cycles broken
        """
        cycles = self.find_cycles()
        for cycle in cycles:
            root_id = min(cycle)
            self.logger.warning(
                f"Parent cycle detected among {len(cycle)} documents; "
                f"treating '{self.documents[root_id].title}' ({root_id}) as a root"
            )
            self.documents[root_id].parent_id = None

        if cycles:
            self.invalidate()
        return len(cycles)


__all__ = ['HierarchyMapper', 'assemble_parent_ids', 'folder_segment', 'iter_ancestors', 'PATH_SEPARATOR']
