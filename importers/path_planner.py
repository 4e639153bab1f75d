"""
Path planner: assigns every document and attachment a unique vault path.

Planning runs after duplicate resolution and before any write, so the full set
of destination folders is known up front and cross-document links can be
rendered to final paths during conversion.
"""

import logging
import posixpath
from collections import Counter
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Set

from models import DocumentInfo, ImportIndex
from .hierarchy_mapper import PATH_SEPARATOR, HierarchyMapper, folder_segment

NOTE_EXTENSION = '.md'


def normalize_folder(folder: Optional[str]) -> str:
    """
    Normalize a vault-relative folder to ``"a/b/"`` form.

    Args:
        folder: Folder path; None, '' or '/' mean the vault root

    Returns:
        '' for the vault root, otherwise the folder with a single trailing slash
    """
    if not folder:
        return ''
    parts = [part for part in folder.replace('\\', '/').split('/') if part and part != '.']
    if not parts:
        return ''
    return PATH_SEPARATOR.join(parts) + PATH_SEPARATOR


def parent_folder(path: str) -> str:
    """Folder containing a vault path, in ``"a/b/"`` form ('' for the vault root)."""
    return normalize_folder(posixpath.dirname(path))


@dataclass
class PathPlan:
    """Destination paths for a whole run."""

    document_paths: Dict[str, str] = field(default_factory=dict)  # id -> path
    attachment_paths: Dict[str, str] = field(default_factory=dict)  # archive path -> path
    folders: List[str] = field(default_factory=list)

    def get_statistics(self) -> Dict[str, int]:
        """Get plan statistics."""
        return {
            'documents': len(self.document_paths),
            'attachments': len(self.attachment_paths),
            'folders': len(self.folders)
        }


class PathPlanner:
    """Computes collision-free destination paths for documents and attachments."""

    def __init__(
        self,
        target_folder: str = '',
        parents_in_subfolders: bool = True,
        attachment_folder: str = '',
        exists: Optional[Callable[[str], bool]] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the path planner.

        Args:
            target_folder: Vault folder receiving the import ('' for the vault root)
            parents_in_subfolders: Place every document inside a folder named after it
            attachment_folder: Subfolder for attachments, relative to their base folder
            exists: Optional check for files already present in the vault
            logger: Optional logger instance
        """
        self.target_folder = normalize_folder(target_folder)
        self.parents_in_subfolders = parents_in_subfolders
        self.attachment_folder = normalize_folder(attachment_folder)
        self.exists = exists
        self.logger = logger or logging.getLogger('notion_markdown_importer.importers.path_planner')
        self._taken: Set[str] = set()

    def plan(self, index: ImportIndex) -> PathPlan:
        """
        Plan destination paths for every document and attachment in the index.

        Sets ``target_path``, ``ancestor_titles`` and ``full_link_path_needed``
        on documents, and ``target_parent_folder``, ``target_path`` and
        ``full_link_path_needed`` on attachments.

        Args:
            index: Resolved ImportIndex

        Returns:
            PathPlan with unique paths and the folders to create
        """
        self._taken = set()
        plan = PathPlan()
        hierarchy = HierarchyMapper(index.documents, self.logger)

        documents = sorted(
            index.documents.values(),
            key=lambda doc: (len(hierarchy.parent_segments(doc)), doc.id)
        )
        for document in documents:
            document.ancestor_titles = hierarchy.ancestor_titles(document)
            path = self._reserve(self._document_candidate(document, hierarchy), NOTE_EXTENSION)
            document.target_path = path
            plan.document_paths[document.id] = path

        for attachment in sorted(index.attachments.values(), key=lambda att: att.path):
            owner = index.documents.get(attachment.owner_id) if attachment.owner_id else None
            attachment.target_parent_folder = self._attachment_folder(owner)
            extension = posixpath.splitext(attachment.name)[1]
            path = self._reserve(attachment.target_parent_folder + attachment.name, extension)
            attachment.target_path = path
            plan.attachment_paths[attachment.path] = path

        self._mark_ambiguous_names(index)
        plan.folders = self._collect_folders(plan)

        self.logger.info(
            f"Planned {len(plan.document_paths)} documents, {len(plan.attachment_paths)} attachments "
            f"in {len(plan.folders)} folders"
        )
        return plan

    def _document_candidate(self, document: DocumentInfo, hierarchy: HierarchyMapper) -> str:
        folder = self.target_folder + ''.join(hierarchy.parent_segments(document))
        if self.parents_in_subfolders:
            folder += folder_segment(document.title)
        return folder + document.title + NOTE_EXTENSION

    def _attachment_folder(self, owner: Optional[DocumentInfo]) -> str:
        if self.parents_in_subfolders and owner is not None and owner.target_path:
            base = parent_folder(owner.target_path)
        else:
            base = self.target_folder
        return base + self.attachment_folder

    def _reserve(self, candidate: str, extension: str) -> str:
        """Reserve a path, appending " 2", " 3", ... before the extension on collision."""
        stem = candidate[:-len(extension)] if extension else candidate
        path = candidate
        counter = 2
        while self._is_taken(path):
            path = f"{stem} {counter}{extension}"
            counter += 1

        if path != candidate:
            self.logger.debug(f"Path collision: {candidate} -> {path}")
        self._taken.add(path.casefold())
        return path

    def _is_taken(self, path: str) -> bool:
        if path.casefold() in self._taken:
            return True
        return bool(self.exists and self.exists(path))

    @staticmethod
    def _link_name(path: str) -> str:
        name = posixpath.basename(path)
        if name.endswith(NOTE_EXTENSION):
            name = name[:-len(NOTE_EXTENSION)]
        return name.casefold()

    def _mark_ambiguous_names(self, index: ImportIndex) -> None:
        """Flag entities whose link name is shared with another entity of this run."""
        entities: List = [doc for doc in index.documents.values() if doc.target_path]
        entities.extend(att for att in index.attachments.values() if att.target_path)

        counts = Counter(self._link_name(entity.target_path) for entity in entities)
        for entity in entities:
            entity.full_link_path_needed = counts[self._link_name(entity.target_path)] > 1

    @staticmethod
    def _collect_folders(plan: PathPlan) -> List[str]:
        folders = set()
        for path in list(plan.document_paths.values()) + list(plan.attachment_paths.values()):
            folder = parent_folder(path)
            if folder:
                folders.add(folder)
        return sorted(folders, key=lambda folder: (folder.count(PATH_SEPARATOR), folder))


__all__ = ['NOTE_EXTENSION', 'PathPlan', 'PathPlanner', 'normalize_folder', 'parent_folder']
