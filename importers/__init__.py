"""Import package for resolving Notion exports into a vault layout.

This package turns the flat entry list of one or more Notion HTML exports into
a consistent document forest with a unique destination path for every page
and attachment.

Package Structure:
- notion_ids: Id extraction from Notion file and folder names
- archive_scanner: First pass, classifies entries and collects metadata
- duplicate_resolver: Collapses duplicate pages/attachments from repeated exports
- hierarchy_mapper: Ancestor chains, cycle detection and cycle breaking
- path_planner: Collision-free destination paths and the folder set

Models Referenced:
- DocumentInfo, AttachmentInfo: Per-entity metadata
- ImportIndex: Mappings persisted between the two import passes
"""

from .archive_scanner import ArchiveScanner, classify_entry
from .duplicate_resolver import DuplicateResolver
from .hierarchy_mapper import HierarchyMapper, assemble_parent_ids, iter_ancestors
from .notion_ids import get_notion_id, sanitize_filename
from .path_planner import PathPlan, PathPlanner, normalize_folder

__all__ = [
    'ArchiveScanner',
    'DuplicateResolver',
    'HierarchyMapper',
    'PathPlan',
    'PathPlanner',
    'assemble_parent_ids',
    'classify_entry',
    'get_notion_id',
    'iter_ancestors',
    'normalize_folder',
    'sanitize_filename'
]
