"""
Notion id extraction and filename helpers.

Notion's HTML export names every page file and page folder after the page
title followed by the page's 32-hex id, e.g. ``Meeting Notes 1a2b...9f.html``
and ``Meeting Notes 1a2b...9f/``. Repeated exports may append a copy marker
such as ``" (1)"``.
"""

import posixpath
import re
from typing import List, Optional

NOTION_ID_PATTERN = re.compile(
    r'(?:^|\s)([0-9a-f]{32}|[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12})$',
    re.IGNORECASE
)
NOTION_URL_ID_PATTERN = re.compile(r'(?:^|-)([0-9a-f]{32})$', re.IGNORECASE)
COPY_MARKER_PATTERN = re.compile(r'\s\(\d+\)$')
DATABASE_ALL_SUFFIX_PATTERN = re.compile(r'_all(?=\.csv$)', re.IGNORECASE)

INVALID_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|#^\[\]]')
CONTROL_CHARS = re.compile(r'[\x00-\x1f\x7f-\x9f]')
RESERVED_NAMES = re.compile(r'^(con|prn|aux|nul|com[0-9]|lpt[0-9])(\..*)?$', re.IGNORECASE)
MAX_FILENAME_LENGTH = 200
UNTITLED = 'Untitled'


def _split_extension(name: str):
    stem, ext = posixpath.splitext(name)
    # Treat "v1.2 <id>" style suffixes as part of the stem, not an extension
    if ext and not re.fullmatch(r'\.[A-Za-z0-9]{1,10}', ext):
        return name, ''
    return stem, ext


def canonical_name(filename: str) -> str:
    """Strip an export-tool copy marker (``" (1)"``) from a filename."""
    name = posixpath.basename(filename.rstrip('/'))
    stem, ext = _split_extension(name)
    return COPY_MARKER_PATTERN.sub('', stem) + ext


def get_notion_id(filename: Optional[str]) -> Optional[str]:
    """
    Extract the Notion id from a filename or folder name.

    The id must be the trailing token of the stem, separated by whitespace (or
    starting the name), immediately before the extension.

    Args:
        filename: File or folder name; a full path is reduced to its basename

    Returns:
        Lower-case 32-hex id without dashes, or None
    """
    if not filename:
        return None

    name = posixpath.basename(filename.rstrip('/'))
    stem, _ = _split_extension(canonical_name(name))
    match = NOTION_ID_PATTERN.search(stem)
    if not match:
        return None
    return match.group(1).replace('-', '').lower()


def get_notion_url_id(url_path: str) -> Optional[str]:
    """Extract the page id from a notion.so URL path (``/Page-Title-<id>``)."""
    segment = url_path.rstrip('/').rsplit('/', 1)[-1]
    match = NOTION_URL_ID_PATTERN.search(segment)
    return match.group(1).lower() if match else None


def strip_notion_id(name: str) -> str:
    """Remove extension, copy marker and trailing id from a filename."""
    stem, _ = _split_extension(canonical_name(name))
    return NOTION_ID_PATTERN.sub('', stem).strip()


def parent_ids_from_path(path: str) -> List[str]:
    """Ids of the id-bearing folder segments of an archive path, root first."""
    folder = posixpath.dirname(path.rstrip('/'))
    ids = []
    for segment in folder.split('/'):
        segment_id = get_notion_id(segment)
        if segment_id:
            ids.append(segment_id)
    return ids


def is_database_export(filename: str) -> bool:
    """Check for a database CSV export of a known page (``Table <id>.csv`` or ``_all.csv``)."""
    if not filename.lower().endswith('.csv'):
        return False
    return get_notion_id(DATABASE_ALL_SUFFIX_PATTERN.sub('', filename)) is not None


def sanitize_filename(name: str) -> str:
    """
    Convert a title into a filesystem- and link-safe filename component.

    Args:
        name: Raw title or filename

    Returns:
        Sanitized name, never empty
    """
    name = CONTROL_CHARS.sub('', name or '')
    name = INVALID_FILENAME_CHARS.sub(' ', name)
    name = re.sub(r'\s{2,}', ' ', name).strip()

    if len(name) > MAX_FILENAME_LENGTH:
        name = name[:MAX_FILENAME_LENGTH]

    # Windows rejects trailing dots and spaces
    name = name.rstrip('. ')

    if RESERVED_NAMES.match(name):
        name = f"_{name}"

    return name or UNTITLED


__all__ = [
    'canonical_name',
    'get_notion_id',
    'get_notion_url_id',
    'is_database_export',
    'parent_ids_from_path',
    'sanitize_filename',
    'strip_notion_id'
]
