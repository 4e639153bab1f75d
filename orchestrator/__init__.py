"""
Orchestration package for the two-pass Notion import.

This package sequences the import: Scan → Resolve duplicates → Plan paths →
Create folders → Convert and write → Report.
"""

from .import_report import ImportReport
from .notion_importer import NotionImporter

__all__ = [
    'ImportReport',
    'NotionImporter'
]
