"""
Notion importer: the two-pass import driver.

Pass 1 reads metadata only: every archive is scanned, duplicates are resolved,
every destination path is planned and every folder is created. Pass 2 re-reads
the archives and writes notes and attachments to their planned paths. Entry
bodies are never kept between the passes.
"""

import logging
from typing import Any, Dict, Optional

from converters import LinkContext, NotionMarkdownConverter
from errors import ConversionError, ImportConfigurationError, UnresolvedReferenceError
from exporters import EMPTY_FRONT_MATTER, VaultStorage
from fetchers import FetcherError, FetcherFactory
from importers import ArchiveScanner, DuplicateResolver, PathPlan, PathPlanner, classify_entry
from importers.notion_ids import get_notion_id
from logger import ProgressTracker, log_section
from models import EntryKind, ImportIndex, LinkStyle
from orchestrator.import_report import ImportReport

logger = logging.getLogger('notion_markdown_importer.orchestrator.notion_importer')

NO_FILES_MESSAGE = "Please pick at least one file to import."
NO_DESTINATION_MESSAGE = "Please select a location to export to."


class NotionImporter:
    """Imports Notion HTML exports into a Markdown vault."""

    def __init__(
        self,
        config: Dict[str, Any],
        storage: Optional[VaultStorage] = None,
        report: Optional[ImportReport] = None,
        converter: Optional[NotionMarkdownConverter] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the importer.

        Args:
            config: Configuration dictionary
            storage: Storage capability (a VaultStorage on export.output_directory if omitted)
            report: Progress reporter (created if omitted)
            converter: Markup converter (created if omitted)
            logger: Optional logger instance
        """
        self.config = config
        self.logger = logger or logging.getLogger('notion_markdown_importer.orchestrator.notion_importer')

        export_config = config.get('export', {})
        self.files = list(config.get('notion', {}).get('export_files') or [])
        self.output_directory = export_config.get('output_directory')
        self.target_folder = export_config.get('target_folder', 'Notion')
        self.parents_in_subfolders = export_config.get('parents_in_subfolders', True)
        self.attachment_folder = export_config.get('attachment_folder', '')
        self.link_style = LinkStyle(export_config.get('link_style', LinkStyle.WIKILINK.value))
        self.avoid_existing_files = export_config.get('avoid_existing_files', True)
        self.dry_run = config.get('migration', {}).get('dry_run', False)

        self.storage = storage
        self.report = report or ImportReport(
            show_progress=config.get('migration', {}).get('progress_bars', False),
            logger=self.logger
        )
        self.converter = converter or NotionMarkdownConverter(logger=self.logger)

        self.index: Optional[ImportIndex] = None
        self.plan: Optional[PathPlan] = None
        self.duplicate_stats: Dict[str, int] = {}
        self._skipped_origins = set()
        self._cancelled = False

    def cancel(self) -> None:
        """Stop before the next entry; files already written are complete."""
        self._cancelled = True
        self.logger.warning("Import cancellation requested")

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def preflight(self) -> None:
        """
        Validate the run before any archive is touched.

        Raises:
            ImportConfigurationError: If no files or no destination were selected
        """
        if not self.files:
            raise ImportConfigurationError(NO_FILES_MESSAGE)
        if self.storage is None and not self.output_directory:
            raise ImportConfigurationError(NO_DESTINATION_MESSAGE)

    def run(self) -> Dict[str, Any]:
        """
        Run both import passes.

        Returns:
            Summary dictionary (report summary plus planning statistics)

        Raises:
            ImportConfigurationError: On pre-flight failures or missing export paths
        """
        self.preflight()
        if self.storage is None:
            self.storage = VaultStorage(self.output_directory, logger=self.logger)

        try:
            fetcher = FetcherFactory.create_fetcher(self.files, self.logger)
        except FetcherError as e:
            raise ImportConfigurationError(str(e)) from e

        try:
            log_section("Pass 1: Metadata")
            self._collect_metadata(fetcher)

            if self.dry_run:
                self.logger.info("Dry run: no folders or files written")
                return self._summary()

            # All folders exist before the first write
            self._create_folders()

            log_section("Pass 2: Content")
            self._import_entries(fetcher)
        finally:
            self.report.close()

        return self._summary()

    def _collect_metadata(self, fetcher) -> None:
        # Scan every archive for metadata only
        scanner = ArchiveScanner(on_skipped=self.report.report_skipped, logger=self.logger)
        self.index = scanner.scan(fetcher.iter_entries())
        self._skipped_origins = set(scanner.skipped_origins)

        # Archives that could not be opened
        for archive, reason in getattr(fetcher, 'failed_archives', []):
            self.report.report_skipped(archive, reason)

        # Resolve duplicates before planning paths
        self.duplicate_stats = DuplicateResolver(self.logger).clean_duplicates(self.index)

        planner = PathPlanner(
            target_folder=self.target_folder,
            parents_in_subfolders=self.parents_in_subfolders,
            attachment_folder=self.attachment_folder,
            exists=self.storage.exists if self.avoid_existing_files else None,
            logger=self.logger
        )
        self.plan = planner.plan(self.index)

    def _create_folders(self) -> None:
        for folder in self.plan.folders:
            try:
                self.storage.create_folder(folder)
            except Exception as e:
                self.logger.error(f"Failed to create folder {folder}: {e}")
                self.report.report_failed(folder, e)

    def _import_entries(self, fetcher) -> None:
        total = self.index.entry_count
        current = 0

        with ProgressTracker(total_items=total) as tracker:
            for entry in fetcher.iter_entries():
                if self._cancelled:
                    self.logger.warning(f"Import cancelled after {current} of {total} entries")
                    break

                kind = classify_entry(entry)
                if kind is EntryKind.IGNORED:
                    continue

                current += 1
                self.report.report_progress(current, total)

                # Already reported during the scan
                if (entry.archive, entry.filepath) in self._skipped_origins:
                    tracker.record('skipped')
                    continue

                try:
                    if kind is EntryKind.DOCUMENT:
                        written = self._import_document(entry)
                    else:
                        written = self._import_attachment(entry)
                    tracker.record('written' if written else 'skipped')
                except Exception as e:
                    self.logger.error(f"Failed to import {entry.filepath}: {e}")
                    self.report.report_failed(entry.filepath, e)
                    tracker.record('failed')

    def _import_document(self, entry) -> bool:
        """Convert and write one page; False when the entry lost duplicate resolution."""
        doc_id = get_notion_id(entry.name)
        document = self.index.documents.get(doc_id)
        if document is None or not document.target_path:
            raise UnresolvedReferenceError(f"No planned destination for page {doc_id}")

        if document.origin != (entry.archive, entry.filepath):
            self.report.report_skipped(entry.filepath, f"duplicate of {document.path}")
            return False

        context = LinkContext(
            source_path=document.path,
            target_path=document.target_path,
            index=self.index,
            link_style=self.link_style
        )
        try:
            result = self.converter.convert_document(entry.read_text(), context)
        except Exception as e:
            raise ConversionError(f"Cannot convert {entry.filepath}: {e}") from e

        if not result.properties:
            self.storage.write_text(document.target_path, result.body)
        else:
            # Empty block first: a leading divider in the body is not front matter
            self.storage.write_text(document.target_path, EMPTY_FRONT_MATTER + result.body)

            def apply_properties(front_matter: Dict[str, Any]) -> None:
                for prop in result.properties:
                    front_matter[prop.key] = prop.value

            self.storage.edit_front_matter(document.target_path, apply_properties)

        self.report.report_note_success(document.target_path)
        return True

    def _import_attachment(self, entry) -> bool:
        attachment = self.index.attachments.get(entry.filepath)
        if attachment is None:
            retained = self.index.attachment_aliases.get(entry.filepath)
            if retained is None:
                raise UnresolvedReferenceError(f"No planned destination for attachment {entry.filepath}")
            self.report.report_skipped(entry.filepath, f"duplicate of {retained}")
            return False

        if attachment.origin != (entry.archive, entry.filepath):
            self.report.report_skipped(entry.filepath, f"duplicate of {attachment.archive}:{attachment.path}")
            return False

        self.storage.write_binary(attachment.target_path, entry.read_bytes())
        self.report.report_attachment_success(attachment.target_path)
        return True

    def _summary(self) -> Dict[str, Any]:
        summary = self.report.get_summary()
        summary['dry_run'] = self.dry_run
        summary['cancelled'] = self._cancelled
        summary['index'] = self.index.get_statistics() if self.index else {}
        summary['duplicates'] = dict(self.duplicate_stats)
        summary['plan'] = self.plan.get_statistics() if self.plan else {}
        if self.dry_run and self.plan:
            summary['planned_paths'] = sorted(
                list(self.plan.document_paths.values()) + list(self.plan.attachment_paths.values())
            )
        return summary


__all__ = ['NotionImporter', 'NO_DESTINATION_MESSAGE', 'NO_FILES_MESSAGE']
