"""
Import report: progress reporting and the end-of-run summary.

Per-entry events (note/attachment written, skipped, failed) are recorded as
they happen; the collected lists can be formatted for the console or exported
to JSON and CSV.
"""

import csv
import json
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from tqdm import tqdm

from logger import format_elapsed

logger = logging.getLogger('notion_markdown_importer.orchestrator.import_report')


class ImportReport:
    """Progress reporter for a single import run."""

    def __init__(self, show_progress: bool = False, logger: Optional[logging.Logger] = None):
        """
        Initialize import report.

        Args:
            show_progress: Display a tqdm progress bar for the content pass
            logger: Optional logger instance
        """
        self.show_progress = show_progress
        self.logger = logger or logging.getLogger('notion_markdown_importer.orchestrator.import_report')

        self.notes: List[str] = []
        self.attachments: List[str] = []
        self.skipped: List[Dict[str, Optional[str]]] = []
        self.failed: List[Dict[str, str]] = []
        self.current = 0
        self.total = 0
        self.started_at = datetime.now()
        self.finished_at: Optional[datetime] = None
        self._progress_bar = None

    def report_progress(self, current: int, total: int) -> None:
        """Record that entry ``current`` of ``total`` is being processed."""
        self.current = current
        self.total = total

        if not self.show_progress:
            return
        if self._progress_bar is None:
            self._progress_bar = tqdm(total=total, desc="Importing", unit="entry")
        self._progress_bar.total = total
        self._progress_bar.n = current
        self._progress_bar.refresh()

    def report_skipped(self, path: str, reason: Optional[str] = None) -> None:
        """Record an entry that was deliberately not written."""
        self.skipped.append({'path': path, 'reason': reason})
        self.logger.debug(f"Skipped {path}" + (f": {reason}" if reason else ""))

    def report_note_success(self, path: str) -> None:
        """Record a converted note."""
        self.notes.append(path)

    def report_attachment_success(self, path: str) -> None:
        """Record a copied attachment."""
        self.attachments.append(path)

    def report_failed(self, path: str, error: Any) -> None:
        """Record an entry whose processing failed."""
        self.failed.append({'path': path, 'error': str(error)})

    def close(self) -> None:
        """Close the progress bar and stop the run clock."""
        if self._progress_bar is not None:
            self._progress_bar.close()
            self._progress_bar = None
        self.finished_at = datetime.now()

    def has_failures(self) -> bool:
        """Check whether any entry failed."""
        return bool(self.failed)

    def get_summary(self) -> Dict[str, Any]:
        """
        Build the report dictionary.

        Returns:
            Summary with counts, event lists and timing
        """
        finished_at = self.finished_at or datetime.now()
        duration = (finished_at - self.started_at).total_seconds()

        return {
            'summary': {
                'notes': len(self.notes),
                'attachments': len(self.attachments),
                'skipped': len(self.skipped),
                'failed': len(self.failed),
                'entries_processed': self.current,
                'entries_total': self.total,
                'duration_seconds': duration,
                'duration_formatted': format_elapsed(duration)
            },
            'notes': list(self.notes),
            'attachments': list(self.attachments),
            'skipped': list(self.skipped),
            'failed': list(self.failed),
            'timestamp': finished_at.isoformat()
        }

    def format_console_report(self, report: Optional[Dict[str, Any]] = None) -> str:
        """
        Format report for console display.

        Args:
            report: Report dictionary (built from this instance if omitted)

        Returns:
            Formatted console string
        """
        report = report or self.get_summary()
        summary = report.get('summary', {})

        sections = []
        sections.append("=" * 60)
        sections.append("NOTION IMPORT REPORT")
        sections.append("=" * 60)
        sections.append("")

        sections.append("Summary:")
        sections.append(f"  Notes:       {summary.get('notes', 0)}")
        sections.append(f"  Attachments: {summary.get('attachments', 0)}")
        sections.append(f"  Skipped:     {summary.get('skipped', 0)}")
        sections.append(f"  Failed:      {summary.get('failed', 0)}")
        sections.append(f"  Duration:    {summary.get('duration_formatted', '0s')}")
        sections.append("")

        skipped = report.get('skipped', [])
        if skipped:
            sections.append("Skipped:")
            sections.append("-" * 60)
            for event in skipped[:20]:
                reason = f" ({event['reason']})" if event.get('reason') else ""
                sections.append(f"  {event['path']}{reason}")
            if len(skipped) > 20:
                sections.append(f"  ... and {len(skipped) - 20} more")
            sections.append("")

        failed = report.get('failed', [])
        if failed:
            sections.append("Failed:")
            sections.append("-" * 60)
            for event in failed:
                sections.append(f"  {event['path']}: {event['error']}")
            sections.append("")

        sections.append("=" * 60)
        return "\n".join(sections)

    def export_json_report(self, filepath: str, report: Optional[Dict[str, Any]] = None) -> None:
        """
        Export report to JSON file.

        Args:
            filepath: Output file path
            report: Report dictionary (built from this instance if omitted)
        """
        report = report or self.get_summary()
        try:
            with open(filepath, 'w', encoding='utf-8') as f:
                json.dump(report, f, indent=2, ensure_ascii=False, default=str)

            self.logger.info(f"JSON report exported to {filepath}")

        except OSError as e:
            self.logger.error(f"Failed to export JSON report: {str(e)}")

    def export_csv_report(self, filepath: str) -> None:
        """
        Export one row per recorded event to CSV.

        Args:
            filepath: Output file path
        """
        try:
            with open(filepath, 'w', newline='', encoding='utf-8') as f:
                writer = csv.writer(f)
                writer.writerow(['status', 'path', 'detail'])
                for path in self.notes:
                    writer.writerow(['note', path, ''])
                for path in self.attachments:
                    writer.writerow(['attachment', path, ''])
                for event in self.skipped:
                    writer.writerow(['skipped', event['path'], event.get('reason') or ''])
                for event in self.failed:
                    writer.writerow(['failed', event['path'], event['error']])

            self.logger.info(f"CSV report exported to {filepath}")

        except OSError as e:
            self.logger.error(f"Failed to export CSV report: {str(e)}")


__all__ = ['ImportReport']
