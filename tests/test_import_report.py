"""Tests for the import progress report."""

import csv
import json

from orchestrator import ImportReport


def populated_report():
    report = ImportReport()
    report.report_progress(1, 4)
    report.report_note_success('Notion/Root/Root.md')
    report.report_progress(2, 4)
    report.report_attachment_success('Notion/Root/photo.png')
    report.report_progress(3, 4)
    report.report_skipped('Root/photo (1).png', 'duplicate of Root/photo.png')
    report.report_progress(4, 4)
    report.report_failed('Broken.html', RuntimeError('bad markup'))
    report.close()
    return report


class TestImportReport:
    """Test the import report."""

    def test_summary_counts(self):
        """Test summary counts."""
        summary = populated_report().get_summary()

        assert summary['summary']['notes'] == 1
        assert summary['summary']['attachments'] == 1
        assert summary['summary']['skipped'] == 1
        assert summary['summary']['failed'] == 1
        assert summary['summary']['entries_processed'] == 4
        assert summary['summary']['entries_total'] == 4
        assert summary['failed'] == [{'path': 'Broken.html', 'error': 'bad markup'}]

    def test_has_failures(self):
        """Test failure detection."""
        assert populated_report().has_failures()
        assert not ImportReport().has_failures()

    def test_console_report(self):
        """Test the console report."""
        text = populated_report().format_console_report()

        assert 'NOTION IMPORT REPORT' in text
        assert 'Root/photo (1).png (duplicate of Root/photo.png)' in text
        assert 'Broken.html: bad markup' in text

    def test_console_report_truncates_skipped(self):
        """Test long skipped lists are truncated."""
        report = ImportReport()
        for number in range(25):
            report.report_skipped(f'file-{number}.bin')

        text = report.format_console_report()

        assert 'file-19.bin' in text
        assert 'file-20.bin' not in text
        assert '... and 5 more' in text

    def test_json_export(self, tmp_path):
        """Test JSON export."""
        path = tmp_path / 'report.json'
        populated_report().export_json_report(str(path))

        data = json.loads(path.read_text(encoding='utf-8'))
        assert data['summary']['notes'] == 1
        assert data['notes'] == ['Notion/Root/Root.md']

    def test_csv_export(self, tmp_path):
        """Test CSV export."""
        path = tmp_path / 'report.csv'
        populated_report().export_csv_report(str(path))

        with open(path, newline='', encoding='utf-8') as f:
            rows = list(csv.reader(f))

        assert rows[0] == ['status', 'path', 'detail']
        assert ['note', 'Notion/Root/Root.md', ''] in rows
        assert ['failed', 'Broken.html', 'bad markup'] in rows
        assert len(rows) == 5

    def test_progress_bar(self):
        """Test the progress bar follows progress events."""
        report = ImportReport(show_progress=True)
        report.report_progress(1, 2)
        report.report_progress(2, 2)

        assert report._progress_bar.n == 2
        report.close()
        assert report._progress_bar is None

    def test_duration_in_summary(self):
        """Test the duration is included."""
        summary = populated_report().get_summary()['summary']

        assert summary['duration_seconds'] >= 0
        assert summary['duration_formatted'].endswith('s')
