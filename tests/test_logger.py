"""Tests for logging setup and pass progress tracking."""

import logging

import pytest

from logger import ROOT_LOGGER_NAME, ProgressTracker, format_elapsed, log_config, setup_logging


class TestSetupLogging:
    """Test logging setup."""

    def test_verbosity_levels(self):
        """Test verbosity maps to log levels."""
        assert setup_logging(verbosity=0).level == logging.WARNING
        assert setup_logging(verbosity=1).level == logging.INFO
        assert setup_logging(verbosity=2).level == logging.DEBUG

    def test_explicit_level_wins(self):
        """Test an explicit level overrides verbosity."""
        assert setup_logging(verbosity=2, level='error').level == logging.ERROR

    def test_invalid_level(self):
        """Test an invalid level is rejected."""
        with pytest.raises(ValueError):
            setup_logging(level='LOUD')

    def test_handlers_replaced(self, tmp_path):
        """Test repeated setup replaces handlers."""
        setup_logging()
        logger = setup_logging(log_file=str(tmp_path / 'import.log'))

        assert len(logger.handlers) == 2
        logger.warning("written to file")
        for handler in logger.handlers:
            handler.flush()
        assert 'written to file' in (tmp_path / 'import.log').read_text(encoding='utf-8')

        setup_logging()

    def test_log_config_masks_secrets(self, caplog):
        """Test sensitive values are masked."""
        setup_logging(verbosity=1)
        config = {'notion': {'export_files': ['a.zip'], 'api_token': 'secret-value'}}

        with caplog.at_level(logging.INFO, logger=ROOT_LOGGER_NAME):
            log_config(config)

        assert 'a.zip' in caplog.text
        assert 'secret-value' not in caplog.text


class TestProgressTracker:
    """Test progress tracking."""

    def test_counts(self):
        """Test outcome counts."""
        with ProgressTracker(total_items=3) as tracker:
            tracker.record('written')
            tracker.record('skipped')
            tracker.record('failed')

        stats = tracker.get_stats()
        assert stats['processed'] == 3
        assert stats['written'] == 1
        assert stats['skipped'] == 1
        assert stats['failed'] == 1

    def test_unknown_outcome(self):
        """Test unknown outcomes are rejected."""
        with pytest.raises(ValueError):
            ProgressTracker(total_items=1).record('lost')

    def test_summary_line(self, caplog):
        """Test the summary line."""
        with caplog.at_level(logging.INFO, logger=ROOT_LOGGER_NAME):
            with ProgressTracker(total_items=2) as tracker:
                tracker.record('written')
                tracker.record('failed')

        warnings = [record for record in caplog.records if record.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert '2/2 entries: 1 written, 0 skipped, 1 failed' in warnings[0].getMessage()


def test_format_elapsed():
    """Test elapsed time formatting."""
    assert format_elapsed(5.0) == '5.0s'
    assert format_elapsed(125) == '2m 5s'
    assert format_elapsed(3725) == '1h 2m 5s'
