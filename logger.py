"""Logging setup for the importer: colored console output, optional log file, progress summaries."""

import copy
import logging
import logging.handlers
import time
from typing import Any, Dict, Optional

import colorlog

ROOT_LOGGER_NAME = 'notion_markdown_importer'
DEFAULT_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DEFAULT_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
LOG_COLORS = {
    'DEBUG': 'cyan',
    'INFO': 'green',
    'WARNING': 'yellow',
    'ERROR': 'red',
    'CRITICAL': 'red,bg_white',
}
SENSITIVE_KEYS = ('password', 'secret', 'token', 'api_key', 'cookie')


def _resolve_level(verbosity: int, level: Optional[str]) -> int:
    if level:
        level_name = level.upper()
        if level_name not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level '{level}'")
        return getattr(logging, level_name)
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    return logging.WARNING


def setup_logging(
    verbosity: int = 0,
    log_file: Optional[str] = None,
    log_format: Optional[str] = None,
    date_format: Optional[str] = None,
    level: Optional[str] = None
) -> logging.Logger:
    """
    Configure the ``notion_markdown_importer`` logger hierarchy.

    Args:
        verbosity: Verbosity level (0=WARNING, 1=INFO, 2+=DEBUG)
        log_file: Optional path to a rotating log file
        log_format: Optional custom log format string
        date_format: Optional custom date format string
        level: Explicit level name, overrides verbosity

    Returns:
        Configured root logger of the importer
    """
    log_level = _resolve_level(verbosity, level)
    log_format = log_format or DEFAULT_LOG_FORMAT
    date_format = date_format or DEFAULT_DATE_FORMAT

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(log_level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(colorlog.ColoredFormatter(
        fmt='%(log_color)s' + log_format,
        datefmt=date_format,
        log_colors=LOG_COLORS
    ))
    logger.addHandler(console_handler)

    if log_file:
        try:
            file_handler = logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=10 * 1024 * 1024,
                backupCount=5,
                encoding='utf-8'
            )
        except OSError as e:
            logger.warning(f"Failed to set up file logging: {e}")
        else:
            file_handler.setLevel(log_level)
            file_handler.setFormatter(logging.Formatter(fmt=log_format, datefmt=date_format))
            logger.addHandler(file_handler)
            logger.info(f"Logging to file: {log_file}")

    logger.info(f"Log level: {logging.getLevelName(log_level)}")
    return logger


class ProgressTracker:
    """Counts written, skipped and failed entries of one pass and logs a summary line."""

    OUTCOMES = ('written', 'skipped', 'failed')

    def __init__(self, total_items: int, item_type: str = "entries", log_every: int = 50):
        """
        Args:
            total_items: Number of entries expected in the pass
            item_type: Noun used in log lines
            log_every: Log an intermediate line every N entries
        """
        self.total_items = total_items
        self.item_type = item_type
        self.log_every = max(1, log_every)
        self.counts = dict.fromkeys(self.OUTCOMES, 0)
        self.start_time: Optional[float] = None
        self.logger = logging.getLogger(f'{ROOT_LOGGER_NAME}.progress')

    @property
    def processed(self) -> int:
        return sum(self.counts.values())

    def __enter__(self) -> 'ProgressTracker':
        self.start_time = time.monotonic()
        self.logger.info(f"Importing {self.total_items} {self.item_type}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        stats = self.get_stats()
        if stats['failed'] and not stats['written']:
            log_method = self.logger.error
        elif stats['failed']:
            log_method = self.logger.warning
        else:
            log_method = self.logger.info

        log_method(
            f"{stats['processed']}/{stats['total']} {self.item_type}: {stats['written']} written, "
            f"{stats['skipped']} skipped, {stats['failed']} failed in {stats['elapsed_time_formatted']}"
        )

    def record(self, outcome: str) -> None:
        """
        Count one entry.

        Args:
            outcome: 'written', 'skipped' or 'failed'
        """
        if outcome not in self.counts:
            raise ValueError(f"Unknown outcome '{outcome}'")
        self.counts[outcome] += 1

        if self.processed % self.log_every == 0:
            self.logger.info(
                f"{self.processed}/{self.total_items} {self.item_type} "
                f"({self.counts['failed']} failed)"
            )

    def get_stats(self) -> Dict[str, Any]:
        elapsed = time.monotonic() - self.start_time if self.start_time is not None else 0.0
        stats: Dict[str, Any] = dict(self.counts)
        stats.update({
            'total': self.total_items,
            'processed': self.processed,
            'elapsed_time': elapsed,
            'elapsed_time_formatted': format_elapsed(elapsed)
        })
        return stats


def format_elapsed(seconds: float) -> str:
    """Human-readable duration ("4.2s", "3m 5s", "1h 2m 5s")."""
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes, seconds = divmod(int(seconds), 60)
    if minutes < 60:
        return f"{minutes}m {seconds}s"
    hours, minutes = divmod(minutes, 60)
    return f"{hours}h {minutes}m {seconds}s"


def log_section(title: str) -> None:
    """Log a section header."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    separator = "=" * 60
    logger.info(separator)
    logger.info(f"  {title.upper()}")
    logger.info(separator)


def log_config(config: Dict[str, Any]) -> None:
    """
    Log sanitized configuration for debugging.

    Args:
        config: Configuration dictionary to log
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)

    sanitized_config = _sanitize_config(config)

    log_section("Configuration")

    notion = sanitized_config.get('notion', {})
    export_files = notion.get('export_files') or []
    logger.info(f"Export Files: {len(export_files)}")
    for path in export_files:
        logger.info(f"  {path}")

    logger.info("")

    export_settings = sanitized_config.get('export', {})
    logger.info(f"Output Directory: {export_settings.get('output_directory', './vault')}")
    logger.info(f"Target Folder: {export_settings.get('target_folder', 'Notion') or '(vault root)'}")
    logger.info(f"Parents in Subfolders: {export_settings.get('parents_in_subfolders', True)}")
    logger.info(f"Attachment Folder: {export_settings.get('attachment_folder') or '(next to notes)'}")
    logger.info(f"Link Style: {export_settings.get('link_style', 'wikilink')}")
    logger.info(f"Avoid Existing Files: {export_settings.get('avoid_existing_files', True)}")

    logger.info("")

    migration = sanitized_config.get('migration', {})
    logger.info(f"Dry Run: {migration.get('dry_run', False)}")
    logger.info(f"Report Path: {migration.get('report_path') or 'Not Set'}")


def _sanitize_config(config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Copy a configuration with sensitive values masked.

    Args:
        config: Configuration dictionary

    Returns:
        Sanitized configuration copy
    """
    def mask(data: Any) -> Any:
        if isinstance(data, dict):
            return {
                key: "***REDACTED***"
                if isinstance(value, str) and any(part in str(key).lower() for part in SENSITIVE_KEYS)
                else mask(value)
                for key, value in data.items()
            }
        if isinstance(data, list):
            return [mask(item) for item in data]
        return data

    return mask(copy.deepcopy(config))


__all__ = [
    'ProgressTracker',
    'format_elapsed',
    'log_config',
    'log_section',
    'setup_logging'
]
