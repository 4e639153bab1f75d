#!/usr/bin/env python3
"""
Notion to Markdown Import Tool - Main CLI Entry Point

This script provides the command-line interface for importing Notion
"HTML" exports (zip archives or extracted folders) into a Markdown vault,
preserving the page hierarchy, internal links, attachments and database
properties.
"""

import argparse
import logging
import os
import sys

from config_loader import ConfigLoader, get_nested
from errors import ImportConfigurationError
from logger import log_config, log_section, setup_logging
from models import LinkStyle
from orchestrator import NotionImporter

# Version
__version__ = "1.0.0"


def create_argument_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser for CLI."""
    parser = argparse.ArgumentParser(
        description="Import Notion HTML exports into a Markdown vault",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Import a single export archive
  python migrate.py Export-1234.zip --output-dir ~/vault

  # Import a multi-part export, keeping parents next to their children
  python migrate.py Part-1.zip Part-2.zip --no-parents-in-subfolders

  # Preview the planned layout without writing anything
  python migrate.py Export.zip --dry-run -v

  # Use settings from a configuration file
  python migrate.py --config config.yaml --report import-report.json
        """
    )

    parser.add_argument(
        'files',
        nargs='*',
        help='Notion export zip archives or extracted export folders'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    parser.add_argument(
        '--config',
        default='config.yaml',
        help='Path to configuration file, used when it exists (default: config.yaml)'
    )

    parser.add_argument(
        '--output-dir',
        help='Vault root directory to import into'
    )

    parser.add_argument(
        '--target-folder',
        help='Vault folder that receives the imported pages (default: Notion)'
    )

    parser.add_argument(
        '--parents-in-subfolders',
        action=argparse.BooleanOptionalAction,
        default=None,
        help='Place each parent note inside the folder holding its children'
    )

    parser.add_argument(
        '--attachment-folder',
        help='Folder, relative to the note folder, that receives attachments'
    )

    parser.add_argument(
        '--link-style',
        choices=[style.value for style in LinkStyle],
        help='Link format for internal links (default: wikilink)'
    )

    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Plan the import and print the layout without writing files'
    )

    parser.add_argument(
        '--progress',
        action=argparse.BooleanOptionalAction,
        default=None,
        help='Show a progress bar while writing entries'
    )

    parser.add_argument(
        '--report',
        help='Write a JSON import report to this path'
    )

    parser.add_argument(
        '--log-file',
        help='Write logs to this file as well as the console'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='count',
        default=0,
        help='Increase verbosity (-v for INFO, -vv for DEBUG)'
    )

    return parser


def run_import(config: dict, logger: logging.Logger) -> int:
    """Execute the import and print the report."""
    importer = NotionImporter(config, logger=logger)
    summary = importer.run()

    print(importer.report.format_console_report(summary))

    if summary.get('dry_run'):
        for path in summary.get('planned_paths', []):
            print(f"  {path}")

    report_path = get_nested(config, 'migration.report_path')
    if report_path:
        importer.report.export_json_report(report_path, summary)

    if importer.cancelled:
        return 130
    return 1 if importer.report.has_failures() else 0


def main() -> int:
    """Main entry point for the CLI."""
    parser = create_argument_parser()
    args = parser.parse_args()

    try:
        # Setup minimal logging for config loading
        setup_logging(verbosity=args.verbose)
        logger = logging.getLogger('notion_markdown_importer.migrate')

        log_section("Notion to Markdown Import Tool")
        logger.info(f"Version: {__version__}")

        config = {}
        if os.path.exists(args.config):
            logger.info(f"Loading configuration from {args.config}")
            config = ConfigLoader.load(args.config)
        else:
            logger.debug(f"No configuration file at {args.config}, using defaults")

        config = ConfigLoader.apply_defaults(config)

        # Merge with CLI arguments (CLI takes precedence)
        config = ConfigLoader.merge_with_args(config, args)
        ConfigLoader.validate(config)

        # Reconfigure logging with config file settings
        setup_logging(
            level=get_nested(config, 'logging.level'),
            log_file=get_nested(config, 'logging.file')
        )

        log_config(config)

        return run_import(config, logger)

    except FileNotFoundError as e:
        print(f"ERROR: File not found: {e}", file=sys.stderr)
        return 2
    except ImportConfigurationError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2
    except ValueError as e:
        print(f"ERROR: Configuration error: {e}", file=sys.stderr)
        return 2
    except KeyboardInterrupt:
        print("\nImport interrupted by user", file=sys.stderr)
        return 130
    except Exception as e:
        print(f"ERROR: Unexpected error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
