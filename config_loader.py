"""Configuration loader with YAML support and environment variable substitution."""

import copy
import os
import re
from typing import Any, Dict

import yaml

from models import LinkStyle

DEFAULT_CONFIG: Dict[str, Any] = {
    'notion': {
        'export_files': []
    },
    'export': {
        'output_directory': './vault',
        'target_folder': 'Notion',
        'parents_in_subfolders': True,
        'attachment_folder': '',
        'link_style': LinkStyle.WIKILINK.value,
        'avoid_existing_files': True
    },
    'migration': {
        'dry_run': False,
        'progress_bars': True,
        'report_path': None
    },
    'logging': {
        'level': 'WARNING',
        'file': None
    }
}

LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class ConfigLoader:
    """Handles loading and validation of configuration files."""

    ENV_VAR_PATTERN = re.compile(r'\$\{([A-Za-z_][A-Za-z0-9_]*)\}')

    @classmethod
    def load(cls, config_path: str) -> Dict[str, Any]:
        """
        Load configuration from YAML file with environment variable substitution.

        Args:
            config_path: Path to YAML configuration file

        Returns:
            Parsed configuration dictionary

        Raises:
            FileNotFoundError: If config file doesn't exist
            yaml.YAMLError: If YAML parsing fails
        """
        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f)

        if config_data is None:
            config_data = {}
        if not isinstance(config_data, dict):
            raise ValueError("Configuration file must contain a dictionary")

        return cls._substitute_env_vars_recursive(config_data)

    @classmethod
    def apply_defaults(cls, config: Dict[str, Any]) -> Dict[str, Any]:
        """
        Fill in default values for every missing key.

        Args:
            config: Configuration dictionary (not modified)

        Returns:
            New dictionary with defaults applied
        """
        merged = copy.deepcopy(DEFAULT_CONFIG)
        for section, values in (config or {}).items():
            if isinstance(values, dict) and isinstance(merged.get(section), dict):
                merged[section].update(values)
            else:
                merged[section] = values
        return merged

    @classmethod
    def validate(cls, config: Dict[str, Any]) -> None:
        """
        Validate configuration values.

        Empty export file lists and a missing output directory are reported by
        the importer's pre-flight check instead.

        Args:
            config: Configuration dictionary to validate

        Raises:
            ValueError: If validation fails
        """
        export_files = get_nested(config, 'notion.export_files', [])
        if not isinstance(export_files, list) or not all(isinstance(path, str) for path in export_files):
            raise ValueError("notion.export_files must be a list of paths")
        for index, path in enumerate(export_files):
            cls._check_env_substituted(path, f"notion.export_files[{index}]")

        output_dir = get_nested(config, 'export.output_directory')
        if output_dir:
            cls._check_env_substituted(output_dir, 'export.output_directory')
            if os.path.exists(output_dir) and not os.path.isdir(output_dir):
                raise ValueError(f"export.output_directory '{output_dir}' is not a directory")

        for field in ('export.target_folder', 'export.attachment_folder'):
            cls._validate_vault_folder(get_nested(config, field, ''), field)

        link_style = get_nested(config, 'export.link_style', LinkStyle.WIKILINK.value)
        try:
            LinkStyle(link_style)
        except ValueError:
            raise ValueError(
                f"export.link_style must be one of: {[style.value for style in LinkStyle]}"
            )

        for field in ('export.parents_in_subfolders', 'export.avoid_existing_files',
                      'migration.dry_run', 'migration.progress_bars'):
            value = get_nested(config, field, False)
            if not isinstance(value, bool):
                raise ValueError(f"{field} must be a boolean")

        level = get_nested(config, 'logging.level', 'WARNING')
        if not isinstance(level, str) or level.upper() not in LOG_LEVELS:
            raise ValueError(f"logging.level must be one of: {sorted(LOG_LEVELS)}")

    @classmethod
    def merge_with_args(cls, config: Dict[str, Any], args) -> Dict[str, Any]:
        """
        Merge configuration file with CLI arguments.
        CLI arguments take precedence over config file values.

        Args:
            config: Base configuration dictionary
            args: CLI arguments with attributes matching config keys

        Returns:
            Merged configuration dictionary
        """
        merged = copy.deepcopy(config)

        for section in ('notion', 'export', 'migration', 'logging'):
            if section not in merged or merged[section] is None:
                merged[section] = {}

        if getattr(args, 'files', None):
            merged['notion']['export_files'] = list(args.files)

        if getattr(args, 'output_dir', None):
            merged['export']['output_directory'] = args.output_dir

        if getattr(args, 'target_folder', None) is not None:
            merged['export']['target_folder'] = args.target_folder

        if getattr(args, 'parents_in_subfolders', None) is not None:
            merged['export']['parents_in_subfolders'] = args.parents_in_subfolders

        if getattr(args, 'attachment_folder', None) is not None:
            merged['export']['attachment_folder'] = args.attachment_folder

        if getattr(args, 'link_style', None):
            merged['export']['link_style'] = args.link_style

        if getattr(args, 'dry_run', False):
            merged['migration']['dry_run'] = True

        if getattr(args, 'progress', None) is not None:
            merged['migration']['progress_bars'] = args.progress

        if getattr(args, 'report', None):
            merged['migration']['report_path'] = args.report

        if getattr(args, 'log_file', None):
            merged['logging']['file'] = args.log_file

        verbose = getattr(args, 'verbose', 0) or 0
        if verbose >= 2:
            merged['logging']['level'] = 'DEBUG'
        elif verbose == 1:
            merged['logging']['level'] = 'INFO'

        return merged

    @classmethod
    def _substitute_env_vars_recursive(cls, data: Any) -> Any:
        """Recursively substitute environment variables in data structure."""
        if isinstance(data, dict):
            return {key: cls._substitute_env_vars_recursive(value) for key, value in data.items()}
        elif isinstance(data, list):
            return [cls._substitute_env_vars_recursive(item) for item in data]
        elif isinstance(data, str):
            return cls._substitute_env_vars(data)
        else:
            return data

    @classmethod
    def _substitute_env_vars(cls, value: str) -> str:
        """Substitute environment variables in a string value."""
        def replace_match(match):
            env_value = os.getenv(match.group(1))
            return env_value if env_value is not None else match.group(0)

        return cls.ENV_VAR_PATTERN.sub(replace_match, value)

    @classmethod
    def _check_env_substituted(cls, value: str, field: str) -> None:
        """Reject values that still reference an unset environment variable."""
        match = cls.ENV_VAR_PATTERN.search(value)
        if match:
            raise ValueError(
                f"Configuration field '{field}' contains unsubstituted environment variable: {value}. "
                f"Please set the {match.group(1)} environment variable or provide a value in config file."
            )

    @staticmethod
    def _validate_vault_folder(value: Any, field: str) -> None:
        """Vault folders are relative and may not climb out of the vault."""
        if value is None:
            return
        if not isinstance(value, str):
            raise ValueError(f"{field} must be a string")
        parts = value.replace('\\', '/').split('/')
        if '..' in parts:
            raise ValueError(f"{field} must not contain '..': {value}")


def get_nested(config: dict, path: str, default: Any = None) -> Any:
    """Safely retrieve nested configuration values using dot notation.

    Args:
        config: Configuration dictionary
        path: Dot-separated path (e.g., "export.target_folder")
        default: Default value if path doesn't exist

    Returns:
        Value at the nested path or default
    """
    value = config
    for key in path.split('.'):
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default
    return value


__all__ = ['ConfigLoader', 'DEFAULT_CONFIG', 'get_nested']
