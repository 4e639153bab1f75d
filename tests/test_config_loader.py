"""Tests for configuration loading, defaults, validation and CLI merging."""

import argparse

import pytest

from config_loader import DEFAULT_CONFIG, ConfigLoader, get_nested


def make_args(**overrides):
    values = {
        'files': [],
        'output_dir': None,
        'target_folder': None,
        'parents_in_subfolders': None,
        'attachment_folder': None,
        'link_style': None,
        'dry_run': False,
        'progress': None,
        'report': None,
        'log_file': None,
        'verbose': 0,
    }
    values.update(overrides)
    return argparse.Namespace(**values)


class TestLoad:
    """Test loading configuration files."""

    def test_missing_file(self, tmp_path):
        """Test a missing file raises."""
        with pytest.raises(FileNotFoundError):
            ConfigLoader.load(str(tmp_path / 'missing.yaml'))

    def test_empty_file(self, tmp_path):
        """Test an empty file is an empty config."""
        path = tmp_path / 'config.yaml'
        path.write_text('', encoding='utf-8')

        assert ConfigLoader.load(str(path)) == {}

    def test_non_mapping_rejected(self, tmp_path):
        """Test a non-mapping file is rejected."""
        path = tmp_path / 'config.yaml'
        path.write_text('- a\n- b\n', encoding='utf-8')

        with pytest.raises(ValueError):
            ConfigLoader.load(str(path))

    def test_env_substitution(self, tmp_path, monkeypatch):
        """Test environment variables are substituted."""
        monkeypatch.setenv('VAULT_DIR', '/data/vault')
        path = tmp_path / 'config.yaml'
        path.write_text(
            'export:\n  output_directory: "${VAULT_DIR}/notes"\n'
            'notion:\n  export_files:\n    - "${UNSET_EXPORT_VAR}.zip"\n',
            encoding='utf-8'
        )

        config = ConfigLoader.load(str(path))

        assert config['export']['output_directory'] == '/data/vault/notes'
        assert config['notion']['export_files'] == ['${UNSET_EXPORT_VAR}.zip']


class TestDefaults:
    """Test default configuration values."""

    def test_apply_defaults_fills_missing_keys(self):
        """Test missing keys are filled with defaults."""
        config = ConfigLoader.apply_defaults({'export': {'target_folder': 'Imports'}})

        assert config['export']['target_folder'] == 'Imports'
        assert config['export']['parents_in_subfolders'] is True
        assert config['export']['link_style'] == 'wikilink'
        assert config['migration']['dry_run'] is False
        assert config['logging']['level'] == 'WARNING'

    def test_defaults_not_mutated(self):
        """Test the defaults are not modified."""
        config = ConfigLoader.apply_defaults({})
        config['export']['target_folder'] = 'Changed'

        assert DEFAULT_CONFIG['export']['target_folder'] == 'Notion'

    def test_get_nested(self):
        """Test dotted key lookup."""
        config = {'export': {'target_folder': 'Notion'}}

        assert get_nested(config, 'export.target_folder') == 'Notion'
        assert get_nested(config, 'export.missing', 'fallback') == 'fallback'
        assert get_nested(config, 'missing.key') is None


class TestValidate:
    """Test configuration validation."""

    def test_defaults_are_valid(self):
        """Test the defaults pass validation."""
        ConfigLoader.validate(ConfigLoader.apply_defaults({}))

    @pytest.mark.parametrize('section, key, value', [
        ('export', 'link_style', 'html'),
        ('export', 'target_folder', '../outside'),
        ('export', 'attachment_folder', 'assets/../..'),
        ('export', 'parents_in_subfolders', 'yes'),
        ('migration', 'dry_run', 1),
        ('logging', 'level', 'LOUD'),
        ('notion', 'export_files', 'single.zip'),
    ])
    def test_invalid_values(self, section, key, value):
        """Test invalid values are rejected."""
        config = ConfigLoader.apply_defaults({section: {key: value}})

        with pytest.raises(ValueError):
            ConfigLoader.validate(config)

    def test_unsubstituted_env_var(self):
        """Test unset environment variables are reported."""
        config = ConfigLoader.apply_defaults({'notion': {'export_files': ['${MISSING_VAR}.zip']}})

        with pytest.raises(ValueError, match='MISSING_VAR'):
            ConfigLoader.validate(config)

    def test_output_directory_must_be_a_directory(self, tmp_path):
        """Test the output directory cannot be a file."""
        output = tmp_path / 'file.txt'
        output.write_text('x', encoding='utf-8')
        config = ConfigLoader.apply_defaults({'export': {'output_directory': str(output)}})

        with pytest.raises(ValueError):
            ConfigLoader.validate(config)


class TestMergeWithArgs:
    """Test merging command-line arguments."""

    def test_cli_overrides_config(self):
        """Test arguments override the config file."""
        config = ConfigLoader.apply_defaults({'notion': {'export_files': ['old.zip']}})
        args = make_args(
            files=['new.zip'],
            output_dir='/tmp/vault',
            target_folder='',
            parents_in_subfolders=False,
            attachment_folder='assets',
            link_style='markdown',
            dry_run=True,
            progress=False,
            report='report.json',
            log_file='import.log',
        )

        merged = ConfigLoader.merge_with_args(config, args)

        assert merged['notion']['export_files'] == ['new.zip']
        assert merged['export']['output_directory'] == '/tmp/vault'
        assert merged['export']['target_folder'] == ''
        assert merged['export']['parents_in_subfolders'] is False
        assert merged['export']['attachment_folder'] == 'assets'
        assert merged['export']['link_style'] == 'markdown'
        assert merged['migration']['dry_run'] is True
        assert merged['migration']['progress_bars'] is False
        assert merged['migration']['report_path'] == 'report.json'
        assert merged['logging']['file'] == 'import.log'

    def test_unset_args_keep_config(self):
        """Test unset arguments keep config values."""
        config = ConfigLoader.apply_defaults({'notion': {'export_files': ['old.zip']}})

        merged = ConfigLoader.merge_with_args(config, make_args())

        assert merged == config

    @pytest.mark.parametrize('verbose, level', [(0, 'WARNING'), (1, 'INFO'), (2, 'DEBUG'), (3, 'DEBUG')])
    def test_verbosity(self, verbose, level):
        """Test verbosity flags set the log level."""
        merged = ConfigLoader.merge_with_args(ConfigLoader.apply_defaults({}), make_args(verbose=verbose))

        assert merged['logging']['level'] == level
