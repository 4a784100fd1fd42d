"""Tests for opsgenie_cli.config."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from opsgenie_cli.config import (
    CONFIG_TEMPLATE,
    DEFAULT_API_URL,
    ConfigError,
    Settings,
    find_config_file,
    load_settings,
    read_config_file,
    write_default_config,
)


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """Write a config with an API key to tmp_path."""
    path = tmp_path / 'config.yaml'
    path.write_text(yaml.dump({'apikey': 'file-key', 'timeout': 5}))
    return path


class TestReadConfigFile:
    def test_reads_mapping(self, config_file: Path) -> None:
        assert read_config_file(config_file) == {'apikey': 'file-key', 'timeout': 5}

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / 'config.yaml'
        path.write_text('')
        assert read_config_file(path) == {}

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match='Config not found'):
            read_config_file(tmp_path / 'nope.yaml')

    def test_non_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / 'config.yaml'
        path.write_text('- a\n- b\n')
        with pytest.raises(ConfigError, match='must be a YAML mapping'):
            read_config_file(path)

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / 'config.yaml'
        path.write_text('apikey: [unclosed\n')
        with pytest.raises(ConfigError, match='Could not read config'):
            read_config_file(path)


class TestFindConfigFile:
    def test_prefers_home(self, tmp_path: Path) -> None:
        cwd = tmp_path / 'cwd'
        home = tmp_path / 'home'
        (home / '.opsgenie').mkdir(parents=True)
        cwd.mkdir()
        (cwd / 'config.yaml').write_text('apikey: a\n')
        (home / '.opsgenie' / 'config.yaml').write_text('apikey: b\n')
        assert find_config_file(cwd, home) == home / '.opsgenie' / 'config.yaml'

    def test_falls_back_to_cwd(self, tmp_path: Path) -> None:
        cwd = tmp_path / 'cwd'
        cwd.mkdir()
        (cwd / 'config.yaml').write_text('apikey: a\n')
        assert find_config_file(cwd, tmp_path / 'home') == cwd / 'config.yaml'

    def test_home_key_wins_over_cwd(self, tmp_path: Path) -> None:
        cwd = tmp_path / 'cwd'
        home = tmp_path / 'home'
        (home / '.opsgenie').mkdir(parents=True)
        cwd.mkdir()
        (cwd / 'config.yaml').write_text('apikey: from-cwd\n')
        (home / '.opsgenie' / 'config.yaml').write_text('apikey: from-home\n')
        assert load_settings(environ={}, cwd=cwd, home=home).api_key == 'from-home'

    def test_none_found(self, tmp_path: Path) -> None:
        assert find_config_file(tmp_path, tmp_path / 'home') is None


class TestWriteDefaultConfig:
    def test_creates_dir_and_template(self, tmp_path: Path) -> None:
        path = write_default_config(tmp_path)
        assert path == tmp_path / '.opsgenie' / 'config.yaml'
        assert path.read_text() == CONFIG_TEMPLATE

    def test_does_not_overwrite(self, tmp_path: Path) -> None:
        path = tmp_path / '.opsgenie' / 'config.yaml'
        path.parent.mkdir()
        path.write_text('apikey: keep\n')
        write_default_config(tmp_path)
        assert path.read_text() == 'apikey: keep\n'


class TestLoadSettings:
    def test_key_from_file(self, config_file: Path) -> None:
        settings = load_settings(config_file, environ={})
        assert settings == Settings(api_key='file-key', timeout=5)
        assert settings.api_url == DEFAULT_API_URL

    def test_env_beats_file(self, config_file: Path) -> None:
        settings = load_settings(config_file, environ={'OPS_APIKEY': 'env-key'})
        assert settings.api_key == 'env-key'

    def test_flag_beats_env(self, config_file: Path) -> None:
        settings = load_settings(config_file, api_key='flag-key', environ={'OPS_APIKEY': 'env-key'})
        assert settings.api_key == 'flag-key'

    def test_missing_key(self, tmp_path: Path) -> None:
        path = tmp_path / 'config.yaml'
        path.write_text('timeout: 3\n')
        with pytest.raises(ConfigError, match='no API key set'):
            load_settings(path, environ={})

    def test_explicit_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match='Config not found'):
            load_settings(tmp_path / 'missing.yaml', api_key='k', environ={})

    def test_writes_template_when_nothing_found(self, tmp_path: Path) -> None:
        home = tmp_path / 'home'
        settings = load_settings(api_key='k', environ={}, cwd=tmp_path, home=home)
        assert settings.api_key == 'k'
        assert (home / '.opsgenie' / 'config.yaml').exists()

    def test_template_alone_has_no_key(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match='no API key set'):
            load_settings(environ={}, cwd=tmp_path, home=tmp_path / 'home')

    def test_api_url_from_file(self, tmp_path: Path) -> None:
        path = tmp_path / 'config.yaml'
        path.write_text('apikey: k\napi_url: https://api.eu.opsgenie.com\n')
        assert load_settings(path, environ={}).api_url == 'https://api.eu.opsgenie.com'

    def test_invalid_timeout(self, tmp_path: Path) -> None:
        path = tmp_path / 'config.yaml'
        path.write_text('apikey: k\ntimeout: 0\n')
        with pytest.raises(ConfigError, match='Invalid config'):
            load_settings(path, environ={})
