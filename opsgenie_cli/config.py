"""Load the API key and connection settings.

Values come from a YAML config file, the ``OPS_APIKEY`` environment
variable and the ``--api-key`` flag, in increasing order of precedence.
The resulting ``Settings`` object is built once by the CLI and handed to
the client explicitly.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import pydantic
import yaml

log = logging.getLogger(__name__)

DEFAULT_API_URL = 'https://api.opsgenie.com'
DEFAULT_TIMEOUT = 10.0

API_KEY_ENV = 'OPS_APIKEY'
CONFIG_DIR_NAME = '.opsgenie'
CONFIG_FILE_NAME = 'config.yaml'

CONFIG_TEMPLATE = """\
# API key used for every request; OPS_APIKEY or --api-key override it.
apikey: ''
api_url: https://api.opsgenie.com
timeout: 10
"""


class ConfigError(Exception):
    """Raised when config is invalid or missing."""


class Settings(pydantic.BaseModel):
    model_config = pydantic.ConfigDict(frozen=True)

    api_key: str
    api_url: str = DEFAULT_API_URL
    timeout: float = DEFAULT_TIMEOUT

    @pydantic.field_validator('timeout')
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError('timeout must be greater than 0')
        return v


def default_config_dir(home: Path | None = None) -> Path:
    return (home or Path.home()) / CONFIG_DIR_NAME


def find_config_file(cwd: Path | None = None, home: Path | None = None) -> Path | None:
    """Return the first existing config file in ~/.opsgenie/, then cwd."""
    for directory in (default_config_dir(home), cwd or Path.cwd()):
        candidate = directory / CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate
    return None


def write_default_config(home: Path | None = None) -> Path:
    """Create ~/.opsgenie/config.yaml from the template if it is missing."""
    config_dir = default_config_dir(home)
    config_dir.mkdir(parents=True, exist_ok=True)
    config_path = config_dir / CONFIG_FILE_NAME
    if not config_path.exists():
        config_path.write_text(CONFIG_TEMPLATE)
        log.info('Wrote default config to %s', config_path)
    return config_path


def read_config_file(config_path: Path) -> dict[str, Any]:
    """Read a YAML config file. An empty file yields an empty dict."""
    if not config_path.exists():
        raise ConfigError(f'Config not found: {config_path}')

    with open(config_path) as f:
        try:
            raw = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ConfigError(f'Could not read config {config_path}: {exc}') from exc

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f'Config must be a YAML mapping, got {type(raw).__name__}')
    return raw


def load_settings(
    config_file: Path | None = None,
    api_key: str | None = None,
    environ: Mapping[str, str] | None = None,
    cwd: Path | None = None,
    home: Path | None = None,
) -> Settings:
    """Build ``Settings`` from the config file, environment and flag.

    When ``config_file`` is None the file is looked up in ~/.opsgenie/ and
    then in cwd; if neither exists a template is written to ~/.opsgenie/.
    """
    environ = os.environ if environ is None else environ

    if config_file is None:
        config_file = find_config_file(cwd, home) or write_default_config(home)
    log.debug('Using config file %s', config_file)
    raw = read_config_file(Path(config_file))

    # Flag beats env var beats file
    key = api_key or environ.get(API_KEY_ENV) or raw.get('apikey') or raw.get('apiKey')
    if not key:
        raise ConfigError('no API key set')

    values: dict[str, Any] = {'api_key': str(key)}
    if raw.get('api_url'):
        values['api_url'] = raw['api_url']
    if raw.get('timeout') is not None:
        values['timeout'] = raw['timeout']

    try:
        return Settings(**values)
    except pydantic.ValidationError as exc:
        raise ConfigError(f'Invalid config {config_file}: {exc}') from exc
