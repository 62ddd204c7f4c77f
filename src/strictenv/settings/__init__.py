"""Read and deserialize configuration for the `strictenv` CLI.

## Schema

See `strictenv.settings.schema` for the schema of the `strictenv` settings file:

```yaml
STRICTENV_FORMAT: yaml

STRICTENV_LOGGING:
  root:
    level: WARNING
```

Settings are loaded with `pyspry`, so each one can be overridden by an environment variable of the same name (e.g.
`STRICTENV_FORMAT=toml`).
"""

from __future__ import annotations

import dataclasses
import logging
from pathlib import Path

import pyspry
import yaml

from strictenv.settings.schema import DictConfigDefault

__all__ = [
    'DEFAULT_LOGGING_CONFIG',
    'DEFAULT_PATHS',
    'PREFIX',
    'Config',
    'load',
    'resolve_path',
]

logger = logging.getLogger(__name__)

DEFAULT_PATHS = [
    Path.cwd() / 'strictenv-settings.yaml',
    Path.home() / 'strictenv-settings.yaml',
    Path('/etc/strictenv/settings.yaml'),
]
"""Check each of these locations for the `strictenv` settings file.

The following locations are checked (ordered by priority):

1. `./strictenv-settings.yaml`
2. `~/strictenv-settings.yaml`
3. `/etc/strictenv/settings.yaml`
"""


DEFAULT_LOGGING_CONFIG: DictConfigDefault = {
    'version': 1,
    'formatters': {
        'simple': {
            'datefmt': logging.Formatter.default_time_format,
            'format': '%(message)s',
            'style': '%',
            'validate': False,
        },
    },
    'filters': {},
    'handlers': {
        'rich': {
            'class': 'rich.logging.RichHandler',
            'formatter': 'simple',
            'rich_tracebacks': True,
        },
    },
    'loggers': {},
    'root': {
        'handlers': ['rich'],
        'level': logging.INFO,
        'propagate': False,
    },
    'disable_existing_loggers': True,
    'incremental': False,
}
"""Default logging configuration passed to `logging.config.dictConfig()`."""

PREFIX = 'STRICTENV'
"""Each of the settings must be prefixed with this string."""


@dataclasses.dataclass
class Config:
    """Wrap the `pyspry.Settings` object with the path it was loaded from."""

    settings: pyspry.Settings
    """The settings for the `strictenv` CLI, with `PREFIX` removed from each name."""

    path: Path
    """The settings were loaded from this file."""


def load(path: Path) -> Config:
    """Load the settings from the given path.

    >>> conf = load(example_settings_file)
    >>> conf.settings.FORMAT, conf.settings.LOGGING
    ('yaml', {'root': {'level': 'WARNING'}})

    Settings missing from the file are false-y:

    >>> conf.settings.COLOR or 'unset'
    'unset'

    The file must hold a mapping of settings:

    >>> load(example_env_file)
    Traceback (most recent call last):
    ...
    ValueError: invalid settings file ...
    """
    logger.debug("Load settings: '%s'", path)
    try:
        settings = pyspry.Settings.load(path, PREFIX)
    except (AttributeError, yaml.YAMLError) as exc:
        # `pyspry` calls `.items()` on whatever the YAML document holds
        raise ValueError(f'invalid settings file {path}: expected a mapping of settings ({exc})') from exc

    return Config(settings=settings, path=Path(path))


def resolve_path() -> Path:
    """Return the first path in `DEFAULT_PATHS` that exists."""
    for path in DEFAULT_PATHS:
        if path.is_file():
            return path

    raise FileNotFoundError('Could not find strictenv settings', DEFAULT_PATHS)


logger.debug('successfully imported %s', __name__)
