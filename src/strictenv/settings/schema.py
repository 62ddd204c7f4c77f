"""Define the schema of the `strictenv` settings file.

```yaml
STRICTENV_FORMAT: dotenv

STRICTENV_LOGGING:
  root:
    level: DEBUG
```

This YAML file would be parsed into a `SettingsFile`, with `STRICTENV_LOGGING` described by `DictConfig`.
"""

from __future__ import annotations

import logging
import typing
from typing import Literal, TypedDict

from strictenv.formats import FormatT

try:
    from typing import NotRequired, TypeAlias
except ImportError:  # pragma: no cover
    from typing_extensions import NotRequired, TypeAlias


__all__ = ['DictConfig', 'DictConfigDefault', 'SettingsFile']

logger = logging.getLogger(__name__)


FilterId: TypeAlias = str
FormatterId: TypeAlias = str
HandlerId: TypeAlias = str
LoggerName: TypeAlias = str
PathStr: TypeAlias = str
"""A string representing a file path."""


class Formatter(TypedDict):
    """Parameters for a `logging.Formatter` in `DictConfig`."""

    datefmt: str
    format: str
    style: Literal['%', '{', '$']
    validate: bool


class Filter(TypedDict):
    """Parameters for a `logging.Filter` in `DictConfig`."""

    name: LoggerName


Handler = TypedDict(
    'Handler',
    {
        'class': str,
        'filters': NotRequired[typing.List[FilterId]],
        'formatter': FormatterId,
        'level': NotRequired[typing.Union[str, int]],
        'rich_tracebacks': NotRequired[bool],
    },
)
"""Parameters for a `logging.Handler` in `DictConfig`."""


class Logger(TypedDict):
    """Parameters for a `logging.Logger` in `DictConfig`."""

    filters: NotRequired[list[FilterId]]
    handlers: list[HandlerId]
    level: NotRequired[str | int]
    propagate: NotRequired[bool]


class DictConfig(TypedDict):
    """A partial `logging configuration dictionary`_, merged into `DictConfigDefault`.

    .. _logging configuration dictionary: https://docs.python.org/3/library/logging.config.html#logging-config-dictschema
    """

    disable_existing_loggers: NotRequired[bool]
    filters: NotRequired[dict[FilterId, Filter]]
    formatters: NotRequired[dict[FormatterId, Formatter]]
    handlers: NotRequired[dict[HandlerId, Handler]]
    incremental: NotRequired[bool]
    loggers: NotRequired[dict[LoggerName, Logger]]
    root: NotRequired[Logger]
    version: NotRequired[Literal[1]]


class DictConfigDefault(TypedDict):
    """The complete `logging configuration dictionary`_ used by default.

    .. _logging configuration dictionary: https://docs.python.org/3/library/logging.config.html#logging-config-dictschema
    """

    disable_existing_loggers: bool
    filters: dict[FilterId, Filter]
    formatters: dict[FormatterId, Formatter]
    handlers: dict[HandlerId, Handler]
    incremental: bool
    loggers: dict[LoggerName, Logger]
    root: Logger
    version: Literal[1]


class SettingsFile(TypedDict):
    """The top-level keys of the settings file (each is optional)."""

    STRICTENV_FORMAT: NotRequired[FormatT | PathStr]
    """The default output format of `strictenv get`; a path is interpreted as a `jinja2` template."""

    STRICTENV_LOGGING: NotRequired[DictConfig]
    """Merge this configuration into `strictenv.settings.DEFAULT_LOGGING_CONFIG`."""


logger.debug('successfully imported %s', __name__)
