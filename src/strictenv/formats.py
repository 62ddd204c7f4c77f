r"""Serialize parsed `.env` documents to other formats.

The `dotenv` format writes every value in its double-quoted form, which `strictenv.line.parse_line()` reads back to the
same value:

>>> print(dumps('dotenv', {'GREETING': 'hello, world', 'MULTILINE': 'a\nb'}))
GREETING="hello, world"
MULTILINE="a\nb"

Values can also be rendered with a `jinja2` template (see `resolve_format()`).
"""

from __future__ import annotations

import json
import logging
import typing
from pathlib import Path
from typing import Callable, Dict

import jinja2
import tomlkit as toml
import yaml

__all__ = ['DUMPERS', 'FormatT', 'dumps', 'quote', 'resolve_format']

logger = logging.getLogger(__name__)

FormatT = typing.Literal['dotenv', 'json', 'toml', 'yaml', 'yml']
"""The supported serialization formats (not including `jinja2` templates)"""

# note: `3.8` was not respecting `from __future__ import annotations` for delayed evaluation
DumpT = Callable[[Dict[str, str]], str]

ESCAPES = {
    '"': '\\"',
    '\\': '\\\\',
    '\n': '\\n',
    '\t': '\\t',
    '\r': '\\r',
}


def quote(value: str) -> str:
    r"""Render the given value as a double-quoted `.env` value.

    Control characters without a short escape are written as `\uXXXX`; everything else (including non-ASCII characters)
    is written as-is:

    >>> print(quote('say "hi"\tto C:\\ \x1b 😁'))
    "say \"hi\"\tto C:\\ \u001b 😁"
    """
    chars = ['"']
    for char in value:
        if char in ESCAPES:
            chars.append(ESCAPES[char])
        elif char < ' ':
            chars.append(f'\\u{ord(char):04x}')
        else:
            chars.append(char)
    chars.append('"')
    return ''.join(chars)


def dump_dotenv(data: dict[str, str]) -> str:
    """Write one `KEY="value"` line for each item in `data`."""
    return '\n'.join(f'{key}={quote(value)}' for key, value in data.items())


DUMPERS: dict[FormatT, DumpT] = {
    'dotenv': dump_dotenv,
    'json': json.dumps,
    'toml': toml.dumps,  # pyright: ignore[reportUnknownMemberType]
    'yaml': yaml.dump,
    'yml': yaml.dump,
}


def dumps(fmt: FormatT, data: dict[str, str]) -> str:
    """Serialize the given `data` object to the given `FormatT`.

    >>> dumps('json', {'FOO': 'bar'})
    '{"FOO": "bar"}'
    >>> dumps('xml', {'FOO': 'bar'})
    Traceback (most recent call last):
    ...
    ValueError: unsupported format: 'xml'
    """
    try:
        dump = DUMPERS[fmt]
    except KeyError as exc:
        raise ValueError(f"unsupported format: '{fmt}'") from exc

    return dump(data)


def resolve_format(value: str) -> FormatT | jinja2.Template:
    """Interpret `value` as the name of a `FormatT`, or else as the path to a `jinja2` template.

    >>> resolve_format('yaml')
    'yaml'
    >>> template = resolve_format(example_template_file)
    >>> template.render({'GREETING': 'hello'})
    'export GREETING=hello'
    """
    if value in DUMPERS:
        fmt: FormatT = value  # type: ignore[assignment]
        return fmt

    template_path = Path(value)
    if not template_path.is_file():
        raise ValueError(f"unsupported format (or missing template file): '{value}'")

    loader = jinja2.FileSystemLoader(template_path.parent)
    env = jinja2.Environment(autoescape=jinja2.select_autoescape(default=False), loader=loader)

    logger.debug("Load template: '%s'", template_path)
    return env.get_template(template_path.name)


logger.debug('successfully imported %s', __name__)
