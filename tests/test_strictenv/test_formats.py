"""Execute tests for serializing parsed documents."""

from __future__ import annotations

import json
from pathlib import Path

import jinja2
import pytest

from strictenv import formats, loads

DATA = {'GREETING': 'hello, world', 'EMPTY': '', 'MULTILINE': 'a\nb'}


def test_dumps_dotenv() -> None:
    """Every value is written in its double-quoted form."""
    assert 'GREETING="hello, world"\nEMPTY=""\nMULTILINE="a\\nb"' == formats.dumps('dotenv', DATA)


def test_dumps_dotenv_reparse() -> None:
    """The `dotenv` format is read back to the same values."""
    data = {'FIRE': '\U0001f525', 'CONTROL': '\x00\x1f', 'QUOTES': '\'"', 'HASH': '# x'}
    assert data == loads(formats.dumps('dotenv', data))


def test_dumps_json() -> None:
    """Serialize to JSON, keeping the order of the keys."""
    assert DATA == json.loads(formats.dumps('json', DATA))
    assert formats.dumps('json', DATA).startswith('{"GREETING"')


def test_dumps_toml() -> None:
    """Serialize to TOML with `tomlkit`."""
    assert 'FOO = "bar"\n' == formats.dumps('toml', {'FOO': 'bar'})


@pytest.mark.parametrize('fmt', ['yaml', 'yml'])
def test_dumps_yaml(fmt: formats.FormatT) -> None:
    """Both `yaml` and `yml` serialize to YAML."""
    assert 'FOO: bar\n' == formats.dumps(fmt, {'FOO': 'bar'})


def test_dumps_unsupported() -> None:
    """Unknown formats are rejected."""
    with pytest.raises(ValueError, match='unsupported format'):
        formats.dumps('ini', DATA)  # type: ignore[arg-type]


@pytest.mark.parametrize(
    ('value', 'expected'),
    [
        ('', '""'),
        ('plain', '"plain"'),
        ('"', '"\\""'),
        ('\\', '"\\\\"'),
        ('\r\n\t', '"\\r\\n\\t"'),
        ('\x00', '"\\u0000"'),
        ('\x7f', '"\x7f"'),
        ('été', '"été"'),
    ],
)
def test_quote(value: str, expected: str) -> None:
    """Only the double quote, the backslash, and control characters are escaped."""
    assert expected == formats.quote(value)


def test_resolve_format() -> None:
    """Known format names are returned as-is."""
    assert 'toml' == formats.resolve_format('toml')


def test_resolve_format_template(example_template_file: Path) -> None:
    """Any other value is the path to a `jinja2` template."""
    template = formats.resolve_format(str(example_template_file))

    assert isinstance(template, jinja2.Template)
    assert 'export GREETING=hello, world' == template.render(loads(b'GREETING="hello, world"'))


def test_resolve_format_missing(tmp_path: Path) -> None:
    """Values that are neither a format nor a file are rejected."""
    with pytest.raises(ValueError, match='missing template file'):
        formats.resolve_format(str(tmp_path / 'missing.j2'))
