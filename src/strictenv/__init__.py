""".. include:: ../../README.md

# Navigation

## `strictenv.line`

Parse a single `KEY=value` line (the core state machine).

## `strictenv.document`

Parse whole `.env` documents into a `dict`.

## `strictenv.errors`

The error taxonomy shared by both parsers.

## `strictenv.formats`

Serialize parsed documents (including back to `.env` syntax).

## `strictenv.cli`

Commands and CLI documentation.

## `strictenv.settings`

For settings and configuration.
"""  # noqa: D415

from __future__ import annotations

import sys
from typing import Any

__version__ = '0.0.0'

from strictenv.document import load, loads, parse
from strictenv.errors import ErrorKind, LineError, ParseError
from strictenv.line import parse_line

__all__ = ['ErrorKind', 'LineError', 'ParseError', 'load', 'loads', 'parse', 'parse_line']


def main(*args: Any) -> None:  # pylint: disable=missing-function-docstring
    """Entrypoint for the `strictenv` CLI.

    When arguments are provided, they are used to replace `sys.argv[1:]`.
    """
    if args:
        sys.argv[1:] = list(args)

    from strictenv.cli import app

    app(prog_name='strictenv')
