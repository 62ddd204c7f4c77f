"""Parse whole `.env` documents, one line at a time.

>>> import io
>>> parse(io.BytesIO(b'# settings\\nexport FOO=bar\\n\\nBAZ="qux" # inline\\nFOO=override\\n'))
{'FOO': 'override', 'BAZ': 'qux'}

Each line is handled by `strictenv.line.parse_line()`; the first invalid line stops parsing, and is reported as a
`strictenv.errors.ParseError` with its 1-based line number:

>>> parse([b'A=1', b'B=bad"', b'C=3'])
Traceback (most recent call last):
...
strictenv.errors.ParseError: error on line 2: unmatched "
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Iterable, Iterator, Union

from strictenv.errors import ErrorKind, LineError, ParseError
from strictenv.line import parse_line

__all__ = ['iter_lines', 'load', 'loads', 'parse']

logger = logging.getLogger(__name__)

# note: `3.8` does not support `X | Y` unions at runtime
LineSource = Union[Iterable[bytes], Iterable[str]]
"""Anything that yields the lines of a document, such as a file opened in binary mode."""


def iter_lines(stream: LineSource) -> Iterator[bytes]:
    r"""Yield the raw bytes of each line in `stream`, without the line terminator.

    Both `\n` and `\r\n` line endings are stripped; lines given as `str` are encoded as UTF-8:

    >>> list(iter_lines([b'A=1\r\n', 'B=2\n', b'C=3']))
    [b'A=1', b'B=2', b'C=3']
    """
    for line in stream:
        raw = line.encode('utf-8') if isinstance(line, str) else line
        if raw.endswith(b'\n'):
            raw = raw[:-1]
            if raw.endswith(b'\r'):
                raw = raw[:-1]
        yield raw


def _decode(raw: bytes) -> str:
    try:
        return raw.decode('utf-8')
    except UnicodeDecodeError as exc:
        raise LineError(ErrorKind.INVALID_VALUE, f'invalid UTF-8 at byte {exc.start}') from exc


def parse(stream: LineSource) -> dict[str, str]:
    """Parse each line of the given `stream` into a `dict`.

    Blank lines and comments are skipped, and keys defined more than once take their last value. Errors reading from
    `stream` (including text streams that fail to decode) are reported with line number `0`:

    >>> def broken():
    ...     yield b'A=1'
    ...     raise OSError('connection reset')
    >>> parse(broken())
    Traceback (most recent call last):
    ...
    strictenv.errors.ParseError: error reading: connection reset
    """
    env: dict[str, str] = {}
    lineno = 0
    try:
        for lineno, line in enumerate(iter_lines(stream), 1):
            try:
                key, value = parse_line(line)
                if key:
                    env[_decode(key)] = _decode(value)
            except LineError as exc:
                raise ParseError(lineno, exc) from exc
    except (OSError, UnicodeError) as exc:
        raise ParseError(0, exc) from exc

    logger.debug('parsed %d key(s) from %d line(s)', len(env), lineno)
    return env


def loads(data: bytes | str) -> dict[str, str]:
    """Parse the `.env` document held in memory.

    >>> loads('FOO="\\\\uD83D\\\\uDE01"')
    {'FOO': '😁'}
    """
    if isinstance(data, str):
        data = data.encode('utf-8')
    return parse(io.BytesIO(data))


def load(path: str | Path) -> dict[str, str]:
    """Open the file at `path` in binary mode and parse it.

    >>> load(example_env_file)['GREETING']
    'hello, world'
    """
    logger.debug("Read file: '%s'", path)
    with Path(path).open('rb') as stream:
        return parse(stream)


logger.debug('successfully imported %s', __name__)
