r"""Parse a single line of a `.env` document into a key and an unescaped value.

A line is of the form `[export ]KEY[ ]=[ ]VALUE[ #COMMENT]`:

>>> parse_line(b'export FOO = bar # the comment is dropped')
(b'FOO', b'bar')

Blank and comment-only lines are returned as an empty key and value:

>>> parse_line(b'   # nothing to see here')
(b'', b'')

## Values

A value is made of unquoted, single-quoted, and double-quoted segments, concatenated without any separator:

>>> parse_line(rb'SOME_KEY = normal \text' + rb" 'single \n'" + rb' "double\t\"quoted\" " # EOL')
(b'SOME_KEY', b'normal \\text single \\n double\t"quoted" ')

- unquoted segments are taken literally; `#` starts a comment, and unquoted trailing whitespace is dropped
- single-quoted segments are taken literally, including `#` and `\`
- double-quoted segments support the escapes `\"`, `\\`, `\n`, `\t`, `\r`, and `\uXXXX` (including UTF-16 surrogate
  pairs, which are decoded into UTF-8)

>>> parse_line(b'FOO="\\uD83D\\uDE01"')[1].decode('utf-8')
'😁'

Raw control characters are never allowed, no matter the quoting:

>>> parse_line(b"FOO='\x07'")
Traceback (most recent call last):
...
strictenv.errors.LineError: 0x07 is an invalid value character
"""

from __future__ import annotations

import enum
import logging

from strictenv.errors import ErrorKind, LineError

__all__ = ['Mode', 'parse_line']

logger = logging.getLogger(__name__)

EXPORT_PREFIX = b'export '
SEPARATOR = b'='
WHITESPACE = b' \t'

KEY_START = frozenset(b'ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz_')
KEY_CHARS = KEY_START | frozenset(b'0123456789')
HEX_DIGITS = frozenset(b'0123456789ABCDEFabcdef')

BACKSLASH = ord('\\')
DOUBLE_QUOTE = ord('"')
HASH = ord('#')
SINGLE_QUOTE = ord("'")
UNICODE_ESCAPE = ord('u')

ESCAPES = {
    DOUBLE_QUOTE: DOUBLE_QUOTE,
    BACKSLASH: BACKSLASH,
    ord('n'): ord('\n'),
    ord('t'): ord('\t'),
    ord('r'): ord('\r'),
}
"""Map each single-character escape to the byte it decodes to."""

HIGH_SURROGATES = range(0xD800, 0xDC00)
LOW_SURROGATES = range(0xDC00, 0xE000)


class Mode(enum.Enum):
    """The quoting context that determines how the next byte of a value is interpreted."""

    NORMAL = 'normal'
    DOUBLE_QUOTE = 'double quote'
    SINGLE_QUOTE = 'single quote'
    ESCAPE = 'escape'


def _describe(byte: int) -> str:
    """Name the given byte for an error message.

    >>> _describe(ord('1')), _describe(0xC3)
    ("'1'", '0xc3')
    """
    if byte < 0x80:
        return repr(chr(byte))
    return f'0x{byte:02x}'


def _validate_key(key: bytes) -> bytes:
    if key.startswith(EXPORT_PREFIX):
        key = key[len(EXPORT_PREFIX) :]

    if not key:
        raise LineError(ErrorKind.EMPTY_KEY)

    if key[0] not in KEY_START:
        raise LineError(ErrorKind.INVALID_KEY, f'key must start with [A-Za-z_] but found {_describe(key[0])}')

    for byte in key:
        if byte not in KEY_CHARS:
            raise LineError(ErrorKind.INVALID_KEY, f'key characters must be [A-Za-z0-9_] but found {_describe(byte)}')

    return key


def _read_hex(value: bytes, start: int) -> int:
    r"""Read the 4 hex digits of a `\uXXXX` escape beginning at `start`.

    >>> hex(_read_hex(b'\\u2318', 2))
    '0x2318'
    >>> _read_hex(b'\\u23', 2)
    Traceback (most recent call last):
    ...
    strictenv.errors.LineError: incomplete hex sequence
    """
    digits = value[start : start + 4]
    if len(digits) < 4:
        raise LineError(ErrorKind.INCOMPLETE_HEX)

    for byte in digits:
        if byte < 0x20:
            raise LineError(ErrorKind.INVALID_VALUE, f'0x{byte:02x} is an invalid value character')
        if byte >= 0x80:
            raise LineError(ErrorKind.MULTIBYTE_ESCAPE)
        if byte not in HEX_DIGITS:
            raise LineError(ErrorKind.INVALID_HEX, f'invalid hex digit {_describe(byte)} in unicode escape')

    return int(digits, 16)


def _decode_unicode(value: bytes, start: int, out: bytearray, cursor: int) -> tuple[int, int]:
    r"""Decode the `\uXXXX` escape (or surrogate pair) whose digits begin at `start` into `out` at `cursor`.

    Return the new write cursor and the index of the first byte following the escape.
    """
    unit = _read_hex(value, start)
    start += 4

    if unit in LOW_SURROGATES:
        raise LineError(ErrorKind.INCOMPLETE_SURROGATE, f'unexpected low surrogate \\u{unit:04X}')

    if unit in HIGH_SURROGATES:
        follow = value[start : start + 2]
        for byte in follow:
            if byte < 0x20:
                raise LineError(ErrorKind.INVALID_VALUE, f'0x{byte:02x} is an invalid value character')
        if follow[:1] == b'\\' and follow[1:] and follow[1] >= 0x80:
            raise LineError(ErrorKind.MULTIBYTE_ESCAPE)
        if follow != b'\\u':
            raise LineError(ErrorKind.INCOMPLETE_SURROGATE, f'missing low surrogate after \\u{unit:04X}')
        try:
            low = _read_hex(value, start + 2)
        except LineError as exc:
            # control and multibyte characters keep their own kinds, like everywhere else in the value
            if exc.kind in (ErrorKind.INVALID_VALUE, ErrorKind.MULTIBYTE_ESCAPE):
                raise
            raise LineError(ErrorKind.INCOMPLETE_SURROGATE, f'invalid low surrogate after \\u{unit:04X}') from exc
        if low not in LOW_SURROGATES:
            raise LineError(ErrorKind.INCOMPLETE_SURROGATE, f'\\u{low:04X} is not a low surrogate')

        start += 6
        unit = 0x10000 + ((unit - HIGH_SURROGATES.start) << 10) + (low - LOW_SURROGATES.start)

    encoded = chr(unit).encode('utf-8')
    out[cursor : cursor + len(encoded)] = encoded
    return cursor + len(encoded), start


def _unescape(value: bytes) -> bytes:  # noqa: C901,PLR0912
    # escape sequences only ever shrink, so the output never outgrows the input
    out = bytearray(len(value))
    cursor = 0

    # end of the last byte that survives trimming before a comment / end of line
    last_sig = 0

    mode = Mode.NORMAL
    i = 0
    while i < len(value):
        byte = value[i]
        i += 1

        if byte < 0x20:
            raise LineError(ErrorKind.INVALID_VALUE, f'0x{byte:02x} is an invalid value character')

        # only ASCII has special meaning; pass multibyte characters through
        if byte >= 0x80:
            if mode is Mode.ESCAPE:
                raise LineError(ErrorKind.MULTIBYTE_ESCAPE)
            out[cursor] = byte
            cursor += 1
            last_sig = cursor
            continue

        if mode is Mode.NORMAL:
            if byte == DOUBLE_QUOTE:
                mode = Mode.DOUBLE_QUOTE
            elif byte == SINGLE_QUOTE:
                mode = Mode.SINGLE_QUOTE
            elif byte == HASH:
                break
            else:
                out[cursor] = byte
                cursor += 1
                if byte not in WHITESPACE:
                    last_sig = cursor

        elif mode is Mode.DOUBLE_QUOTE:
            if byte == DOUBLE_QUOTE:
                mode = Mode.NORMAL
            elif byte == BACKSLASH:
                mode = Mode.ESCAPE
            else:
                out[cursor] = byte
                cursor += 1
                last_sig = cursor

        elif mode is Mode.SINGLE_QUOTE:
            if byte == SINGLE_QUOTE:
                mode = Mode.NORMAL
            else:
                out[cursor] = byte
                cursor += 1
                last_sig = cursor

        else:
            if byte == UNICODE_ESCAPE:
                cursor, i = _decode_unicode(value, i, out, cursor)
            elif byte in ESCAPES:
                out[cursor] = ESCAPES[byte]
                cursor += 1
            else:
                raise LineError(ErrorKind.INVALID_ESCAPE, f'invalid escape sequence: \\{chr(byte)}')
            last_sig = cursor
            mode = Mode.DOUBLE_QUOTE

    if mode is Mode.DOUBLE_QUOTE:
        raise LineError(ErrorKind.UNMATCHED_DOUBLE)
    if mode is Mode.SINGLE_QUOTE:
        raise LineError(ErrorKind.UNMATCHED_SINGLE)
    if mode is Mode.ESCAPE:
        raise LineError(ErrorKind.INCOMPLETE_ESCAPE)

    del out[last_sig:]
    return bytes(out)


def parse_line(line: bytes) -> tuple[bytes, bytes]:
    r"""Parse one line (without its line terminator) into a `(key, value)` pair.

    An empty key and value are returned for blank and comment-only lines, while an explicitly empty value keeps its key:

    >>> parse_line(b''), parse_line(b'FOO='), parse_line(b'FOO= ')
    ((b'', b''), (b'FOO', b''), (b'FOO', b''))

    A `strictenv.errors.LineError` is raised when the line is invalid; its `kind` identifies the problem:

    >>> parse_line(b'1abc=x')
    Traceback (most recent call last):
    ...
    strictenv.errors.LineError: key must start with [A-Za-z_] but found '1'

    >>> try:
    ...     parse_line(b'''FOO=ok '"ok"' \\"not ok ''  ''')
    ... except LineError as exc:
    ...     exc.kind
    <ErrorKind.UNMATCHED_DOUBLE: 'unmatched "'>
    """
    stripped = line.strip(WHITESPACE)
    if not stripped or stripped[0] == HASH:
        return b'', b''

    key, sep, value = stripped.partition(SEPARATOR)
    if not sep:
        raise LineError(ErrorKind.MISSING_SEPARATOR)

    key = _validate_key(key.rstrip(WHITESPACE))
    value = value.lstrip(WHITESPACE)
    if not value:
        return key, value

    return key, _unescape(value)


logger.debug('successfully imported %s', __name__)
