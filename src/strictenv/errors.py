"""Define the errors raised while parsing `.env` documents.

Every failure raised by `strictenv.line.parse_line()` is a `LineError`; its `LineError.kind` is one of the
`ErrorKind` members. `strictenv.document.parse()` wraps each `LineError` (and any error reading from the underlying
stream) in a `ParseError` carrying the line number:

>>> from strictenv import loads
>>> try:
...     loads(b'A=1\\nB="2\\n')
... except ParseError as exc:
...     print(exc.line, exc.kind)
...     print(exc)
2 ErrorKind.UNMATCHED_DOUBLE
error on line 2: unmatched "

Match on `ParseError.kind` rather than the message text; messages name the offending byte where one exists, and are
meant for humans.
"""

from __future__ import annotations

import enum
import logging

__all__ = ['ErrorKind', 'LineError', 'ParseError']

logger = logging.getLogger(__name__)


class ErrorKind(enum.Enum):
    """The fixed taxonomy of line-level parsing failures.

    Each member's value is the default message used when no offending byte is reported.
    """

    MISSING_SEPARATOR = 'missing "="'
    EMPTY_KEY = 'empty key'
    INVALID_KEY = 'invalid key'
    INVALID_VALUE = 'invalid value'
    UNMATCHED_DOUBLE = 'unmatched "'
    UNMATCHED_SINGLE = "unmatched '"
    INVALID_ESCAPE = 'invalid escape sequence'
    INCOMPLETE_ESCAPE = 'incomplete escape sequence'
    INCOMPLETE_HEX = 'incomplete hex sequence'
    INVALID_HEX = 'invalid hex sequence'
    INCOMPLETE_SURROGATE = 'incomplete UTF-16 surrogate pair'
    MULTIBYTE_ESCAPE = 'multibyte characters disallowed in escape sequences'


class LineError(ValueError):
    """A single line could not be parsed.

    >>> LineError(ErrorKind.EMPTY_KEY)
    LineError(<ErrorKind.EMPTY_KEY: 'empty key'>, 'empty key')
    >>> str(LineError(ErrorKind.INVALID_VALUE, '0x07 is an invalid value character'))
    '0x07 is an invalid value character'
    """

    kind: ErrorKind
    """Identify the failure; compare this instead of the message."""

    def __init__(self, kind: ErrorKind, message: str | None = None) -> None:
        """Default the message to the value of `kind`."""
        super().__init__(kind, message or kind.value)
        self.kind = kind

    def __str__(self) -> str:
        """Return the human-readable message."""
        return f'{self.args[1]}'


class ParseError(ValueError):
    """Wrap an error with the line number at which it occurred.

    A `line` of `0` means the error came from reading the underlying stream, not from the content of a line:

    >>> str(ParseError(0, OSError('disk on fire')))
    'error reading: disk on fire'
    >>> ParseError(0, OSError('disk on fire')).kind is None
    True
    """

    line: int
    """The 1-based number of the offending line, or `0` for errors reading the stream."""

    err: BaseException
    """The underlying error."""

    def __init__(self, line: int, err: BaseException) -> None:
        """Store the line number and the underlying error."""
        super().__init__(line, err)
        self.line = line
        self.err = err

    def __str__(self) -> str:
        """Format the error the same way for every kind of cause."""
        if self.line > 0:
            return f'error on line {self.line}: {self.err}'
        return f'error reading: {self.err}'

    @property
    def kind(self) -> ErrorKind | None:
        """The `ErrorKind` of the underlying `LineError` (`None` for errors reading the stream)."""
        if isinstance(self.err, LineError):
            return self.err.kind
        return None


logger.debug('successfully imported %s', __name__)
