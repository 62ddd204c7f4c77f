"""Define a controller class for rendering a `strictenv.source.EnvFile` to its destination."""

from __future__ import annotations

import logging
import typing
from pathlib import Path

import jinja2

from strictenv.formats import FormatT, dumps
from strictenv.source import EnvFile

try:
    from typing import TypeAlias  # type: ignore[attr-defined,unused-ignore]
except ImportError:  # pragma: no cover
    from typing_extensions import TypeAlias  # type: ignore[assignment,attr-defined,unused-ignore]

__all__ = ['ActionType', 'EnvController']

logger = logging.getLogger(__name__)

ActionType: TypeAlias = typing.Callable[[str], typing.Any]


class EnvController:
    """Render a `.env` file in the selected format, and print it or write it to a file.

    >>> ctrl = EnvController(EnvFile(example_env_file), 'dotenv')
    >>> ctrl.get(print)
    GREETING="hello, world"
    EMPTY=""
    """

    fmt: FormatT | jinja2.Template
    """Serialize the parsed document to this format (or render it with this template)."""

    logger: logging.Logger
    """Each `EnvController` has its own logger (named `"strictenv.controller:{source}"`)."""

    output: Path | None
    """Write the rendered document to this file (if set)."""

    source: EnvFile
    """Read the `.env` document from this file."""

    def __init__(self, source: EnvFile, fmt: FormatT | jinja2.Template, output: Path | None = None) -> None:
        """Ensure the parent directory of the output path exists; initialize a logger."""
        self.logger = logging.getLogger(f'{__name__}:{source}')
        self.fmt = fmt
        self.output = output
        self.source = source

        if output:
            output.parent.mkdir(parents=True, exist_ok=True)

    def __str__(self) -> str:
        """Represent the controller as its source populating its destination."""
        fmt = f'template: {self.fmt.name}' if self.is_template else f'format: {self.fmt}'
        return f'{self.source} ({fmt}) -> {self.output or "<stdout>"}'

    @property
    def is_template(self) -> bool:
        """Whether the output is rendered with a `jinja2` template."""
        return isinstance(self.fmt, jinja2.Template)

    def render(self, data: dict[str, str]) -> str:
        """Render the parsed document.

        >>> EnvController(EnvFile(example_env_file), 'json').render({'FOO': 'bar'})
        '{"FOO": "bar"}'
        """
        if isinstance(self.fmt, jinja2.Template):
            return self.fmt.render(data)
        return dumps(self.fmt, data)

    def _write(self, text: str) -> None:
        assert self.output is not None  # noqa: S101  # 👈 for static analysis
        self.logger.debug("Write file: '%s'", self.output)
        self.output.write_text(text + '\n', encoding='utf-8')

    def get(self, do_print: ActionType) -> None:
        """Parse the source and print the rendered document."""
        do_print(self.render(self.source.get()))

    async def aget(self, do_print: ActionType) -> None:
        """Watch the source, and print the rendered document on each update."""
        async for data in self.source.poll():
            do_print(self.render(data))

    def write(self) -> None:
        """Parse the source and write the rendered document to the output file."""
        self._write(self.render(self.source.get()))

    async def awrite(self) -> None:
        """Watch the source, and write the rendered document to the output file on each update."""
        async for data in self.source.poll():
            self._write(self.render(data))


logger.debug('successfully imported %s', __name__)
