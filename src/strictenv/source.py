"""Read `.env` documents from local files.

## Example

```sh
❯ strictenv get --poll .env
{"GREETING": "hello, world"}
```

Every change to the file is parsed again from scratch; the parsed values are never merged with previous versions of the
file.
"""

from __future__ import annotations

import logging
import warnings
from pathlib import Path
from typing import AsyncIterator

from watchfiles import awatch  # pyright: ignore[reportUnknownVariableType]

from strictenv.document import load

__all__ = ['EnvFile']

logger = logging.getLogger(__name__)


class EnvFile:
    """Parse the `.env` document in a local file.

    ## Usage

    >>> source = EnvFile(example_env_file)
    >>> source.get()
    {'GREETING': 'hello, world', 'EMPTY': ''}
    """

    path: Path
    """Read the `.env` document from this file"""

    def __init__(self, path: str | Path) -> None:
        """Set attributes to initialize the source.

        If the given `path` doesn't exist, emit a warning and continue.

        >>> with pytest.warns(RuntimeWarning):
        ...     source = EnvFile('does_not_exist')
        """
        logger.debug("Initialize: %s('%s')", self.__class__.__name__, path)
        self.path = Path(path)
        if not self.path.is_file():
            warnings.warn(f'could not read file: {path}', category=RuntimeWarning, stacklevel=2)

    def __repr__(self) -> str:
        """Represent the source as its invocation.

        >>> EnvFile(example_env_file)
        EnvFile(path=PosixPath('...'))
        """
        return f'{self.__class__.__name__}(path={self.path!r})'

    def __str__(self) -> str:
        """Return the source file's path as the string representation of the source."""
        return f'{self.path}'

    def get(self) -> dict[str, str]:
        """Read and parse the contents of the file."""
        return load(self.path)

    async def poll(self) -> AsyncIterator[dict[str, str]]:
        """Watch the file for changes, and yield the parsed document initially and on each change."""
        yield self.get()
        async for _ in awatch(self.path):
            logger.info("Detected change to '%s'", self.path)
            yield self.get()


logger.debug('successfully imported %s', __name__)
