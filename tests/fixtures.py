"""Define fixtures for the test suite."""

from __future__ import annotations

from pathlib import Path
from unittest import mock

import pytest
import pytest_mock

# pylint: disable=redefined-outer-name

MOCK_ENV = b"""
# an example .env file
GREETING = "hello, world"  # the greeting

export EMPTY=
""".strip()

MOCK_SETTINGS = b"""
STRICTENV_FORMAT: yaml
STRICTENV_LOGGING:
  root:
    level: WARNING
""".strip()

MOCK_TEMPLATE = b'export GREETING={{ GREETING }}\n'


@pytest.fixture(autouse=True)
def monkeypatch_env_vars(monkeypatch: pytest.MonkeyPatch) -> None:
    """Monkeypatch environment variables for all tests."""
    monkeypatch.setenv('TERM', 'dumb')


@pytest.fixture(autouse=True)
def monkeypatch_settings_paths(mocker: pytest_mock.MockerFixture, tmp_path: Path) -> list[Path]:
    """Ignore any settings files installed on the host running the tests."""
    paths = [tmp_path / 'does-not-exist' / 'strictenv-settings.yaml']
    mocker.patch('strictenv.settings.DEFAULT_PATHS', new=paths)
    return paths


@pytest.fixture
def example_env_file(tmp_path: Path) -> Path:
    """Write the test `.env` document to a file in the temporary directory."""
    path = tmp_path / 'example.env'
    path.write_bytes(MOCK_ENV)
    return path


example_env_file.__doc__ = f"""Write the test `.env` document to a file in the temporary directory.

```sh
{MOCK_ENV.decode('utf-8')}
```
"""


@pytest.fixture
def example_settings_file(tmp_path: Path) -> Path:
    """Write the test settings to a file in the temporary directory."""
    path = tmp_path / 'strictenv-settings.yaml'
    path.write_bytes(MOCK_SETTINGS)
    return path


@pytest.fixture
def example_template_file(tmp_path: Path) -> Path:
    """Write a `jinja2` template to a file in the temporary directory."""
    path = tmp_path / 'templates' / 'example.env.j2'
    path.parent.mkdir()
    path.write_bytes(MOCK_TEMPLATE)
    return path


@pytest.fixture(autouse=True)
def mock_logging_dict_config(mocker: pytest_mock.MockerFixture) -> mock.MagicMock:
    """Mock the `logging.config.dictConfig()` function."""
    return mocker.patch('logging.config.dictConfig')
