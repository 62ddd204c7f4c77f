"""Configure `doctest` tests."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any
from unittest import mock

import pytest
import pytest_mock
import typer

# pylint: disable=redefined-outer-name,too-many-arguments


@pytest.fixture(autouse=True)
def src_doctest_namespace(  # noqa: PLR0913
    doctest_namespace: dict[str, Any],
    example_env_file: Path,
    example_settings_file: Path,
    example_template_file: Path,
    caplog: pytest.LogCaptureFixture,
    mocker: pytest_mock.MockerFixture,
) -> dict[str, Any]:
    """Add various mocks and patches to the doctest namespace."""
    ctx = mock.MagicMock(spec=typer.Context)
    ctx.resilient_parsing = False
    ctx.obj = {}

    mocker.patch('logging.config.dictConfig')
    caplog.set_level(logging.NOTSET)

    doctest_namespace['example_env_file'] = example_env_file
    doctest_namespace['example_settings_file'] = example_settings_file
    doctest_namespace['example_template_file'] = example_template_file
    doctest_namespace['pytest'] = pytest
    doctest_namespace['ctx'] = ctx
    doctest_namespace['caplog'] = caplog
    return doctest_namespace
