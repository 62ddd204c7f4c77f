"""Check the `strictenv.__main__` entrypoint."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest
from pytest_mock import MockerFixture

from strictenv import __main__, cli


def test_main(mocker: MockerFixture) -> None:
    """Ensure the `typer` app is called."""
    # Arrange
    mock_app = mocker.patch.object(cli, 'app')
    mocker.patch.object(sys, 'argv', ['strictenv', 'version'])

    # Act
    __main__.main()

    # Assert
    mock_app.assert_called_once_with(prog_name='strictenv')


def test_main_args(mocker: MockerFixture) -> None:
    """Verify arguments override `sys.argv`."""
    # Arrange
    mocker.patch.object(sys, 'argv', ['strictenv'])
    mock_sys_exit = mocker.patch.object(sys, 'exit')

    # Act
    __main__.main('version')

    # Assert
    assert ['strictenv', 'version'] == sys.argv
    mock_sys_exit.assert_called_once_with(0)


def test_main_check(
    mocker: MockerFixture, capsys: pytest.CaptureFixture[str], example_env_file: Path, tmp_path: Path
) -> None:
    """Run `python -m strictenv check` against a valid and an invalid document."""
    # Arrange
    invalid = tmp_path / 'invalid.env'
    invalid.write_bytes(b'OK=1\nexport 2FAST=x\n')
    mocker.patch.object(sys, 'argv', ['strictenv'])
    mock_sys_exit = mocker.patch.object(sys, 'exit')

    # Act
    __main__.main('check', str(example_env_file), str(invalid))
    stdout = ' '.join(capsys.readouterr().out.split())

    # Assert
    mock_sys_exit.assert_called_once_with(1)
    assert f'OK {example_env_file} (2 keys)' in stdout
    assert f"ERROR: {invalid}: error on line 2: key must start with [A-Za-z_] but found '2'" in stdout
