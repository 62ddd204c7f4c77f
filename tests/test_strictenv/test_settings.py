"""Execute tests for reading the CLI's own settings file."""

from __future__ import annotations

from pathlib import Path

import pytest

from strictenv import settings


def test_load(example_settings_file: Path) -> None:
    """The prefix is removed from each setting."""
    conf = settings.load(example_settings_file)

    assert example_settings_file == conf.path
    assert 'yaml' == conf.settings.FORMAT
    assert {'root': {'level': 'WARNING'}} == conf.settings.LOGGING


def test_load_unprefixed_keys(tmp_path: Path) -> None:
    """Settings without the prefix are ignored, and missing settings are false-y."""
    # Arrange
    path = tmp_path / 'settings.yaml'
    path.write_text('STRICTENV_FORMAT: toml\nLOGGING:\n  root:\n    level: DEBUG\n', encoding='utf-8')

    # Act
    conf = settings.load(path)

    # Assert
    assert 'toml' == conf.settings.FORMAT
    assert not conf.settings.LOGGING


def test_load_environment_override(example_settings_file: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Environment variables take precedence over the settings file."""
    monkeypatch.setenv('STRICTENV_FORMAT', 'dotenv')

    assert 'dotenv' == settings.load(example_settings_file).settings.FORMAT


@pytest.mark.parametrize(
    'text',
    [
        '',
        '- STRICTENV_FORMAT\n',
        'STRICTENV_FORMAT: [unclosed\n',
        'STRICTENV_FORMAT: yaml\n  STRICTENV_LOGGING: {\n',
    ],
)
def test_load_invalid(tmp_path: Path, text: str) -> None:
    """The settings file must be valid YAML holding a mapping."""
    path = tmp_path / 'settings.yaml'
    path.write_text(text, encoding='utf-8')

    with pytest.raises(ValueError, match='invalid settings file'):
        settings.load(path)


def test_resolve_path(monkeypatch_settings_paths: list[Path], example_settings_file: Path) -> None:
    """Return the first of the default paths that exists."""
    monkeypatch_settings_paths.append(example_settings_file)

    assert example_settings_file == settings.resolve_path()


def test_resolve_path_missing(monkeypatch_settings_paths: list[Path]) -> None:
    """Raise `FileNotFoundError` with the checked paths when none exist."""
    with pytest.raises(FileNotFoundError) as exc_info:
        settings.resolve_path()

    assert monkeypatch_settings_paths == exc_info.value.args[1]
