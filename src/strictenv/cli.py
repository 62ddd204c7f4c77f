"""Create the `strictenv` CLI with `typer`_.

```sh
❯ strictenv check .env
OK .env (2 keys)
❯ strictenv get --format yaml .env
EMPTY: ''
GREETING: hello, world
```

.. note:: `typer`_ does not support `from __future__ import annotations` as of 2023-12-31

.. _typer: https://typer.tiangolo.com/
"""

import asyncio
import contextlib
import copy
import logging
import logging.config
import typing
from pathlib import Path

import jinja2
import rich
import typer
from rich.markup import escape

from strictenv import __version__, controller, settings
from strictenv.document import load
from strictenv.errors import ParseError
from strictenv.formats import FormatT, resolve_format
from strictenv.settings import schema
from strictenv.source import EnvFile

try:
    from typing import Annotated, TypeAlias  # type: ignore[attr-defined,unused-ignore]
except ImportError:  # pragma: no cover
    from typing_extensions import Annotated, TypeAlias  # type: ignore[assignment,attr-defined,unused-ignore]


# ruff: noqa: PLR0913
# pylint: disable=redefined-outer-name,unused-argument,too-many-arguments

__all__ = [
    'app',
    'check',
    'get',
    'main',
    'version',
]

DEFAULT_FORMAT: FormatT = 'json'
LOG_MISSING_SETTINGS_MESSAGE = "Could not find [bold blue]strictenv[/]'s settings file"
LOG_VERBOSITY_MESSAGE = 'logging verbosity set to [green]%s[/green]'

logger = logging.getLogger(__name__)

app_kwargs: typing.Dict[str, typing.Any] = {
    'context_settings': {'help_option_names': ['-h', '--help']},
    'no_args_is_help': True,
    'rich_markup_mode': 'rich',
}

app = typer.Typer(**app_kwargs)
"""The root `typer`_ application.

.. _typer: https://typer.tiangolo.com/
"""


def help_callback(ctx: typer.Context, value: typing.Optional[bool] = None) -> None:
    """Print the help message for the command."""
    if ctx.resilient_parsing:  # pragma: no cover
        return

    if value:
        rich.print(ctx.get_help())
        raise typer.Exit()


HelpAnnotation: TypeAlias = Annotated[
    typing.Optional[bool],
    typer.Option(
        '-h',
        '--help',
        callback=help_callback,
        rich_help_panel='Global',
        show_default=False,
        is_eager=True,
        help='Show this message and exit.',
    ),
]
FormatAnnotation: TypeAlias = Annotated[
    typing.Optional[str],
    typer.Option(
        '-f',
        '--format',
        help='Serialize to this format ([yellow]dotenv[/], [yellow]json[/], [yellow]toml[/], [yellow]yaml[/]), or'
        ' render with the [bold]jinja2[/] template at this path.',
        metavar='FORMAT|TEMPLATE',
        show_default=False,
    ),
]
OutputAnnotation: TypeAlias = Annotated[
    typing.Optional[Path],
    typer.Option(
        '-o',
        '--output',
        help='Write to this file instead of printing.',
        dir_okay=False,
        show_default=False,
    ),
]
PathsAnnotation: TypeAlias = Annotated[
    typing.List[Path],
    typer.Argument(
        help='Parse the [purple].env[/] file(s) at these path(s); each file is parsed independently.',
        dir_okay=False,
        show_default=False,
        metavar='PATH...',
    ),
]
PollAnnotation: TypeAlias = Annotated[
    typing.Optional[bool],
    typer.Option(
        '-p',
        '--poll',
        help='Enable polling; parse the file(s) again on each change.',
        show_default=False,
    ),
]


def load_config(ctx: typer.Context, value: typing.Optional[Path]) -> None:
    """Load the settings file from the given path."""
    if ctx.resilient_parsing:  # pragma: no cover
        return

    ctx.ensure_object(dict)
    if not value and 'settings' in ctx.obj:
        logger.debug('already loaded settings')
        return

    try:
        settings_file = value or settings.resolve_path()
    except FileNotFoundError as exc:
        logger.debug(
            '%s%s',
            LOG_MISSING_SETTINGS_MESSAGE,
            (' at any of the following locations:\n  - ' + '\n  - '.join(f'{p}' for p in exc.args[1]))
            if len(exc.args) > 1
            else '',
            extra={'markup': True},
        )
        ctx.obj['settings'] = None
        return

    with handle_parse_errors(settings_file):
        conf: settings.Config = settings.load(settings_file)
    ctx.obj['settings'] = conf

    if 'logging_config' in ctx.obj and conf.settings.LOGGING:
        configure_logging(ctx, None)


ConfigAnnotation: TypeAlias = Annotated[
    typing.Optional[Path],
    typer.Option(
        '-c',
        '--config',
        callback=load_config,
        help="Path to [bold blue]strictenv[/]'s own configuration file.",
        rich_help_panel='Global',
        show_default=False,
    ),
]


def configure_logging(ctx: typer.Context, verbose: typing.Optional[bool] = None) -> None:
    """Callback for the `--verbose` option to configure logging verbosity.

    By default, log messages at the `logging.INFO` level:

    >>> configure_logging(ctx)
    >>> caplog.messages
    ['logging verbosity set to [green]INFO[/green]']

    <!-- Clear the `caplog` fixture for the `doctest`, but exclude this from the docs
    >>> caplog.clear()

    -->
    When `verbose` is `True`, log messages at the `logging.DEBUG` level:

    >>> configure_logging(ctx, True)
    >>> caplog.messages
    ['logging verbosity set to [green]DEBUG[/green]']
    """
    if ctx.resilient_parsing:  # pragma: no cover  # this is for tab completions
        return

    ctx.ensure_object(dict)

    # the `--verbose` argument always overrides previous verbosity settings
    verbose = verbose or ctx.obj.get('verbose')
    verbosity = logging.DEBUG if verbose else logging.INFO

    logging_config: schema.DictConfigDefault = ctx.obj.get(
        'logging_config', copy.deepcopy(settings.DEFAULT_LOGGING_CONFIG)
    )

    conf: typing.Optional[settings.Config] = ctx.obj.get('settings')
    new_logging_config: schema.DictConfig = (conf.settings.LOGGING or {}) if conf else {}

    for key, value in new_logging_config.items():
        base = logging_config.get(key, {})
        if isinstance(base, dict):
            base.update(value)  # type: ignore[call-overload]
        else:
            logging_config[key] = value  # type: ignore[literal-required]

    if verbose:
        logging_config['root']['level'] = verbosity
        ctx.obj['verbose'] = verbose

    logging.config.dictConfig(logging_config)  # type: ignore[arg-type]

    ctx.obj['logging_config'] = logging_config

    logger.debug(LOG_VERBOSITY_MESSAGE, logging.getLevelName(verbosity), extra={'markup': True})


VerbosityAnnotation = Annotated[
    typing.Optional[bool],
    typer.Option(
        '-v',
        '--verbose',
        callback=configure_logging,
        rich_help_panel='Global',
        help='Log messages at the [black]DEBUG[/] level.',
        is_eager=True,
        show_default=False,
    ),
]


def version_callback(ctx: typer.Context, value: typing.Optional[bool] = None) -> None:
    """Print the version of the package."""
    if ctx.resilient_parsing:  # pragma: no cover  # this is for tab completions
        return

    if value:
        rich.print(__version__)
        raise typer.Exit()


VersionAnnotation = Annotated[
    typing.Optional[bool],
    typer.Option(
        '-V',
        '--version',
        callback=version_callback,
        rich_help_panel='Global',
        show_default=False,
        is_eager=True,
        help='Print the version and exit.',
    ),
]


@contextlib.contextmanager
def handle_parse_errors(name: typing.Any) -> typing.Iterator[None]:
    """Print errors raised within the managed context, and exit with status code `1`."""
    try:
        yield
    except ParseError as exc:
        rich.print(f'[red]ERROR[/]: [purple]{escape(str(name))}[/]: {escape(str(exc))}')
        raise typer.Exit(1) from exc
    except (OSError, ValueError) as exc:
        rich.print(f'[red]ERROR[/]: {escape(str(exc))}')
        raise typer.Exit(1) from exc


def resolve_output_format(ctx: typer.Context, value: typing.Optional[str]) -> typing.Union[FormatT, jinja2.Template]:
    """Resolve the `--format` option, falling back to the `FORMAT` setting (and then to `DEFAULT_FORMAT`)."""
    conf: typing.Optional[settings.Config] = ctx.obj.get('settings')
    value = value or (conf.settings.FORMAT if conf else None) or DEFAULT_FORMAT
    with handle_parse_errors('--format'):
        return resolve_format(value)


async def poll_all(
    controllers: typing.List[controller.EnvController], get_or_write: typing.Literal['get', 'write']
) -> None:
    """Run the given controllers within an `asyncio` event loop to monitor and apply changes."""
    await asyncio.gather(*[ctrl.aget(typer.echo) if get_or_write == 'get' else ctrl.awrite() for ctrl in controllers])


# ⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯⎯
#                                             command definitions


@app.command()
def get(
    ctx: typer.Context,
    paths: PathsAnnotation,
    fmt: FormatAnnotation = None,
    output: OutputAnnotation = None,
    poll: PollAnnotation = False,
    get_help: HelpAnnotation = None,
    config: ConfigAnnotation = None,
    verbose: VerbosityAnnotation = None,
    version: VersionAnnotation = None,
) -> None:
    """Print the parsed [purple].env[/] file(s) in the selected format."""
    if output and len(paths) > 1:
        rich.print('[red]ERROR[/]: [yellow]--output[/] can only be used with a single file')
        raise typer.Exit(1)

    output_format = resolve_output_format(ctx, fmt)
    controllers = [controller.EnvController(EnvFile(path), output_format, output) for path in paths]

    if poll:
        logger.debug(
            'Begin monitoring: %s',
            ', '.join(f'[yellow]{ctrl.source}[/yellow]' for ctrl in controllers),
            extra={'markup': True},
        )
        with handle_parse_errors(', '.join(f'{path}' for path in paths)):
            asyncio.run(poll_all(controllers, 'write' if output else 'get'))
        return

    for ctrl in controllers:
        logger.debug('Get [yellow]%s[/yellow]', ctrl, extra={'markup': True})
        with handle_parse_errors(ctrl.source):
            if output:
                ctrl.write()
            else:
                ctrl.get(typer.echo)


@app.command()
def check(
    ctx: typer.Context,
    paths: PathsAnnotation,
    get_help: HelpAnnotation = None,
    config: ConfigAnnotation = None,
    verbose: VerbosityAnnotation = None,
    version: VersionAnnotation = None,
) -> None:
    """Verify the [purple].env[/] file(s) can be parsed; stop at the first error."""
    for path in paths:
        with handle_parse_errors(path):
            env = load(path)
        rich.print(f'[green]OK[/] {escape(str(path))} ({len(env)} keys)')


@app.command()
def version(
    ctx: typer.Context,
    get_help: HelpAnnotation = None,
    config: ConfigAnnotation = None,
    verbose: VerbosityAnnotation = None,
    version: VersionAnnotation = None,
) -> None:
    """Print the version and exit."""
    version_callback(ctx, True)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    get_help: HelpAnnotation = None,
    config: ConfigAnnotation = None,
    verbose: VerbosityAnnotation = None,
    version: VersionAnnotation = None,
) -> None:
    """Parse [purple].env[/] files written in a strict, minimal dialect."""
    ctx.ensure_object(dict)

    if not ctx.invoked_subcommand:  # pragma: no cover
        rich.print(ctx.get_help())


logger.debug('successfully imported %s', __name__)
