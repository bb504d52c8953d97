# SPDX-FileCopyrightText: 2025 The arcanapass authors
#
# SPDX-License-Identifier: MIT


"""Command-line machinery for arcanapass.

Warning:
    Non-public module (implementation detail), provided for didactical and
    educational purposes only. Subject to change without notice, including
    removal.

"""

from __future__ import annotations

import collections
import importlib.metadata
import inspect
import logging
from typing import TYPE_CHECKING, Callable, Literal, TypeVar

import click
from typing_extensions import Any, ParamSpec

from arcanapass import _internals

if TYPE_CHECKING:
    import types
    from collections.abc import MutableSequence

    from typing_extensions import Self

PROG_NAME = _internals.PROG_NAME
VERSION = _internals.VERSION

P = ParamSpec('P')
R = TypeVar('R')


# Logging
# =======


class ClickEchoStderrHandler(logging.Handler):
    """A [`logging.Handler`][] writing to standard error via `click`.

    The record's `color` attribute, if any, is passed on to
    [`click.echo`][], so that styling follows the click context.

    """

    def emit(self, record: logging.LogRecord) -> None:
        click.echo(
            self.format(record),
            err=True,
            color=getattr(record, 'color', None),
        )


class CLIofPackageFormatter(logging.Formatter):
    """A [`logging.LogRecord`][] formatter for the CLI of a Python package.

    Every line of the message is prefixed with `"PROG_NAME: "` and,
    for debug messages and warnings, a level label.  Timestamps and
    logger names are omitted; attach a different handler if you need
    them.

    """

    level_labels: dict[int, str] = {
        logging.DEBUG: 'Debug',
        logging.INFO: '',
        logging.WARNING: 'Warning',
        logging.ERROR: '',
        logging.CRITICAL: '',
    }
    """"""

    def __init__(self, *, prog_name: str = PROG_NAME) -> None:
        super().__init__()
        self.prog_name = prog_name

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record for display on standard error.

        The warning label is styled in bold; [`click.echo`][] strips
        the styling again where necessary.

        Raises:
            AssertionError:
                The log level is not supported.

        """
        try:
            label = self.level_labels[record.levelno]
        except KeyError:  # pragma: no cover [failsafe]
            msg = f'Unsupported logging level: {record.levelname}'
            raise AssertionError(msg) from None
        if label == 'Warning':
            label = click.style(label, bold=True)
        prefix = f'{self.prog_name}: ' + (f'{label}: ' if label else '')
        text = ''.join(
            prefix + line
            for line in record.getMessage().splitlines(True)  # noqa: FBT003
        )
        if record.exc_info:
            text += self.formatException(record.exc_info) + '\n'
        return text


class StandardLoggingContextManager:
    """A reentrant context manager attaching a handler to a logger.

    The handler is only attached (and later detached) by the outermost
    context that found it missing.  Not thread safe: this modifies
    global logging state.

    """

    def __init__(
        self,
        handler: logging.Handler,
        root_logger: str | None = None,
    ) -> None:
        self.handler = handler
        self.base_logger = logging.getLogger(root_logger)
        self.added: MutableSequence[bool] = collections.deque()

    def __enter__(self) -> Self:
        must_add = self.handler not in self.base_logger.handlers
        self.added.append(must_add)
        if must_add:
            self.base_logger.addHandler(self.handler)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        exc_tb: types.TracebackType | None,
    ) -> Literal[False]:
        if self.added.pop():
            self.base_logger.removeHandler(self.handler)
        return False


class StandardCLILogging:
    """The shared logging setup of the `arcanapass` command-line."""

    prog_name = PROG_NAME
    package_name = PROG_NAME.lower().replace(' ', '_').replace('-', '_')
    cli_formatter = CLIofPackageFormatter(prog_name=prog_name)
    cli_handler = ClickEchoStderrHandler()
    cli_handler.addFilter(logging.Filter(name=package_name))
    cli_handler.setFormatter(cli_formatter)
    cli_handler.setLevel(logging.WARNING)

    @classmethod
    def ensure_standard_logging(cls) -> StandardLoggingContextManager:
        """Return a context manager to ensure standard logging is set up."""
        return StandardLoggingContextManager(
            handler=cls.cli_handler,
            root_logger=cls.package_name,
        )


def adjust_logging_level(
    ctx: click.Context,
    /,
    param: click.Parameter | None = None,
    value: int | None = None,
) -> None:
    """Set the level of logs emitted to standard error.

    Used as the callback of `--debug`, `--verbose` and `--quiet`.  Each
    of those may trigger it, so it must stay idempotent.

    """
    if param is None or value is None or ctx.resilient_parsing:
        return
    StandardCLILogging.cli_handler.setLevel(value)
    logging.getLogger(StandardCLILogging.package_name).setLevel(value)


# Option parsing and grouping
# ===========================


class OptionGroupOption(click.Option):
    """A [`click.Option`][] belonging to a named help section.

    [`CommandWithHelpGroups`][] lists options by section, and prints
    the section's epilog after it.  Concrete sections are subclasses
    setting `option_group_name` and `epilog`; this class itself cannot
    be instantiated.

    """

    option_group_name: str = ''
    """"""
    epilog: str = ''
    """"""

    def __init__(self, *args: Any, **kwargs: Any) -> None:  # noqa: ANN401
        if type(self) is OptionGroupOption:
            raise NotImplementedError
        super().__init__(*args, **kwargs)


class StandardOption(OptionGroupOption):
    option_group_name = 'Other options'


class ClipboardOption(OptionGroupOption):
    """Clipboard options for the CLI."""

    option_group_name = 'Clipboard'
    epilog = (
        'Copying goes through pyperclip, which uses pbcopy (macOS), the '
        'Windows clipboard, or wl-copy, xclip or xsel (Linux and BSD).  '
        'If none is available, the password is only printed.'
    )


class LoggingOption(OptionGroupOption):
    """Logging options for the CLI."""

    option_group_name = 'Logging'


class CommandWithHelpGroups(click.Command):
    """A [`click.Command`][] listing its options in help sections.

    Sections follow the [`OptionGroupOption`][] subclasses in use, in
    order of first appearance, except that "Other options" always comes
    last.  Plain [`click.Option`][] instances are listed under
    "Options".

    See also [`pallets/click#373`][CLICK_ISSUE].

    [CLICK_ISSUE]: https://github.com/pallets/click/issues/373

    """

    def get_help_option(self, ctx: click.Context) -> click.Option | None:
        """Return the help option, filed under "Other options"."""
        names = self.get_help_option_names(ctx)
        if not names or not self.add_help_option:  # pragma: no cover
            return None

        def show_help(
            ctx: click.Context,
            param: click.Parameter,
            value: bool,  # noqa: FBT001
        ) -> None:
            del param
            if value and not ctx.resilient_parsing:
                click.echo(ctx.get_help(), color=ctx.color)
                ctx.exit()

        return StandardOption(
            names,
            is_flag=True,
            is_eager=True,
            expose_value=False,
            callback=show_help,
            help='Show this message and exit.',
        )

    def format_options(
        self,
        ctx: click.Context,
        formatter: click.HelpFormatter,
    ) -> None:
        sections: dict[str, list[tuple[str, str]]] = {}
        epilogs: dict[str, str] = {}
        params = list(self.params)
        help_option = self.get_help_option(ctx)
        if help_option is not None and help_option not in params:
            params.append(help_option)
        for param in params:
            record = param.get_help_record(ctx)
            if record is None:
                continue
            if isinstance(param, OptionGroupOption):
                name = param.option_group_name
                epilogs.setdefault(name, param.epilog)
            else:  # pragma: no cover
                name = 'Options'
            sections.setdefault(name, []).append(record)
        last = StandardOption.option_group_name
        if last in sections:  # pragma: no branch
            sections[last] = sections.pop(last)
        for name, records in sections.items():
            with formatter.section(name):
                formatter.write_dl(records)
            self._write_indented(formatter, epilogs.get(name, ''))

    def format_epilog(
        self,
        ctx: click.Context,
        formatter: click.HelpFormatter,
    ) -> None:
        del ctx
        self._write_indented(formatter, self.epilog or '')

    @staticmethod
    def _write_indented(formatter: click.HelpFormatter, text: str) -> None:
        text = inspect.cleandoc(text)
        if text:
            formatter.write_paragraph()
            with formatter.indentation():
                formatter.write_text(text)


class TopLevelCLIEntryPoint(CommandWithHelpGroups):
    """A [`CommandWithHelpGroups`][] for the top-level command.

    Calling the command as a function (as the console script does) sets
    up standard logging first.  Call `.main` directly to bypass this.

    """

    def __call__(  # pragma: no cover [external-api]
        self,
        *args: Any,  # noqa: ANN401
        **kwargs: Any,  # noqa: ANN401
    ) -> Any:  # noqa: ANN401
        """"""  # noqa: D419
        with StandardCLILogging.ensure_standard_logging():
            return self.main(*args, **kwargs)


# Actual options and callbacks used by arcanapass
# ===============================================


def color_forcing_callback(
    ctx: click.Context,
    param: click.Parameter,
    value: Any,  # noqa: ANN401
) -> None:
    """Disable automatic color (and text highlighting).

    Output is plain text until the `NO_COLOR`/`FORCE_COLOR` conventions
    settle.

    """
    del param, value
    ctx.color = False


def version_option_callback(
    ctx: click.Context,
    param: click.Parameter,
    value: bool,  # noqa: FBT001
) -> None:
    """Print version information, including major dependencies, and exit."""
    del param
    if not value or ctx.resilient_parsing:
        return
    click.echo(
        f'{click.style(PROG_NAME, bold=True)} {VERSION}', color=ctx.color
    )
    click.echo()
    click.echo('Derivation: SHA-256, 16 alphanumeric + 2 special characters.')
    for dependency in ('click', 'pyperclip'):
        click.echo(
            f'Using {dependency} {importlib.metadata.version(dependency)}.',
            color=ctx.color,
        )
    ctx.exit()


def version_option(
    callback: Callable[
        [click.Context, click.Parameter, Any], Any
    ] = version_option_callback,
) -> Callable[[Callable[P, R]], Callable[P, R]]:
    return click.option(
        '--version',
        is_flag=True,
        is_eager=True,
        expose_value=False,
        callback=callback,
        cls=StandardOption,
        help='Show version and feature information, then exit.',
    )


color_forcing_pseudo_option = click.option(
    '--_pseudo-option-color-forcing',
    '_color_forcing',
    is_flag=True,
    is_eager=True,
    expose_value=False,
    hidden=True,
    callback=color_forcing_callback,
    help='(pseudo-option)',
)


def _logging_level_option(
    *param_decls: str, level: int, help: str  # noqa: A002
) -> Callable[[Callable[P, R]], Callable[P, R]]:
    return click.option(
        *param_decls,
        'logging_level',
        is_flag=True,
        flag_value=level,
        expose_value=False,
        callback=adjust_logging_level,
        help=help,
        cls=LoggingOption,
    )


debug_option = _logging_level_option(
    '--debug',
    level=logging.DEBUG,
    help='Also emit debug information.  Implies --verbose.',
)
verbose_option = _logging_level_option(
    '-v',
    '--verbose',
    level=logging.INFO,
    help='Emit extra/progress information to standard error.',
)
quiet_option = _logging_level_option(
    '-q',
    '--quiet',
    level=logging.ERROR,
    help='Suppress even warnings; emit only errors.',
)


def standard_logging_options(f: Callable[P, R]) -> Callable[P, R]:
    """Add the `--debug`, `--verbose` and `--quiet` options to `f`."""
    return debug_option(verbose_option(quiet_option(f)))
