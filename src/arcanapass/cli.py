# SPDX-FileCopyrightText: 2025 The arcanapass authors
#
# SPDX-License-Identifier: MIT

# ruff: noqa: TRY400

"""Command-line interface for arcanapass."""

from __future__ import annotations

import logging
from typing import NoReturn

import click
from typing_extensions import Any

from arcanapass import _internals, clipboard, derivation
from arcanapass._internals import cli_helpers, cli_machinery

__all__ = ('arcanapass',)

PROG_NAME = _internals.PROG_NAME
VERSION = _internals.VERSION

FIELD_LABELS = {
    'site': 'SITE',
    'username': 'USERNAME',
    'master_password': 'MASTER_PASSWORD',
}


def _unencodable_fields(inputs: derivation.DerivationInput, /) -> list[str]:
    labels = []
    for field, value in zip(inputs._fields, inputs):
        try:
            value.encode('UTF-8')
        except UnicodeEncodeError:
            labels.append(FIELD_LABELS[field])
    return labels


class _ArcanapassContext:
    """The context for a single `arcanapass` command-line call.

    Wraps a [`click.Context`][], and routes diagnostics through the
    package logger so that the CLI logging machinery formats them.

    Attributes:
        logger:
            The logger used for warnings and error messages.
        ctx:
            The underlying [`click.Context`][].

    """

    logger = logging.getLogger(PROG_NAME)
    """"""

    def __init__(self, ctx: click.Context, /) -> None:
        self.ctx = ctx

    def err(self, msg: Any, /, *args: Any) -> NoReturn:  # noqa: ANN401
        """Log an error, then abort the function call."""
        self.logger.error(
            msg, *args, stacklevel=2, extra={'color': self.ctx.color}
        )
        self.ctx.exit(1)

    def warning(self, msg: Any, /, *args: Any) -> None:  # noqa: ANN401
        """Log a warning."""
        self.logger.warning(
            msg, *args, stacklevel=2, extra={'color': self.ctx.color}
        )

    def info(self, msg: Any, /, *args: Any) -> None:  # noqa: ANN401
        """Log an informational message."""
        self.logger.info(
            msg, *args, stacklevel=2, extra={'color': self.ctx.color}
        )

    def get_user_config(self) -> dict[str, Any]:
        """Return the user configuration, or abort if it is unusable."""
        try:
            return cli_helpers.load_user_config()
        except OSError as exc:
            self.err(
                'Cannot load user config: %s: %r',
                exc.strerror,
                exc.filename,
            )
        except ValueError as exc:
            self.err('Cannot load user config: %s', exc)

    def gather_inputs(
        self,
        site: str | None,
        username: str | None,
        master_password: str | None,
    ) -> derivation.DerivationInput:
        """Complete the derivation inputs, prompting where necessary.

        Arguments given on the command-line are taken verbatim, even
        if empty.  Missing arguments are prompted for; the master
        password prompt does not echo.

        """
        if site is None:
            site = cli_helpers.prompt_for_field('Site/App name')
        else:
            self.info('Site/App name: %s', site)
        if username is None:
            username = cli_helpers.prompt_for_field('Username/email')
        else:
            self.info('Username/email: %s', username)
        if master_password is None:
            master_password = cli_helpers.prompt_for_master_password()
        else:
            self.warning(
                'A master password given on the command-line may be '
                'visible in your shell history and in process listings.'
            )
        return derivation.DerivationInput(site, username, master_password)

    def copy_to_clipboard(
        self, sink: clipboard.ClipboardSink, password: str, /
    ) -> None:
        """Hand the password to the clipboard sink.  Never fatal."""
        try:
            sink.copy(password)
        except clipboard.ClipboardUnavailable as exc:
            self.warning(
                'Clipboard not available (%s); '
                'the password is only displayed.',
                exc,
            )
        else:
            self.info('Password copied to clipboard (via %s).', sink.name)


@click.command(
    context_settings={'help_option_names': ['-h', '--help']},
    cls=cli_machinery.TopLevelCLIEntryPoint,
    help=(
        'Derive a password for SITE and USERNAME, deterministically, '
        'from a master password.  Nothing is stored: the same inputs '
        'always yield the same 18-character password.\n\n'
        'Missing arguments are prompted for interactively.  The master '
        'password prompt does not echo your input.'
    ),
    epilog=(
        '\b\n'
        'Examples:\n'
        '  arcanapass\n'
        '  arcanapass github.com john@example.com\n'
        '  arcanapass "My Bank" john@example.com\n'
        '\n'
        'Passing MASTER_PASSWORD on the command-line is not recommended, '
        'as it will be visible in your shell history.'
    ),
)
@click.option(
    '--clipboard/--no-clipboard',
    'use_clipboard',
    default=None,
    help=(
        'Also copy the derived password to the system clipboard '
        '[default: from the user configuration, else --clipboard]'
    ),
    cls=cli_machinery.ClipboardOption,
)
@cli_machinery.standard_logging_options
@cli_machinery.version_option()
@cli_machinery.color_forcing_pseudo_option
@click.argument('site', required=False)
@click.argument('username', required=False)
@click.argument('master_password', required=False)
@click.pass_context
def arcanapass(
    ctx: click.Context,
    /,
    *,
    site: str | None,
    username: str | None,
    master_password: str | None,
    use_clipboard: bool | None,
) -> None:
    """Derive a site password from a master password.

    This is a [`click`][CLICK]-powered command-line interface function,
    and not intended for programmatic use.  Use
    [`derivation.derive_password`][] instead.  (See also
    [`click.testing.CliRunner`][] for controlled, programmatic
    invocation.)

    [CLICK]: https://pypi.org/package/click/

    """
    context = _ArcanapassContext(ctx)
    user_config = context.get_user_config()
    if use_clipboard is None:
        use_clipboard = cli_helpers.clipboard_enabled(user_config)
    sink = clipboard.select_clipboard_sink() if use_clipboard else None
    inputs = context.gather_inputs(site, username, master_password)
    if inputs.master_password:
        cli_helpers.check_for_misleading_passphrase(
            inputs.master_password, main_config=user_config, ctx=ctx
        )
    try:
        password = inputs.derive()
    except derivation.ValidationError as exc:
        context.err(
            'All fields are required; empty: %s.',
            ', '.join(FIELD_LABELS[field] for field in exc.fields),
        )
    except UnicodeEncodeError:
        context.err(
            'Not valid UTF-8 text: %s.',
            ', '.join(_unencodable_fields(inputs)),
        )
    click.echo(password)
    if sink is not None:
        context.copy_to_clipboard(sink, password)


if __name__ == '__main__':
    arcanapass()
