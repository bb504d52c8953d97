# SPDX-FileCopyrightText: 2025 The arcanapass authors
#
# SPDX-License-Identifier: MIT

"""Helper functions for the arcanapass command-line.

Warning:
    Non-public module (implementation detail), provided for didactical and
    educational purposes only. Subject to change without notice, including
    removal.

"""

from __future__ import annotations

import logging
import os
import pathlib
import sys
import unicodedata
from typing import TYPE_CHECKING, cast

import click
from typing_extensions import Any

import arcanapass
from arcanapass._internals import PROG_NAME

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

if TYPE_CHECKING:
    from collections.abc import Mapping

__author__ = arcanapass.__author__
__version__ = arcanapass.__version__

CONFIG_SECTION = PROG_NAME
NORMALIZATION_FORMS = frozenset({'NFC', 'NFD', 'NFKC', 'NFKD'})
DEFAULT_NORMALIZATION_FORM = 'NFC'

# Error messages
INVALID_USER_CONFIG = 'Invalid user config'


def config_filename() -> pathlib.Path:
    """Return the filename of the user configuration file.

    The file is named `config.toml`, located within the configuration
    directory as determined by the `ARCANAPASS_PATH` environment
    variable, or by [`click.get_app_dir`][] in POSIX mode.

    """
    path = pathlib.Path(
        os.getenv(PROG_NAME.upper() + '_PATH')
        or click.get_app_dir(PROG_NAME, force_posix=True)
    )
    return path / 'config.toml'


def validate_user_config(config: Mapping[str, Any], /) -> None:
    """Check the `arcanapass` section of a parsed user configuration.

    Unknown keys and sections are permitted, and ignored.

    Raises:
        ValueError:
            The configuration contains a value of the wrong type, or an
            unknown Unicode normalization form.

    """
    section = config.get(CONFIG_SECTION, {})
    if not isinstance(section, dict):
        msg = f'{INVALID_USER_CONFIG}: {CONFIG_SECTION} is not a table'
        raise ValueError(msg)  # noqa: TRY004
    clipboard = section.get('clipboard', True)
    if not isinstance(clipboard, bool):
        msg = (
            f'{INVALID_USER_CONFIG}: {CONFIG_SECTION}.clipboard '
            f'must be a boolean, not {clipboard!r}'
        )
        raise ValueError(msg)  # noqa: TRY004
    form = section.get(
        'unicode-normalization-form', DEFAULT_NORMALIZATION_FORM
    )
    if form not in NORMALIZATION_FORMS:
        msg = (
            f'{INVALID_USER_CONFIG}: invalid value {form!r} for config key '
            f'{CONFIG_SECTION}.unicode-normalization-form'
        )
        raise ValueError(msg)


def load_user_config() -> dict[str, Any]:
    """Load the user config from the application directory.

    The filename is obtained via [`config_filename`][].  A missing file
    is treated as an empty configuration.

    Returns:
        The user configuration, as a nested `dict`.

    Raises:
        OSError:
            There was an OS error accessing the file.
        ValueError:
            The data loaded from the file is not a valid configuration
            file.

    """
    filename = config_filename()
    try:
        with filename.open('rb') as fileobj:
            data = tomllib.load(fileobj)
    except FileNotFoundError:
        return {}
    validate_user_config(data)
    return data


def clipboard_enabled(main_config: Mapping[str, Any], /) -> bool:
    """Return whether the configuration enables the clipboard."""
    return bool(main_config.get(CONFIG_SECTION, {}).get('clipboard', True))


def prompt_for_field(label: str, /) -> str:
    """Interactively prompt for a plain-text field.

    Calls [`click.prompt`][] internally, on standard error.  Moved into
    a separate function mainly for testing/mocking purposes.

    Returns:
        The user input, possibly empty.

    """
    return cast(
        'str',
        click.prompt(
            label,
            default='',
            show_default=False,
            err=True,
        ),
    )


def prompt_for_master_password() -> str:
    """Interactively prompt for the master password, without echo.

    Calls [`click.prompt`][] internally, which suspends terminal echo
    for the duration of the prompt and restores it even if the prompt
    is interrupted.  Moved into a separate function mainly for
    testing/mocking purposes.

    Returns:
        The user input, possibly empty.

    """
    return cast(
        'str',
        click.prompt(
            'Master password',
            default='',
            hide_input=True,
            show_default=False,
            err=True,
        ),
    )


def check_for_misleading_passphrase(
    phrase: str,
    /,
    *,
    main_config: Mapping[str, Any],
    ctx: click.Context | None = None,
) -> None:
    """Check for a misleading master password according to user config.

    Look up the desired Unicode normalization form in the user
    configuration, and if the master password is not normalized
    according to this form, issue a warning to the user.  The password
    is used as typed either way.

    Args:
        phrase:
            The master password to vet.
        main_config:
            The parsed main user configuration.
        ctx:
            The click context.  This is necessary to pass output options
            set on the context to the logging machinery.

    Raises:
        AssertionError:
            The main user configuration is invalid.

    """
    form_key = 'unicode-normalization-form'
    form: Any = main_config.get(CONFIG_SECTION, {}).get(
        form_key, DEFAULT_NORMALIZATION_FORM
    )
    if form not in NORMALIZATION_FORMS:
        msg = (
            f'Invalid value {form!r} for config key '
            f'{CONFIG_SECTION}.{form_key}'
        )
        raise AssertionError(msg)
    if not unicodedata.is_normalized(form, phrase):
        logging.getLogger(PROG_NAME).warning(
            (
                'The master password is not %s-normalized.  Its '
                'serialization as a byte string may not be what you '
                'expect it to be, even if it *displays* correctly.  '
                'Please make sure to double-check any derived '
                'passwords for unexpected results.'
            ),
            form,
            stacklevel=2,
            extra={'color': ctx.color if ctx is not None else None},
        )
