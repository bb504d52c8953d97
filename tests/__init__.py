# SPDX-FileCopyrightText: 2025 The arcanapass authors
#
# SPDX-License-Identifier: MIT

from __future__ import annotations

import contextlib
import os
from typing import TYPE_CHECKING

import click.testing
from typing_extensions import NamedTuple, Self

from arcanapass import clipboard
from arcanapass._internals import cli_helpers, cli_machinery

__all__ = ()

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping, Sequence

    import pytest
    from typing_extensions import Any


DUMMY_SITE = 'github.com'
DUMMY_USERNAME = 'john@example.com'
DUMMY_PASSPHRASE = 'correct horse battery staple'
DUMMY_RESULT = 'zqEnqyq1hAlmV*b!3x'
"""The derived password for the three dummy inputs above."""


class GoldenValue(NamedTuple):
    site: str
    username: str
    master_password: str
    hexdigest: str
    result: str


GOLDEN_VALUES: list[GoldenValue] = [
    GoldenValue(
        DUMMY_SITE,
        DUMMY_USERNAME,
        DUMMY_PASSPHRASE,
        'caab6240ca002cb7aae85f9eee7a2391b2ddbbf0ae099366f75b7f038e9fe0b3',
        DUMMY_RESULT,
    ),
    GoldenValue(
        'example.org',
        'alice',
        'hunter2',
        'ef6b2b5d471a531e9d2a838cc70db671a17423784a70c211408310c1ae0ddb5e',
        'jDkM6K3TocWT^XL&pw',
    ),
    GoldenValue(
        'news.ycombinator.com',
        'bob',
        's3cret',
        '145aa52dcf9586c1740f6e6246a20e310489c71089371b4022a9cef062de1c6f',
        'CB^HZNw@olt6jgHcOZ',
    ),
    GoldenValue(
        'café.example',
        'ñ',
        'Düsseldorf',
        'b64e892dedba5fb30d4098e40995f2aa496f0a4bdbd776cd2e7e0c5239f82972',
        'uZkJ^sSj8N$fth82WI',
    ),
]


def auto_prompt(*args: Any, **kwargs: Any) -> str:
    del args, kwargs  # Unused.
    return DUMMY_PASSPHRASE


class RecordingClipboardSink(clipboard.ClipboardSink):
    """A clipboard sink that records, or refuses, all copy requests."""

    name = 'recorder'

    def __init__(self, *, fail: bool = False) -> None:
        self.fail = fail
        self.contents: list[str] = []

    def copy(self, text: str, /) -> None:
        if self.fail:
            msg = 'recorder is broken'
            raise clipboard.ClipboardUnavailable(msg)
        self.contents.append(text)


@contextlib.contextmanager
def isolated_config(
    monkeypatch: pytest.MonkeyPatch,
    runner: click.testing.CliRunner,
    main_config_str: str | None = None,
) -> Iterator[None]:
    """Run in a temporary, empty application directory.

    If `main_config_str` is given, write it as the user configuration
    file.

    """
    prog_name = cli_helpers.PROG_NAME
    env_name = prog_name.replace(' ', '_').upper() + '_PATH'
    with runner.isolated_filesystem():
        monkeypatch.setenv('HOME', os.getcwd())
        monkeypatch.setenv('USERPROFILE', os.getcwd())
        monkeypatch.delenv(env_name, raising=False)
        config_filename = cli_helpers.config_filename()
        config_filename.parent.mkdir(parents=True, exist_ok=True)
        if main_config_str is not None:
            config_filename.write_text(main_config_str, encoding='UTF-8')
        yield


class CliRunner(click.testing.CliRunner):
    """A [`click.testing.CliRunner`][] with standard CLI logging set up.

    The console script entry point sets up logging before calling into
    `click`; `CliRunner.invoke` bypasses that, so we redo it here.

    """

    def invoke(  # type: ignore[override]
        self,
        cli: click.Command,
        args: Sequence[str] | str | None = None,
        input: str | bytes | None = None,  # noqa: A002
        env: Mapping[str, str | None] | None = None,
        catch_exceptions: bool = True,  # noqa: FBT001,FBT002
        color: bool = False,  # noqa: FBT001,FBT002
        **extra: Any,
    ) -> ReadableResult:
        logging_setup = cli_machinery.StandardCLILogging
        with logging_setup.ensure_standard_logging():
            return ReadableResult.parse(
                super().invoke(
                    cli,
                    args=args,
                    input=input,
                    env=env,
                    catch_exceptions=catch_exceptions,
                    color=color,
                    **extra,
                )
            )


class ReadableResult(NamedTuple):
    """Helper class for formatting and testing click.testing.Result objects."""

    exception: BaseException | None
    exit_code: int
    stdout: str
    stderr: str

    @classmethod
    def parse(cls, r: click.testing.Result, /) -> Self:
        return cls(r.exception, r.exit_code, r.stdout or '', r.stderr or '')

    def clean_exit(
        self, *, output: str = '', empty_stderr: bool = False
    ) -> bool:
        """Return whether the invocation exited cleanly.

        Args:
            output:
                An expected output string.
            empty_stderr:
                Whether standard error must be empty.

        """
        return (
            (
                not self.exception
                or (
                    isinstance(self.exception, SystemExit)
                    and self.exit_code == 0
                )
            )
            and (not output or output in self.stdout)
            and (not empty_stderr or not self.stderr)
        )

    def error_exit(
        self, *, error: str | type[BaseException] = BaseException
    ) -> bool:
        """Return whether the invocation exited uncleanly.

        Args:
            error:
                An expected error message, or an expected exception
                type.

        """
        if isinstance(error, str):
            return (
                isinstance(self.exception, SystemExit)
                and self.exit_code > 0
                and (not error or error in self.stderr)
            )
        return isinstance(self.exception, error)
