# SPDX-FileCopyrightText: 2025 The arcanapass authors
#
# SPDX-License-Identifier: MIT

from __future__ import annotations

import datetime
import logging
from typing import TYPE_CHECKING

import hypothesis
import pytest

import tests
from arcanapass import clipboard
from arcanapass._internals import cli_machinery

if TYPE_CHECKING:
    from collections.abc import Iterator

# https://hypothesis.readthedocs.io/en/latest/settings.html#settings-profiles
hypothesis.settings.register_profile('ci', max_examples=1000)
hypothesis.settings.register_profile('dev', max_examples=10)
hypothesis.settings.register_profile(
    'debug', max_examples=10, verbosity=hypothesis.Verbosity.verbose
)
hypothesis.settings.register_profile(
    'flaky', deadline=datetime.timedelta(milliseconds=150)
)


# https://docs.pytest.org/en/stable/explanation/fixtures.html#a-note-about-fixture-cleanup
# https://github.com/pytest-dev/pytest/issues/5243#issuecomment-491522595
@pytest.fixture(scope='session', autouse=True)
def term_handler() -> Iterator[None]:  # pragma: no cover
    try:
        import signal  # noqa: PLC0415

        sigint_handler = signal.getsignal(signal.SIGINT)
    except (ImportError, OSError):
        return
    else:
        orig_term = signal.signal(signal.SIGTERM, sigint_handler)
        yield
        signal.signal(signal.SIGTERM, orig_term)


@pytest.fixture(autouse=True)
def reset_logging_level() -> Iterator[None]:
    """Undo any `--verbose`/`--quiet`/`--debug` from a previous test."""
    yield
    cli_machinery.StandardCLILogging.cli_handler.setLevel(logging.WARNING)
    logging.getLogger(cli_machinery.StandardCLILogging.package_name).setLevel(
        logging.NOTSET
    )


@pytest.fixture(autouse=True)
def system_clipboard(
    monkeypatch: pytest.MonkeyPatch,
) -> tests.RecordingClipboardSink:
    """Never touch the real system clipboard during tests.

    Replaces the clipboard sink selection with a sink that records all
    copied text.

    """
    sink = tests.RecordingClipboardSink()
    monkeypatch.setattr(clipboard, 'select_clipboard_sink', lambda: sink)
    return sink
