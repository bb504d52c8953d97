# SPDX-FileCopyrightText: 2025 The arcanapass authors
#
# SPDX-License-Identifier: MIT

"""Clipboard sinks: hand a derived password to the system clipboard.

The actual clipboard access is delegated to [`pyperclip`][PYPERCLIP],
which knows about `pbcopy` on macOS, the Windows clipboard API, and
`wl-copy`, `xclip`, `xsel` and friends on Linux.  The sink is selected
once, via [`select_clipboard_sink`][], and falls back to a
[`NullClipboardSink`][] if `pyperclip` finds no usable mechanism.

Clipboard failures are never fatal: every failure mode surfaces as
[`ClipboardUnavailable`][], which callers are expected to downgrade to
a diagnostic message.

[PYPERCLIP]: https://pypi.org/project/pyperclip/

"""

from __future__ import annotations

import abc
import logging
from typing import TYPE_CHECKING

import pyperclip
from typing_extensions import override

if TYPE_CHECKING:
    from collections.abc import Callable

    from typing_extensions import Any

__all__ = (
    'ClipboardSink',
    'ClipboardUnavailable',
    'NullClipboardSink',
    'PyperclipClipboardSink',
    'select_clipboard_sink',
)

logger = logging.getLogger(__name__)


class ClipboardUnavailable(RuntimeError):  # noqa: N818
    """The clipboard mechanism is missing or failed."""


class ClipboardSink(abc.ABC):
    """A destination for text bound for the system clipboard."""

    name: str = ''
    """A short, human-readable name for this sink."""

    @abc.abstractmethod
    def copy(self, text: str, /) -> None:
        """Place `text` on the clipboard.

        Raises:
            ClipboardUnavailable:
                The clipboard could not be written to.

        """

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__} {self.name!r}>'


class PyperclipClipboardSink(ClipboardSink):
    """A clipboard sink writing through [`pyperclip.copy`][].

    Attributes:
        mechanism:
            The clipboard mechanism `pyperclip` settled on, for
            diagnostics only.

    """

    def __init__(self, mechanism: str = 'pyperclip', /) -> None:
        self.mechanism = mechanism
        self.name = (
            'pyperclip'
            if mechanism == 'pyperclip'
            else f'pyperclip/{mechanism}'
        )

    @override
    def copy(self, text: str, /) -> None:
        logger.debug('Copying to the clipboard via %s', self.name)
        try:
            pyperclip.copy(text)
        except (pyperclip.PyperclipException, OSError) as exc:
            msg = f'{self.name} failed: {exc}'
            raise ClipboardUnavailable(msg) from exc


class NullClipboardSink(ClipboardSink):
    """The clipboard sink of last resort; always unavailable."""

    name = 'none'

    @override
    def copy(self, text: str, /) -> None:
        del text
        msg = 'no clipboard mechanism found'
        raise ClipboardUnavailable(msg)


def _mechanism_name(copy_func: Callable[..., Any]) -> str:
    name = getattr(copy_func, '__name__', '')
    return name.removeprefix('copy_') or 'pyperclip'


def select_clipboard_sink(
    *,
    determine: Callable[
        [], tuple[Callable[..., Any], Callable[..., Any]]
    ] = pyperclip.determine_clipboard,
) -> ClipboardSink:
    """Select the clipboard sink for this system.

    Ask `pyperclip` to probe the system for a clipboard mechanism.  Its
    "no clipboard" placeholder functions are falsy, which we use to
    detect the absence of any usable mechanism.

    Args:
        determine:
            A [`pyperclip.determine_clipboard`][] work-alike, returning
            a pair of copy and paste functions.

    Returns:
        A [`PyperclipClipboardSink`][] if `pyperclip` found a usable
        mechanism, or else a [`NullClipboardSink`][].

    """
    try:
        copy_func, _paste_func = determine()
    except pyperclip.PyperclipException as exc:
        logger.debug('Clipboard probing failed: %s', exc)
        return NullClipboardSink()
    if not copy_func:
        logger.debug('No clipboard mechanism found')
        return NullClipboardSink()
    mechanism = _mechanism_name(copy_func)
    logger.debug('Selected clipboard mechanism %s', mechanism)
    return PyperclipClipboardSink(mechanism)
