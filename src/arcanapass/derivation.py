# SPDX-FileCopyrightText: 2025 The arcanapass authors
#
# SPDX-License-Identifier: MIT

"""Deterministic derivation of per-site passwords.

The derivation is a pure function of three text inputs: the site
(or application) name, the username, and the master password.  The
inputs are joined into a canonical byte string, hashed with SHA-256,
and the hexadecimal digest is mapped onto a 16 character alphanumeric
body, into which two special characters are injected.

Warning:
    The canonical encoding, the hash function, the character sets, and
    the exact hex offsets are a compatibility contract: changing any of
    them silently changes every password ever derived.  This includes
    the slight modulo bias in the character selection.

"""

from __future__ import annotations

import hashlib
import logging
from typing import NamedTuple

from typing_extensions import assert_type

__all__ = (
    'ALPHABET',
    'BODY_LENGTH',
    'HASH_ALGORITHM',
    'PASSWORD_LENGTH',
    'SPECIALS',
    'DerivationInput',
    'ValidationError',
    'canonical_input',
    'create_hash',
    'derive_password',
)

logger = logging.getLogger(__name__)

HASH_ALGORITHM = 'sha256'
"""The hash function applied to the canonical byte string.  Fixed."""
ALPHABET = (
    'ABCDEFGHIJKLMNOPQRSTUVWXYZ'
    'abcdefghijklmnopqrstuvwxyz'
    '0123456789'
)
"""The 62 symbols of the password body, in index order."""
SPECIALS = '!@#$%^&*'
"""The 8 special symbols injected into the body, in index order."""
BODY_LENGTH = 16
"""Number of alphanumeric characters in a derived password."""
PASSWORD_LENGTH = BODY_LENGTH + 2
"""Total length of a derived password."""

_HEX_CHUNK = 4
_SPECIAL_CHUNK = 8


class ValidationError(ValueError):
    """One or more of the derivation inputs is empty.

    Attributes:
        fields:
            The names of the offending inputs, in argument order.

    """

    def __init__(self, fields: tuple[str, ...], /) -> None:
        self.fields = fields
        super().__init__(f'empty derivation input: {", ".join(fields)}')


class DerivationInput(NamedTuple):
    """The input triple of a single derivation.

    Attributes:
        site: The site or application name.
        username: The username or e-mail address at that site.
        master_password: The master password.

    """

    site: str
    username: str
    master_password: str

    def validate(self) -> None:
        """Check that all inputs are non-empty strings.

        Raises:
            TypeError:
                An input is not a text string.
            ValidationError:
                At least one input is empty.

        """
        for name, value in zip(self._fields, self):
            if not isinstance(value, str):
                msg = f'{name} must be a str, not {type(value).__name__}'
                raise TypeError(msg)
        empty = tuple(
            name for name, value in zip(self._fields, self) if not value
        )
        if empty:
            raise ValidationError(empty)

    def canonical_bytes(self) -> bytes:
        """Return the canonical byte string of this input.

        This is `master_password:username@site`, encoded as UTF-8.

        """
        return f'{self.master_password}:{self.username}@{self.site}'.encode(
            'UTF-8'
        )

    def derive(self) -> str:
        """Derive the password for this input.  See [`derive_password`][]."""
        return derive_password(self.site, self.username, self.master_password)


def canonical_input(site: str, username: str, master_password: str) -> bytes:
    """Return the canonical byte string for a derivation.

    Args:
        site: The site or application name.
        username: The username at that site.
        master_password: The master password.

    Returns:
        The UTF-8 encoding of `master_password:username@site`.

    Raises:
        TypeError: An input is not a text string.
        ValidationError: At least one input is empty.

    Examples:
        >>> canonical_input('github.com', 'john', 'hunter2')
        b'hunter2:john@github.com'

    """
    inputs = DerivationInput(site, username, master_password)
    inputs.validate()
    return inputs.canonical_bytes()


def create_hash(site: str, username: str, master_password: str) -> str:
    """Return the hex digest underlying a derivation.

    The digest is the SHA-256 hash of the [canonical byte
    string][canonical_input], as 64 lowercase hexadecimal digits.

    Raises:
        TypeError: An input is not a text string.
        ValidationError: At least one input is empty.

    """
    data = canonical_input(site, username, master_password)
    hexdigest = hashlib.new(HASH_ALGORITHM, data).hexdigest()
    assert len(hexdigest) == BODY_LENGTH * _HEX_CHUNK
    return hexdigest


def _hex_int(hexdigest: str, offset: int, length: int) -> int:
    return int(hexdigest[offset : offset + length], 16)


def _body_from_hex(hexdigest: str, /) -> str:
    """Map the hex digest onto the alphanumeric password body.

    Each group of four hex digits (16 bits) selects one symbol of
    [`ALPHABET`][], modulo its length.  Sixteen groups consume the
    whole digest.

    """
    return ''.join(
        ALPHABET[
            _hex_int(hexdigest, i * _HEX_CHUNK, _HEX_CHUNK) % len(ALPHABET)
        ]
        for i in range(BODY_LENGTH)
    )


def _inject_specials(body: str, hexdigest: str, /) -> str:
    """Insert two special characters into the password body.

    The first four groups of eight hex digits select, in turn, the
    first special symbol, the second special symbol, the first
    insertion point (modulo the body length), and the second insertion
    point (modulo the body length plus one).  The second insertion point
    is shifted by one if it lies after the first, to account for the
    already inserted character.

    """
    special1 = SPECIALS[_hex_int(hexdigest, 0, _SPECIAL_CHUNK) % len(SPECIALS)]
    special2 = SPECIALS[_hex_int(hexdigest, 8, _SPECIAL_CHUNK) % len(SPECIALS)]
    pos1 = _hex_int(hexdigest, 16, _SPECIAL_CHUNK) % len(body)
    pos2 = _hex_int(hexdigest, 24, _SPECIAL_CHUNK) % (len(body) + 1)
    result = body[:pos1] + special1 + body[pos1:]
    if pos2 > pos1:
        pos2 += 1
    return result[:pos2] + special2 + result[pos2:]


def derive_password(site: str, username: str, master_password: str) -> str:
    """Derive the password for a site and username.

    Hash the canonical byte string `master_password:username@site` with
    SHA-256, map the hex digest onto sixteen characters `A-Za-z0-9`, and
    insert two characters from `!@#$%^&*` at digest-determined
    positions.  The same inputs always yield the same password.  No
    state is kept, and no I/O is performed.

    Args:
        site:
            The site or application name, e.g. `github.com`.
        username:
            The username or e-mail address at that site.
        master_password:
            The master password.

    Returns:
        The derived password, exactly 18 characters long.

    Raises:
        TypeError:
            An input is not a text string.
        ValidationError:
            At least one input is empty.
        UnicodeEncodeError:
            An input contains lone surrogates, and has no UTF-8
            encoding.

    Examples:
        >>> derive_password(
        ...     'github.com', 'john@example.com',
        ...     'correct horse battery staple',
        ... )
        'zqEnqyq1hAlmV*b!3x'
        >>> derive_password('example.org', 'alice', 'hunter2')
        'jDkM6K3TocWT^XL&pw'
        >>> derive_password('', 'alice', 'hunter2')
        Traceback (most recent call last):
            ...
        arcanapass.derivation.ValidationError: empty derivation input: site

    """
    hexdigest = create_hash(site, username, master_password)
    body = _body_from_hex(hexdigest)
    assert len(body) == BODY_LENGTH
    result = _inject_specials(body, hexdigest)
    assert_type(result, str)
    assert len(result) == PASSWORD_LENGTH
    logger.debug('derived password for site %r, user %r', site, username)
    return result
