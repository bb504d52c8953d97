# SPDX-FileCopyrightText: 2025 The arcanapass authors
#
# SPDX-License-Identifier: MIT

"""arcanapass internals.

Warning:
    Non-public package (implementation detail), provided for didactical
    and educational purposes only. Subject to change without notice,
    including removal.

"""

import arcanapass

__all__ = ()

PROG_NAME = arcanapass.__distribution_name__
VERSION = arcanapass.__version__
AUTHOR = arcanapass.__author__
