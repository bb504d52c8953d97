# SPDX-FileCopyrightText: 2025 The arcanapass authors
#
# SPDX-License-Identifier: MIT
"""Run [`arcanapass.cli.arcanapass`][] on import."""

import sys

if __name__ == '__main__':
    from arcanapass.cli import arcanapass

    sys.exit(arcanapass())
