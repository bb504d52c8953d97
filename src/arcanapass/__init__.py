# SPDX-FileCopyrightText: 2025 The arcanapass authors
#
# SPDX-License-Identifier: MIT

"""Stateless, deterministic per-site password derivation."""

__author__ = 'The arcanapass authors'
__distribution_name__ = 'arcanapass'

# Automatically generated.  DO NOT EDIT! Use importlib.metadata instead
# to query the correct values.
__version__ = '0.1.0'
# END automatically generated.
