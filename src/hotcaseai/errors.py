# -*- coding: utf-8 -*-
# SPDX-License-Identifier: MPL-2.0
# Copyright (c) 2026 muffydu37
"""Exceptions raised by the classification engine."""

from __future__ import annotations


class HotcaseError(Exception):
    """Base class for every error raised by :mod:`hotcaseai`."""


class ValidationError(HotcaseError, ValueError):
    """Training input could not be normalized into enough distinct samples."""


class StorageError(HotcaseError):
    """A persistent store could not read or write a key."""
