# -*- coding: utf-8 -*-
# SPDX-License-Identifier: MPL-2.0
# Copyright (c) 2026 muffydu37
from __future__ import annotations

import logging
import time
from collections.abc import Callable

from ..env import get_float_env
from ..schemas import CacheEntry, ClassifierState

logger = logging.getLogger(__name__)

DEFAULT_MAX_AGE = 60.0 * 60.0


class ModelCache:
    """Loaded classifiers keyed by model id.

    The cache is passive: nothing expires until :meth:`evict_expired` is called.
    Timestamps are seconds from ``clock`` (``time.time`` unless injected).
    """

    def __init__(self, *, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def get(self, model_id: str) -> CacheEntry | None:
        return self._entries.get(model_id)

    def put(self, model_id: str, state: ClassifierState) -> CacheEntry:
        previous = self._entries.get(model_id)
        entry = CacheEntry(state=state, last_used=self._clock())
        self._entries[model_id] = entry
        if previous is not None and previous.state is not state:
            previous.state.release()
        return entry

    def touch(self, model_id: str) -> None:
        entry = self._entries.get(model_id)
        if entry is not None:
            entry.last_used = self._clock()

    def remove(self, model_id: str) -> bool:
        entry = self._entries.pop(model_id, None)
        if entry is None:
            return False
        entry.state.release()
        logger.debug("Cleared model from cache: %s", model_id)
        return True

    def evict_expired(self, max_age: float | None = None) -> list[str]:
        """Drop and release every entry idle for longer than ``max_age`` seconds (default one hour)."""
        if max_age is None:
            max_age = cache_max_age()
        now = self._clock()
        expired = [model_id for model_id, entry in self._entries.items() if now - entry.last_used > max_age]
        for model_id in expired:
            entry = self._entries.pop(model_id)
            entry.state.release()
            logger.debug("Evicted expired cached model: %s", model_id)
        if expired:
            logger.debug("Evicted %d expired models", len(expired))
        return expired

    def clear(self) -> None:
        for entry in self._entries.values():
            entry.state.release()
        self._entries.clear()

    def __contains__(self, model_id: object) -> bool:
        return model_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)


def cache_max_age() -> float:
    return get_float_env("HOTCASE_CACHE_MAX_AGE", DEFAULT_MAX_AGE)
