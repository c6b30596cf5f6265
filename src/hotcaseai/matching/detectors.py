# -*- coding: utf-8 -*-
# SPDX-License-Identifier: MPL-2.0
# Copyright (c) 2026 muffydu37
from __future__ import annotations

from collections.abc import Callable, Collection, Sequence
from typing import Protocol, Union

from ..schemas import LanguageScore

RankedResult = Sequence[Union[LanguageScore, tuple[str, float]]]

NATURAL_MIN_LENGTH = 2


class NaturalLanguageDetector(Protocol):
    def __call__(self, text: str, *, min_length: int, only: Collection[str]) -> str | None: ...


class ProgrammingLanguageDetector(Protocol):
    def __call__(self, text: str) -> RankedResult: ...


ModelScorer = Callable[[str, str], Union[float, None]]
