# -*- coding: utf-8 -*-
# SPDX-License-Identifier: MPL-2.0
# Copyright (c) 2026 muffydu37
"""Decide whether a ranked programming-language guess counts as a match.

Follows the heuristic VS Code uses for the same detector output: the absolute
bar rises with the target's rank, and a clear lead over the next guess is
accepted for the top ranks even when the absolute score is low.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from ..schemas import LanguageScore

INITIAL_THRESHOLD = 0.5
RANK_STEP = 0.1
MIN_CONFIDENCE = 0.2
RELATIVE_THRESHOLD = 0.15
MAX_RELATIVE_RANK = 3


def normalize_scores(results: Iterable[LanguageScore | tuple[str, float]] | None) -> list[LanguageScore]:
    scores = [
        item if isinstance(item, LanguageScore) else LanguageScore(str(item[0]), float(item[1]))
        for item in (results or [])
    ]
    return sorted(scores, key=lambda score: score.confidence, reverse=True)


def absolute_threshold(rank: int) -> float:
    return INITIAL_THRESHOLD + RANK_STEP * rank


def matches_program_case(target_id: str, results: Sequence[LanguageScore]) -> bool:
    if not results:
        return False
    rank = next((index for index, result in enumerate(results) if result.language_id == target_id), -1)
    if rank == -1:
        return False
    confidence = results[rank].confidence

    if confidence > absolute_threshold(rank):
        return True

    if confidence <= MIN_CONFIDENCE or rank >= MAX_RELATIVE_RANK:
        return False
    following = results[rank + 1].confidence if rank + 1 < len(results) else 0.0
    return confidence - following > RELATIVE_THRESHOLD
