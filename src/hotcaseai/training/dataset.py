# -*- coding: utf-8 -*-
# SPDX-License-Identifier: MPL-2.0
# Copyright (c) 2026 muffydu37
from __future__ import annotations

import logging
from collections.abc import Sequence

import numpy as np
import pandas as pd

from ..features import encode_text

logger = logging.getLogger(__name__)

MAX_NEGATIVE_SAMPLES = 20
NEGATIVE_FILL_RATE = 0.3

FRAME_COLUMNS = ["text", "sequence", "label", "source"]


def negative_count(positive_count: int) -> int:
    return min(int(positive_count), MAX_NEGATIVE_SAMPLES)


def synthesize_negatives(
    vocab_size: int,
    count: int,
    max_length: int,
    *,
    rng: np.random.Generator | None = None,
) -> list[list[int]]:
    """Sparse random id sequences standing in for non-matching text.

    Each position independently holds a uniform id in ``[1, vocab_size]`` with
    probability 0.3 and padding (0) otherwise.
    """
    generator = rng if rng is not None else np.random.default_rng()
    if count <= 0:
        return []
    if vocab_size <= 0:
        return [[0] * max_length for _ in range(count)]
    filled = generator.random((count, max_length)) < NEGATIVE_FILL_RATE
    ids = generator.integers(1, vocab_size + 1, size=(count, max_length))
    return np.where(filled, ids, 0).astype(int).tolist()


def build_training_frame(
    positives: Sequence[str],
    vocabulary: dict[str, int],
    max_length: int,
    *,
    rng: np.random.Generator | None = None,
) -> pd.DataFrame:
    rows = [
        {"text": text, "sequence": encode_text(text, vocabulary, max_length), "label": 1, "source": "positive"}
        for text in positives
    ]
    negatives = synthesize_negatives(len(vocabulary), negative_count(len(positives)), max_length, rng=rng)
    rows.extend({"text": "", "sequence": sequence, "label": 0, "source": "synthetic"} for sequence in negatives)
    logger.debug("Training samples: positive=%d, negative=%d", len(positives), len(negatives))
    return pd.DataFrame(rows, columns=FRAME_COLUMNS)


def frame_to_arrays(frame: pd.DataFrame) -> tuple[np.ndarray, np.ndarray]:
    inputs = np.asarray(frame["sequence"].tolist(), dtype=np.int64)
    labels = frame["label"].to_numpy(dtype=np.float32)
    return inputs, labels
