# -*- coding: utf-8 -*-
# SPDX-License-Identifier: MPL-2.0
# Copyright (c) 2026 muffydu37
from __future__ import annotations

from collections.abc import Sequence

import pandas as pd
from sklearn.metrics import confusion_matrix, f1_score, precision_score, recall_score

from ..inference.cache import ModelCache
from ..inference.predictor import ShapeClassifier
from ..storage import KeyValueStore


def score_frame(
    model_id: str,
    positives: Sequence[str],
    negatives: Sequence[str],
    *,
    store: KeyValueStore | None = None,
    cache: ModelCache | None = None,
) -> pd.DataFrame:
    classifier = ShapeClassifier(model_id, store=store, cache=cache)
    if not classifier.load_model():
        raise LookupError(f"No trained model stored for {model_id!r}")
    rows = [{"text": text, "label": 1} for text in positives]
    rows.extend({"text": text, "label": 0} for text in negatives)
    frame = pd.DataFrame(rows, columns=["text", "label"])
    frame["score"] = frame["text"].map(classifier.predict)
    return frame


def metrics_at(frame: pd.DataFrame, threshold: float) -> dict[str, float]:
    y_true = frame["label"].astype(int)
    y_pred = (frame["score"] >= threshold).astype(int)
    tn, fp, fn, tp = confusion_matrix(y_true, y_pred, labels=[0, 1]).ravel()
    return {
        "threshold": float(threshold),
        "precision": float(precision_score(y_true, y_pred, zero_division=0)),
        "recall": float(recall_score(y_true, y_pred, zero_division=0)),
        "f1": float(f1_score(y_true, y_pred, zero_division=0)),
        "tn": float(tn),
        "fp": float(fp),
        "fn": float(fn),
        "tp": float(tp),
    }


def threshold_sweep(frame: pd.DataFrame) -> list[dict[str, float]]:
    return [metrics_at(frame, raw / 100.0) for raw in range(5, 96, 5)]


def evaluate_model(
    model_id: str,
    positives: Sequence[str],
    negatives: Sequence[str],
    *,
    threshold: float = 0.5,
    store: KeyValueStore | None = None,
    cache: ModelCache | None = None,
) -> dict[str, object]:
    frame = score_frame(model_id, positives, negatives, store=store, cache=cache)
    return {"metrics": metrics_at(frame, threshold), "thresholds": threshold_sweep(frame)}
