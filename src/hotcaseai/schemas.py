# -*- coding: utf-8 -*-
# SPDX-License-Identifier: MPL-2.0
# Copyright (c) 2026 muffydu37
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .errors import ValidationError

DEFAULT_MAX_SEQUENCE_LENGTH = 50
DEFAULT_EMBEDDING_DIM = 32


def _safe_text(value: object) -> str:
    return str(value or "")


@dataclass(slots=True)
class Rule:
    id: str
    key: str
    case: str
    action: str
    case_label: str | None = None
    action_label: str | None = None

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> Rule:
        if payload.get("case") is None:
            raise ValidationError(f"Rule {payload.get('id')!r} has no case; use \"\" for a rule that always fires")
        return cls(
            id=_safe_text(payload.get("id")),
            key=_safe_text(payload.get("key")),
            case=_safe_text(payload.get("case")),
            action=_safe_text(payload.get("action")),
            case_label=payload.get("caseLabel"),
            action_label=payload.get("actionLabel"),
        )


@dataclass(slots=True)
class Model:
    id: str
    sample: str = ""
    threshold: float = 0.5
    model_trained: bool = False

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> Model:
        return cls(
            id=_safe_text(payload.get("id")),
            sample=_safe_text(payload.get("sample")),
            threshold=float(payload.get("threshold", 0.5)),
            model_trained=bool(payload.get("modelTrained", False)),
        )


@dataclass(slots=True)
class Regexp:
    id: str
    pattern: str
    flags: str = ""

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> Regexp:
        return cls(
            id=_safe_text(payload.get("id")),
            pattern=_safe_text(payload.get("pattern")),
            flags=_safe_text(payload.get("flags")),
        )


@dataclass(slots=True)
class LanguageScore:
    language_id: str
    confidence: float


@dataclass(slots=True)
class ClassifierConfig:
    max_sequence_length: int = DEFAULT_MAX_SEQUENCE_LENGTH
    embedding_dim: int = DEFAULT_EMBEDDING_DIM
    model_trained: bool = False
    tokenizer_size: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "maxSequenceLength": int(self.max_sequence_length),
            "embeddingDim": int(self.embedding_dim),
            "modelTrained": bool(self.model_trained),
            "tokenizerSize": int(self.tokenizer_size),
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> ClassifierConfig:
        return cls(
            max_sequence_length=int(payload["maxSequenceLength"]),
            embedding_dim=int(payload["embeddingDim"]),
            model_trained=bool(payload.get("modelTrained", False)),
            tokenizer_size=int(payload.get("tokenizerSize") or 0),
        )


@dataclass(slots=True)
class TrainingOptions:
    epochs: int = 50
    batch_size: int = 8
    validation_split: float = 0.2
    learning_rate: float = 0.001
    hidden_units: int = 16
    dropout: float = 0.3
    seed: int | None = None


@dataclass(slots=True)
class ClassifierState:
    """Everything needed to score text with one trained classifier."""

    network: Any
    vocabulary: dict[str, int]
    config: ClassifierConfig

    @property
    def usable(self) -> bool:
        return self.network is not None and self.config.model_trained

    def release(self) -> None:
        self.network = None
        self.vocabulary = {}
        self.config.model_trained = False


@dataclass(slots=True)
class CacheEntry:
    state: ClassifierState
    last_used: float


@dataclass(slots=True)
class EpochLog:
    epoch: int
    loss: float
    acc: float
    val_loss: float | None = None
    val_acc: float | None = None


@dataclass(slots=True)
class TrainingHistory:
    positives: int
    negatives: int
    vocabulary_size: int
    epochs: list[EpochLog] = field(default_factory=list)

    @property
    def final(self) -> EpochLog | None:
        return self.epochs[-1] if self.epochs else None

    def to_metrics(self) -> dict[str, float]:
        metrics = {
            "positives": float(self.positives),
            "negatives": float(self.negatives),
            "vocabulary_size": float(self.vocabulary_size),
        }
        last = self.final
        if last is not None:
            metrics["loss"] = last.loss
            metrics["acc"] = last.acc
            if last.val_loss is not None:
                metrics["val_loss"] = last.val_loss
            if last.val_acc is not None:
                metrics["val_acc"] = last.val_acc
        return metrics
