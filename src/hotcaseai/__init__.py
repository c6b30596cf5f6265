# -*- coding: utf-8 -*-
# SPDX-License-Identifier: MPL-2.0
# Copyright (c) 2026 muffydu37
"""Text-shape classification and rule matching for hotkey actions."""

from .errors import HotcaseError, StorageError, ValidationError
from .inference.cache import ModelCache
from .inference.predictor import ShapeClassifier, clear_saved_model, predict
from .matching.matcher import RuleMatcher, match
from .schemas import LanguageScore, Model, Regexp, Rule, TrainingHistory
from .storage import DirectoryStore, MemoryStore

__all__ = [
    "HotcaseError",
    "ValidationError",
    "StorageError",
    "ModelCache",
    "ShapeClassifier",
    "predict",
    "clear_saved_model",
    "RuleMatcher",
    "match",
    "Rule",
    "Model",
    "Regexp",
    "LanguageScore",
    "TrainingHistory",
    "MemoryStore",
    "DirectoryStore",
]
