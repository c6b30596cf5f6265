# -*- coding: utf-8 -*-
# SPDX-License-Identifier: MPL-2.0
# Copyright (c) 2026 muffydu37
from .cache import ModelCache
from .predictor import ShapeClassifier, predict, score_text

__all__ = ["ModelCache", "ShapeClassifier", "predict", "score_text"]
