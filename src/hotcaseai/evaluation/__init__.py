# -*- coding: utf-8 -*-
# SPDX-License-Identifier: MPL-2.0
# Copyright (c) 2026 muffydu37
from __future__ import annotations

from .evaluate import evaluate_model, threshold_sweep

__all__ = ["evaluate_model", "threshold_sweep"]
