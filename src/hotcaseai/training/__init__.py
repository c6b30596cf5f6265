# -*- coding: utf-8 -*-
# SPDX-License-Identifier: MPL-2.0
# Copyright (c) 2026 muffydu37
from .dataset import build_training_frame, synthesize_negatives
from .trainer import ShapeNet, fit_network

__all__ = ["build_training_frame", "synthesize_negatives", "ShapeNet", "fit_network"]
