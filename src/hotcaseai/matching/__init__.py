# -*- coding: utf-8 -*-
# SPDX-License-Identifier: MPL-2.0
# Copyright (c) 2026 muffydu37
from .cases import BUILTIN_CASES, NATURAL_CASES, PROGRAM_CASES, parse_case
from .language import LinguaNaturalDetector, PygmentsProgramDetector
from .matcher import RuleMatcher, match
from .policy import matches_program_case

__all__ = [
    "BUILTIN_CASES",
    "NATURAL_CASES",
    "PROGRAM_CASES",
    "parse_case",
    "LinguaNaturalDetector",
    "PygmentsProgramDetector",
    "RuleMatcher",
    "match",
    "matches_program_case",
]
