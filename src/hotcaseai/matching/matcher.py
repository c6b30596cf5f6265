# -*- coding: utf-8 -*-
# SPDX-License-Identifier: MPL-2.0
# Copyright (c) 2026 muffydu37
from __future__ import annotations

import functools
import logging
import re
from collections.abc import Sequence
from typing import TypeVar

from ..inference.cache import ModelCache
from ..inference.predictor import predict
from ..schemas import LanguageScore, Model, Regexp, Rule
from ..storage import KeyValueStore
from .cases import NATURAL_CODES, CaseKind, ParsedCase, parse_case
from .detectors import NATURAL_MIN_LENGTH, ModelScorer, NaturalLanguageDetector, ProgrammingLanguageDetector
from .policy import matches_program_case, normalize_scores

logger = logging.getLogger(__name__)

JS_FLAGS = {"i": re.IGNORECASE, "m": re.MULTILINE, "s": re.DOTALL}
IGNORED_FLAGS = {"g", "u", "d"}

T = TypeVar("T", Model, Regexp)


@functools.lru_cache(maxsize=256)
def compile_regexp(pattern: str, flags: str = "") -> re.Pattern[str]:
    value = 0
    for flag in flags:
        if flag in JS_FLAGS:
            value |= JS_FLAGS[flag]
        elif flag not in IGNORED_FLAGS and flag != "y":
            raise re.error(f"unsupported flag {flag!r}")
    return re.compile(pattern, value)


def regexp_matches(regexp: Regexp, text: str) -> bool:
    compiled = compile_regexp(regexp.pattern, regexp.flags)
    if "y" in regexp.flags:
        return compiled.match(text) is not None
    return compiled.search(text) is not None


def _find(items: Sequence[T], item_id: str) -> T | None:
    return next((item for item in items if item.id == item_id), None)


class RuleMatcher:
    """Pick the first rule whose case holds for a piece of text.

    ``models`` and ``regexps`` are the application's registries; they are read
    on every call, so later edits to those lists are seen without rebuilding the
    matcher. Detectors left as ``None`` never match.
    """

    def __init__(
        self,
        *,
        models: Sequence[Model] = (),
        regexps: Sequence[Regexp] = (),
        natural_detector: NaturalLanguageDetector | None = None,
        program_detector: ProgrammingLanguageDetector | None = None,
        scorer: ModelScorer | None = None,
        store: KeyValueStore | None = None,
        cache: ModelCache | None = None,
    ) -> None:
        self.models = models
        self.regexps = regexps
        self.natural_detector = natural_detector
        self.program_detector = program_detector
        self.scorer = scorer if scorer is not None else functools.partial(_predict_with, store=store, cache=cache)

    def match(self, text: str, rules: Sequence[Rule]) -> Rule | None:
        logger.debug("Cases to match: %s", ", ".join(rule.case or "(skip)" for rule in rules))
        program_scores: list[LanguageScore] | None = None

        for rule in rules:
            parsed = parse_case(rule.case)
            if parsed.kind is CaseKind.EMPTY:
                logger.debug("Skipping text classification for rule %s", rule.id)
                return rule

            if parsed.kind is CaseKind.PROGRAM:
                if program_scores is None:
                    program_scores = self._detect_program(text)
                label = self._match_program(parsed, program_scores)
            else:
                label = self._match_case(parsed, text)

            if label is not None:
                logger.debug("Rule %s matched case %s (%s)", rule.id, rule.case, label)
                rule.case_label = label
                return rule
        return None

    def _match_case(self, parsed: ParsedCase, text: str) -> str | None:
        if parsed.kind is CaseKind.BUILTIN:
            return self._match_builtin(parsed, text)
        if parsed.kind is CaseKind.NATURAL:
            return self._match_natural(parsed, text)
        if parsed.kind is CaseKind.REGEXP:
            return self._match_regexp(parsed, text)
        if parsed.kind is CaseKind.MODEL:
            return self._match_model(parsed, text)
        logger.debug("Unknown case %r treated as no match", parsed.key)
        return None

    def _match_builtin(self, parsed: ParsedCase, text: str) -> str | None:
        option = parsed.option
        if option is None or option.pattern is None or not text:
            return None
        return option.label if option.pattern.fullmatch(text) else None

    def _match_natural(self, parsed: ParsedCase, text: str) -> str | None:
        if self.natural_detector is None or parsed.option is None:
            return None
        try:
            detected = self.natural_detector(text, min_length=NATURAL_MIN_LENGTH, only=NATURAL_CODES)
        except Exception:
            logger.exception("Natural language detection failed")
            return None
        return parsed.option.label if detected == parsed.key else None

    def _detect_program(self, text: str) -> list[LanguageScore]:
        if self.program_detector is None:
            return []
        try:
            scores = normalize_scores(self.program_detector(text))
        except Exception:
            logger.exception("Programming language detection failed")
            return []
        logger.debug("Programming language detection: %s", scores[:5])
        return scores

    def _match_program(self, parsed: ParsedCase, scores: list[LanguageScore]) -> str | None:
        if parsed.option is None:
            return None
        return parsed.option.label if matches_program_case(parsed.key, scores) else None

    def _match_regexp(self, parsed: ParsedCase, text: str) -> str | None:
        regexp = _find(self.regexps, parsed.key)
        if regexp is None:
            return None
        try:
            matched = regexp_matches(regexp, text)
        except re.error:
            logger.exception("Invalid regular expression %s: %r", regexp.id, regexp.pattern)
            return None
        return regexp.id if matched else None

    def _match_model(self, parsed: ParsedCase, text: str) -> str | None:
        model = _find(self.models, parsed.key)
        if model is None or not model.model_trained:
            return None
        try:
            confidence = self.scorer(model.id, text)
        except Exception:
            logger.exception("Custom model prediction failed: %s", model.id)
            return None
        if confidence is None:
            return None
        logger.debug("Model %s confidence %.4f (threshold %.2f)", model.id, confidence, model.threshold)
        return model.id if confidence >= model.threshold else None


def _predict_with(
    model_id: str,
    text: str,
    *,
    store: KeyValueStore | None,
    cache: ModelCache | None,
) -> float | None:
    return predict(model_id, text, store=store, cache=cache)


def match(text: str, rules: Sequence[Rule], **kwargs) -> Rule | None:
    return RuleMatcher(**kwargs).match(text, rules)
