# -*- coding: utf-8 -*-
# SPDX-License-Identifier: MPL-2.0
# Copyright (c) 2026 muffydu37
"""Concrete language detectors for the natural and programming-language cases.

``LinguaNaturalDetector`` answers with ISO 639-3 codes from the natural case
table. ``PygmentsProgramDetector`` ranks the programming case ids by the
``analyse_text`` score of the matching pygments lexer.
"""

from __future__ import annotations

import logging
from collections.abc import Collection

from lingua import Language, LanguageDetectorBuilder
from pygments.lexers import find_lexer_class_by_name
from pygments.util import ClassNotFound

from ..schemas import LanguageScore

logger = logging.getLogger(__name__)

# lingua uses macrolanguage codes (zho, ara) where the case table uses cmn and arb.
LINGUA_CODES = {
    "CHINESE": "cmn",
    "ENGLISH": "eng",
    "JAPANESE": "jpn",
    "KOREAN": "kor",
    "RUSSIAN": "rus",
    "FRENCH": "fra",
    "GERMAN": "deu",
    "SPANISH": "spa",
    "PORTUGUESE": "por",
    "ARABIC": "arb",
}

PYGMENTS_ALIASES = {
    "asm": "nasm",
    "bat": "batch",
    "c": "c",
    "cs": "csharp",
    "cpp": "cpp",
    "clj": "clojure",
    "cmake": "cmake",
    "cbl": "cobol",
    "coffee": "coffeescript",
    "css": "css",
    "dart": "dart",
    "dockerfile": "docker",
    "ex": "elixir",
    "erl": "erlang",
    "f90": "fortran",
    "go": "go",
    "groovy": "groovy",
    "hs": "haskell",
    "html": "html",
    "ini": "ini",
    "java": "java",
    "js": "javascript",
    "json": "json",
    "jl": "julia",
    "kt": "kotlin",
    "lisp": "common-lisp",
    "lua": "lua",
    "makefile": "make",
    "md": "markdown",
    "matlab": "matlab",
    "mm": "objective-c",
    "ml": "ocaml",
    "pas": "delphi",
    "pm": "perl",
    "php": "php",
    "ps1": "powershell",
    "prolog": "prolog",
    "py": "python",
    "r": "splus",
    "rb": "ruby",
    "rs": "rust",
    "scala": "scala",
    "sh": "bash",
    "sql": "sql",
    "swift": "swift",
    "tex": "tex",
    "toml": "toml",
    "ts": "typescript",
    "v": "verilog",
    "vba": "vb.net",
    "xml": "xml",
    "yaml": "yaml",
}


class LinguaNaturalDetector:
    """Natural-language identification backed by lingua, built on first use."""

    def __init__(self) -> None:
        self._detector = None

    def _build(self):
        if self._detector is None:
            languages = [getattr(Language, name) for name in LINGUA_CODES]
            self._detector = LanguageDetectorBuilder.from_languages(*languages).build()
        return self._detector

    def __call__(self, text: str, *, min_length: int, only: Collection[str]) -> str | None:
        if len(text.strip()) < min_length:
            return None
        language = self._build().detect_language_of(text)
        if language is None:
            return None
        code = LINGUA_CODES.get(language.name)
        return code if code in only else None


class PygmentsProgramDetector:
    """Rank programming-language ids by pygments lexer heuristics, best first."""

    def __init__(self, aliases: dict[str, str] | None = None) -> None:
        self.aliases = dict(aliases if aliases is not None else PYGMENTS_ALIASES)
        self._lexers: dict[str, type] | None = None

    def _resolve(self) -> dict[str, type]:
        if self._lexers is None:
            lexers: dict[str, type] = {}
            for language_id, alias in self.aliases.items():
                try:
                    lexers[language_id] = find_lexer_class_by_name(alias)
                except ClassNotFound:
                    logger.debug("No pygments lexer %r for %s", alias, language_id)
            self._lexers = lexers
        return self._lexers

    def __call__(self, text: str) -> list[LanguageScore]:
        scores = [
            LanguageScore(language_id, float(lexer.analyse_text(text)))
            for language_id, lexer in self._resolve().items()
        ]
        return sorted(scores, key=lambda score: score.confidence, reverse=True)
