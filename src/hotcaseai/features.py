# -*- coding: utf-8 -*-
# SPDX-License-Identifier: MPL-2.0
# Copyright (c) 2026 muffydu37
"""Token extraction, vocabulary building and sequence encoding.

Every function here is pure: the same text always yields the same tokens, and
a vocabulary only ever depends on the positive samples it was built from.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence

from .errors import ValidationError

logger = logging.getLogger(__name__)

MIN_TRAINING_SAMPLES = 3
MAX_WORD_LENGTH = 15
NGRAM_RANGE = (2, 4)

ALL_DIGITS_RE = re.compile(r"\d+", flags=re.ASCII)
DATE_FORMAT_RE = re.compile(r"\d{4}-\d{2}-\d{2}", flags=re.ASCII)
DATE_COMPACT_RE = re.compile(r"\d{8}", flags=re.ASCII)
ALNUM_DASH_RE = re.compile(r"[A-Z0-9-]+")
ALNUM_RE = re.compile(r"[A-Z0-9]+")
LETTERS_THEN_DIGITS_RE = re.compile(r"[A-Z]+\d+", flags=re.ASCII)
DIGITS_THEN_LETTERS_RE = re.compile(r"\d+[A-Z]+", flags=re.ASCII)
ALL_UPPER_RE = re.compile(r"[A-Z]+")
ALL_LOWER_RE = re.compile(r"[a-z]+")
TITLE_CASE_RE = re.compile(r"[A-Z][a-z]+")
UPPER_RE = re.compile(r"[A-Z]")
LOWER_RE = re.compile(r"[a-z]")
REPEATED_CHAR_RE = re.compile(r"(.)\1{2,}")
REPEATING_PATTERN_RE = re.compile(r"(.+)\1+")
SPECIAL_CHAR_RE = re.compile(r"[!@#$%^&*(),.?\":{}|<>]")
CHINESE_RE = re.compile(r"[\u4e00-\u9fa5]")
ALL_CHINESE_RE = re.compile(r"[\u4e00-\u9fa5]+")
DIGIT_RUN_RE = re.compile(r"\d+", flags=re.ASCII)
WORD_SPLIT_RE = re.compile(r"[\s\-_./\\:,;!?]+")
NOT_ALNUM_SPACE_RE = re.compile(r"[^a-z0-9\s]")

DELIMITER_FLAGS = (
    ("-", "HAS_DASH"),
    ("_", "HAS_UNDERSCORE"),
    (".", "HAS_DOT"),
    ("/", "HAS_SLASH"),
    (":", "HAS_COLON"),
    (" ", "HAS_SPACE"),
)

DIGIT_SEGMENT_TOKENS = {2: "TWO_DIGIT_SEGMENT", 3: "THREE_DIGIT_SEGMENT", 4: "FOUR_DIGIT_SEGMENT"}


def _is_digit(char: str) -> bool:
    return "0" <= char <= "9"


def _is_ascii_letter(char: str) -> bool:
    return ("a" <= char <= "z") or ("A" <= char <= "Z")


def length_bucket(text: str) -> str:
    size = len(text)
    if size <= 5:
        return "VERY_SHORT"
    if size <= 10:
        return "SHORT"
    if size <= 20:
        return "MEDIUM"
    if size <= 50:
        return "LONG"
    return "VERY_LONG"


def pattern_features(text: str) -> list[str]:
    """Shape flags: length, digit layouts, delimiters, casing and repetition."""
    features = [length_bucket(text)]

    if ALL_DIGITS_RE.fullmatch(text):
        features.append("ALL_DIGITS")
        if 4 <= len(text) <= 20:
            features.append(f"DIGITS_{len(text)}")
    if DATE_FORMAT_RE.fullmatch(text):
        features.append("DATE_FORMAT")
    if DATE_COMPACT_RE.fullmatch(text):
        features.append("DATE_COMPACT")

    upper = text.upper()
    if ALNUM_DASH_RE.fullmatch(upper):
        features.append("ALPHANUMERIC_DASH")
    if ALNUM_RE.fullmatch(upper):
        features.append("ALPHANUMERIC")
    if LETTERS_THEN_DIGITS_RE.fullmatch(upper):
        features.append("LETTERS_THEN_DIGITS")
    if DIGITS_THEN_LETTERS_RE.fullmatch(upper):
        features.append("DIGITS_THEN_LETTERS")

    features.extend(flag for delimiter, flag in DELIMITER_FLAGS if delimiter in text)

    if ALL_UPPER_RE.fullmatch(text):
        features.append("ALL_UPPERCASE")
    if ALL_LOWER_RE.fullmatch(text):
        features.append("ALL_LOWERCASE")
    if TITLE_CASE_RE.fullmatch(text):
        features.append("TITLE_CASE")
    if UPPER_RE.search(text) and LOWER_RE.search(text):
        features.append("MIXED_CASE")

    if REPEATED_CHAR_RE.search(text):
        features.append("HAS_REPEATED_CHARS")
    if REPEATING_PATTERN_RE.fullmatch(text):
        features.append("REPEATING_PATTERN")

    if SPECIAL_CHAR_RE.search(text):
        features.append("HAS_SPECIAL_CHARS")
    if ALL_CHINESE_RE.fullmatch(text):
        features.append("ALL_CHINESE")
    if CHINESE_RE.search(text):
        features.append("HAS_CHINESE")
    return features


def character_features(text: str) -> list[str]:
    features: list[str] = []
    if not text:
        return features

    lowered = text.lower()
    total = float(len(text))
    digit_count = sum(1 for char in lowered if _is_digit(char))
    letter_count = sum(1 for char in lowered if "a" <= char <= "z")
    space_count = lowered.count(" ")
    special_count = len(NOT_ALNUM_SPACE_RE.findall(lowered))

    if digit_count / total > 0.5:
        features.append("MOSTLY_DIGITS")
    if letter_count / total > 0.5:
        features.append("MOSTLY_LETTERS")
    if space_count / total > 0.1:
        features.append("MANY_SPACES")
    if special_count / total > 0.1:
        features.append("MANY_SPECIAL")

    first, last = text[0], text[-1]
    if _is_digit(first):
        features.append("STARTS_WITH_DIGIT")
    if _is_ascii_letter(first):
        features.append("STARTS_WITH_LETTER")
    if _is_digit(last):
        features.append("ENDS_WITH_DIGIT")
    if _is_ascii_letter(last):
        features.append("ENDS_WITH_LETTER")
    return features


def char_ngrams(text: str, min_n: int = NGRAM_RANGE[0], max_n: int = NGRAM_RANGE[1]) -> list[str]:
    lowered = text.lower()
    grams: list[str] = []
    for n in range(min_n, max_n + 1):
        for start in range(len(lowered) - n + 1):
            grams.append(f"NGRAM_{n}_{lowered[start:start + n]}")
    return grams


def word_tokens(text: str) -> list[str]:
    words = [word for word in WORD_SPLIT_RE.split(text.lower()) if word]
    tokens = [f"WORD_{word}" for word in words if len(word) <= MAX_WORD_LENGTH]

    if len(words) == 1:
        tokens.append("SINGLE_WORD")
    elif len(words) <= 3:
        tokens.append("FEW_WORDS")
    elif len(words) <= 10:
        tokens.append("MANY_WORDS")
    else:
        tokens.append("VERY_MANY_WORDS")
    return tokens


def position_features(text: str) -> list[str]:
    features: list[str] = []
    positions = [index for index, char in enumerate(text) if _is_digit(char)]
    if positions:
        first_digit, last_digit = positions[0], positions[-1]
        if first_digit == 0:
            features.append("DIGITS_AT_START")
        if last_digit == len(text) - 1:
            features.append("DIGITS_AT_END")
        if first_digit > 0 and last_digit < len(text) - 1:
            features.append("DIGITS_IN_MIDDLE")

    for segment in DIGIT_RUN_RE.findall(text):
        size = len(segment)
        if size >= 5:
            features.append("LONG_DIGIT_SEGMENT")
        elif size in DIGIT_SEGMENT_TOKENS:
            features.append(DIGIT_SEGMENT_TOKENS[size])
    return features


def extract_tokens(text: str) -> list[str]:
    """Return the distinct tokens of ``text`` in a stable extraction order.

    The result behaves as a set (no duplicates); the order only decides which
    tokens survive when a sequence is truncated.
    """
    text = str(text or "")
    ordered: dict[str, None] = {}
    for group in (
        character_features(text),
        char_ngrams(text),
        word_tokens(text),
        pattern_features(text),
        position_features(text),
    ):
        for token in group:
            ordered.setdefault(token, None)
    return list(ordered)


def build_vocabulary(positive_texts: Iterable[str]) -> dict[str, int]:
    """Assign ids 1..N to every token seen in the positive samples. Id 0 stays free for unknown tokens."""
    seen: dict[str, None] = {}
    for text in positive_texts:
        for token in extract_tokens(text):
            seen.setdefault(token, None)
    vocabulary = {token: index for index, token in enumerate(seen, start=1)}
    logger.debug("Vocabulary size: %d", len(vocabulary))
    return vocabulary


def encode_tokens(tokens: Sequence[str], vocabulary: dict[str, int], max_length: int) -> list[int]:
    sequence = [vocabulary.get(token, 0) for token in tokens][:max_length]
    sequence.extend([0] * (max_length - len(sequence)))
    return sequence


def encode_text(text: str, vocabulary: dict[str, int], max_length: int) -> list[int]:
    return encode_tokens(extract_tokens(text), vocabulary, max_length)


def normalize_training_samples(data: str | Sequence[str]) -> list[str]:
    """Turn raw training input into distinct non-blank samples.

    A string is split on newlines and each line trimmed; a list keeps its
    entries as given, minus blank ones. Raises :class:`ValidationError` when
    fewer than three distinct samples remain.
    """
    if isinstance(data, str):
        candidates = [line.strip() for line in data.split("\n")]
    elif isinstance(data, (list, tuple)):
        candidates = list(data)
    else:
        raise ValidationError("Training data must be a string or a list of strings")

    valid = [item for item in candidates if isinstance(item, str) and item.strip()]
    samples = list(dict.fromkeys(valid))
    if len(samples) < MIN_TRAINING_SAMPLES:
        raise ValidationError(
            f"Training requires at least {MIN_TRAINING_SAMPLES} positive samples, got {len(samples)} valid samples"
        )
    logger.debug("Training data validated: %d positive samples", len(samples))
    return samples
