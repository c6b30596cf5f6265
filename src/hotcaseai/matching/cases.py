# -*- coding: utf-8 -*-
# SPDX-License-Identifier: MPL-2.0
# Copyright (c) 2026 muffydu37
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from types import MappingProxyType

MODEL_MARK = "model-"
REGEXP_MARK = "regexp-"
SCRIPT_MARK = "script-"
PROMPT_MARK = "prompt-"


@dataclass(frozen=True, slots=True)
class CaseOption:
    value: str
    label: str
    pattern: re.Pattern[str] | None = None


class CaseKind(str, Enum):
    EMPTY = "empty"
    BUILTIN = "builtin"
    NATURAL = "natural"
    PROGRAM = "program"
    REGEXP = "regexp"
    MODEL = "model"
    UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True)
class ParsedCase:
    kind: CaseKind
    key: str
    option: CaseOption | None = None


IPV4_OCTET = r"(?:25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)"
IPV6_TAIL = r"((25[0-5]|(2[0-4]|1{0,1}[0-9]){0,1}[0-9])\.){3,3}(25[0-5]|(2[0-4]|1{0,1}[0-9]){0,1}[0-9])"

BUILTIN_PATTERNS: tuple[tuple[str, str, str], ...] = (
    (
        "url",
        "URL",
        r"https?://(?:www\.)?[-a-zA-Z0-9@:%._+~#=]{1,256}\.[a-zA-Z0-9()]{1,6}\b[-a-zA-Z0-9()@:%_+.~#?&/=]*",
    ),
    (
        "email",
        "Email",
        r"[a-z0-9!#$%&'*+/=?^_`{|}~-]+(?:\.[a-z0-9!#$%&'*+/=?^_`{|}~-]+)*"
        r"@(?:[a-z0-9](?:[a-z0-9-]*[a-z0-9])?\.)+[a-z0-9](?:[a-z0-9-]*[a-z0-9])?",
    ),
    ("ipv4", "IPv4 address", rf"{IPV4_OCTET}\.{IPV4_OCTET}\.{IPV4_OCTET}\.{IPV4_OCTET}"),
    (
        "ipv6",
        "IPv6 address",
        r"(([0-9a-fA-F]{1,4}:){7,7}[0-9a-fA-F]{1,4}|([0-9a-fA-F]{1,4}:){1,7}:"
        r"|([0-9a-fA-F]{1,4}:){1,6}:[0-9a-fA-F]{1,4}|([0-9a-fA-F]{1,4}:){1,5}(:[0-9a-fA-F]{1,4}){1,2}"
        r"|([0-9a-fA-F]{1,4}:){1,4}(:[0-9a-fA-F]{1,4}){1,3}|([0-9a-fA-F]{1,4}:){1,3}(:[0-9a-fA-F]{1,4}){1,4}"
        r"|([0-9a-fA-F]{1,4}:){1,2}(:[0-9a-fA-F]{1,4}){1,5}|[0-9a-fA-F]{1,4}:((:[0-9a-fA-F]{1,4}){1,6})"
        r"|:((:[0-9a-fA-F]{1,4}){1,7}|:)|fe80:(:[0-9a-fA-F]{0,4}){0,4}%[0-9a-zA-Z]{1,}"
        rf"|::(ffff(:0{{1,4}}){{0,1}}:){{0,1}}{IPV6_TAIL}"
        rf"|([0-9a-fA-F]{{1,4}}:){{1,4}}:{IPV6_TAIL})",
    ),
    ("uuid", "UUID", r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"),
    (
        "path",
        "File path",
        r"(?:~|\.{1,2})?(?:/[^/\0\n]+)+/?|[A-Za-z]:\\(?:[^\\/:*?\"<>|\r\n]+\\?)*",
    ),
    (
        "iso8601",
        "ISO 8601 timestamp",
        r"\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}(?::\d{2}(?:\.\d+)?)?(?:Z|[+-]\d{2}:?\d{2})?",
    ),
    ("camel_case", "camelCase", r"[a-z][a-z0-9]*(?:[A-Z][a-z0-9]*)+"),
    ("pascal_case", "PascalCase", r"(?:[A-Z][a-z0-9]+){2,}"),
    ("snake_case", "snake_case", r"[a-z][a-z0-9]*(?:_[a-z0-9]+)+"),
    ("kebab_case", "kebab-case", r"[a-z][a-z0-9]*(?:-[a-z0-9]+)+"),
    ("constant_case", "CONSTANT_CASE", r"[A-Z][A-Z0-9]*(?:_[A-Z0-9]+)+"),
)

NATURAL_LANGUAGES: tuple[tuple[str, str], ...] = (
    ("cmn", "Chinese"),
    ("eng", "English"),
    ("jpn", "Japanese"),
    ("kor", "Korean"),
    ("rus", "Russian"),
    ("fra", "French"),
    ("deu", "German"),
    ("spa", "Spanish"),
    ("por", "Portuguese"),
    ("arb", "Arabic"),
)

PROGRAM_LANGUAGES: tuple[tuple[str, str], ...] = (
    ("asm", "Assembly"),
    ("bat", "Batchfile"),
    ("c", "C"),
    ("cs", "C#"),
    ("cpp", "C++"),
    ("clj", "Clojure"),
    ("cmake", "CMake"),
    ("cbl", "COBOL"),
    ("coffee", "CoffeeScript"),
    ("css", "CSS"),
    ("csv", "CSV"),
    ("dart", "Dart"),
    ("dm", "DM"),
    ("dockerfile", "Dockerfile"),
    ("ex", "Elixir"),
    ("erl", "Erlang"),
    ("f90", "Fortran"),
    ("go", "Go"),
    ("groovy", "Groovy"),
    ("hs", "Haskell"),
    ("html", "HTML"),
    ("ini", "INI"),
    ("java", "Java"),
    ("js", "JavaScript"),
    ("json", "JSON"),
    ("jl", "Julia"),
    ("kt", "Kotlin"),
    ("lisp", "Lisp"),
    ("lua", "Lua"),
    ("makefile", "Makefile"),
    ("md", "Markdown"),
    ("matlab", "Matlab"),
    ("mm", "Objective-C"),
    ("ml", "OCaml"),
    ("pas", "Pascal"),
    ("pm", "Perl"),
    ("php", "PHP"),
    ("ps1", "PowerShell"),
    ("prolog", "Prolog"),
    ("py", "Python"),
    ("r", "R"),
    ("rb", "Ruby"),
    ("rs", "Rust"),
    ("scala", "Scala"),
    ("sh", "Shell"),
    ("sql", "SQL"),
    ("swift", "Swift"),
    ("tex", "TeX"),
    ("toml", "TOML"),
    ("ts", "TypeScript"),
    ("v", "Verilog"),
    ("vba", "Visual Basic"),
    ("xml", "XML"),
    ("yaml", "YAML"),
)

BUILTIN_CASES = MappingProxyType(
    {value: CaseOption(value, label, re.compile(pattern)) for value, label, pattern in BUILTIN_PATTERNS}
)
NATURAL_CASES = MappingProxyType({value: CaseOption(value, label) for value, label in NATURAL_LANGUAGES})
PROGRAM_CASES = MappingProxyType({value: CaseOption(value, label) for value, label in PROGRAM_LANGUAGES})

NATURAL_CODES: frozenset[str] = frozenset(NATURAL_CASES)


@lru_cache(maxsize=1024)
def parse_case(value: str) -> ParsedCase:
    """Resolve a rule's case string into the detector that decides it."""
    if value == "":
        return ParsedCase(CaseKind.EMPTY, "")
    if value in BUILTIN_CASES:
        return ParsedCase(CaseKind.BUILTIN, value, BUILTIN_CASES[value])
    if value in NATURAL_CASES:
        return ParsedCase(CaseKind.NATURAL, value, NATURAL_CASES[value])
    if value in PROGRAM_CASES:
        return ParsedCase(CaseKind.PROGRAM, value, PROGRAM_CASES[value])
    if value.startswith(REGEXP_MARK):
        return ParsedCase(CaseKind.REGEXP, value[len(REGEXP_MARK):])
    if value.startswith(MODEL_MARK):
        return ParsedCase(CaseKind.MODEL, value[len(MODEL_MARK):])
    return ParsedCase(CaseKind.UNKNOWN, value)


def case_label(value: str) -> str | None:
    parsed = parse_case(value)
    if parsed.option is not None:
        return parsed.option.label
    if parsed.kind in (CaseKind.REGEXP, CaseKind.MODEL):
        return parsed.key
    return None
