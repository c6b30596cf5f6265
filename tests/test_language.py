from hotcaseai.matching.cases import NATURAL_CODES, PROGRAM_CASES
from hotcaseai.matching.language import (
    PYGMENTS_ALIASES,
    LinguaNaturalDetector,
    PygmentsProgramDetector,
)
from hotcaseai.matching.matcher import RuleMatcher
from hotcaseai.schemas import Rule

ENGLISH = "The quick brown fox jumps over the lazy dog while the farmer watches from the porch."
FRENCH = "Le renard brun rapide saute par-dessus le chien paresseux pendant que le fermier regarde."
PYTHON_SCRIPT = "#!/usr/bin/env python\nimport os\n\nprint(os.getcwd())\n"


def _rule(case):
    return Rule(id=f"rule-{case}", key="Alt+KeyL", case=case, action="noop")


class TestLinguaNaturalDetector:
    def test_detects_codes_from_case_table(self):
        detector = LinguaNaturalDetector()
        assert detector(ENGLISH, min_length=2, only=NATURAL_CODES) == "eng"
        assert detector(FRENCH, min_length=2, only=NATURAL_CODES) == "fra"

    def test_short_text_is_undetermined(self):
        assert LinguaNaturalDetector()("a", min_length=2, only=NATURAL_CODES) is None

    def test_result_outside_allowed_set(self):
        assert LinguaNaturalDetector()(ENGLISH, min_length=2, only={"fra"}) is None

    def test_through_matcher(self):
        matcher = RuleMatcher(natural_detector=LinguaNaturalDetector())
        rules = [_rule("fra"), _rule("eng")]
        winner = matcher.match(ENGLISH, rules)
        assert winner is rules[1]
        assert winner.case_label == "English"


class TestPygmentsProgramDetector:
    def test_aliases_cover_known_ids_only(self):
        assert set(PYGMENTS_ALIASES) <= set(PROGRAM_CASES)

    def test_ranked_descending(self):
        scores = PygmentsProgramDetector()(PYTHON_SCRIPT)
        confidences = [score.confidence for score in scores]
        assert confidences == sorted(confidences, reverse=True)
        assert all(0.0 <= value <= 1.0 for value in confidences)

    def test_unknown_alias_is_skipped(self):
        detector = PygmentsProgramDetector({"py": "python", "zz": "no-such-lexer"})
        assert [score.language_id for score in detector(PYTHON_SCRIPT)] == ["py"]

    def test_through_matcher(self):
        matcher = RuleMatcher(program_detector=PygmentsProgramDetector())
        rules = [_rule("rb"), _rule("py")]
        winner = matcher.match(PYTHON_SCRIPT, rules)
        assert winner is rules[1]
        assert winner.case_label == "Python"
