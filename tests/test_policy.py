import pytest

from hotcaseai.matching.policy import absolute_threshold, matches_program_case, normalize_scores
from hotcaseai.schemas import LanguageScore


def _scores(*pairs):
    return normalize_scores(pairs)


class TestProgramPolicy:
    def test_top_rank_absolute(self):
        assert matches_program_case("py", _scores(("py", 0.62), ("js", 0.3)))

    def test_second_rank_relative_margin(self):
        assert matches_program_case("js", _scores(("py", 0.62), ("js", 0.3)))

    def test_absent_target(self):
        assert not matches_program_case("rb", _scores(("py", 0.62), ("js", 0.3)))

    def test_empty_results(self):
        assert not matches_program_case("py", [])

    def test_threshold_grows_with_rank(self):
        assert absolute_threshold(0) == pytest.approx(0.5)
        assert absolute_threshold(3) == pytest.approx(0.8)

    def test_below_minimum_confidence(self):
        assert not matches_program_case("js", _scores(("py", 0.7), ("js", 0.2)))

    def test_narrow_margin(self):
        assert not matches_program_case("js", _scores(("py", 0.4), ("js", 0.35), ("ts", 0.3)))

    def test_rank_four_has_no_relative_rule(self):
        results = _scores(("a", 0.3), ("b", 0.29), ("c", 0.28), ("d", 0.27))
        assert not matches_program_case("d", results)

    def test_third_rank_relative_rule(self):
        assert matches_program_case("c", _scores(("a", 0.3), ("b", 0.29), ("c", 0.28), ("d", 0.1)))

    def test_normalize_sorts_and_accepts_objects(self):
        scores = normalize_scores([("js", 0.1), LanguageScore("py", 0.8)])
        assert [score.language_id for score in scores] == ["py", "js"]
        assert normalize_scores(None) == []
