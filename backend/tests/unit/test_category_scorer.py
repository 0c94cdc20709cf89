"""
Tests for the severity-weighted category scorer.
"""
import pytest

from sitesentinel.services.scoring.category_scorer import round_half_up, score_category
from sitesentinel.services.scoring.models import CheckRecord, Severity, Status


def check(status, severity="medium", name="check"):
    return CheckRecord(name, status, severity)


class TestScoreCategory:
    def test_empty_is_unavailable(self):
        assert score_category([]) is None

    def test_all_errors_are_unavailable(self):
        checks = [check("error"), check("unavailable", "critical")]
        assert score_category(checks) is None

    @pytest.mark.parametrize("severities", [["critical"], ["low", "high"], ["critical", "medium", "low"]])
    def test_all_pass_scores_100(self, severities):
        assert score_category([check("pass", s) for s in severities]) == 100

    def test_all_fail_scores_0(self):
        assert score_category([check("fail", "critical"), check("fail", "low")]) == 0

    def test_severity_weighting(self):
        # (0 * 3 + 100 * 0.5) / 3.5 = 14.28
        checks = [check("fail", "critical", "A"), check("pass", "low", "B")]
        assert score_category(checks) == 14

    def test_critical_pass_with_medium_warn(self):
        # (100 * 3 + 60 * 1) / 4 = 90
        checks = [check("pass", "critical", "A"), check("warn", "medium", "B")]
        assert score_category(checks) == 90

    def test_built_from_plain_mappings(self):
        raw = [
            {"name": "A", "status": "pass", "severity": "critical"},
            {"name": "B", "status": "warn", "severity": "medium"},
        ]
        assert score_category([CheckRecord.from_dict(r) for r in raw]) == 90

    def test_info_counts_75(self):
        assert score_category([check("info")]) == 75

    def test_errors_do_not_dilute_score(self):
        checks = [check("pass", "high"), check("error", "critical"), check("unavailable")]
        assert score_category(checks) == 100

    def test_unknown_status_scores_like_failure(self):
        checks = [check("skipped", "medium"), check("pass", "medium")]
        assert checks[0].status is Status.UNKNOWN
        assert score_category(checks) == 50

    def test_unknown_severity_weighs_as_medium(self):
        unknown = CheckRecord("A", "fail", "blocker")
        assert unknown.severity is Severity.MEDIUM
        assert score_category([unknown, check("pass", "medium")]) == 50

    def test_status_parsing_is_case_insensitive(self):
        assert check("PASS").status is Status.PASS
        assert check(" Warn ").status is Status.WARN

    def test_deterministic(self):
        checks = [check("pass", "critical"), check("warn", "low"), check("fail", "high")]
        assert score_category(checks) == score_category(list(checks))


class TestRoundHalfUp:
    @pytest.mark.parametrize("value,expected", [(14.28, 14), (0.5, 1), (2.5, 3), (89.5, 90), (89.49, 89), (0, 0)])
    def test_rounding(self, value, expected):
        assert round_half_up(value) == expected
