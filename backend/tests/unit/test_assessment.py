"""
Tests for the rule-based report assessment.
"""
from sitesentinel.services.assessment import quick_assessment, security_insights


def report(score, checks):
    return {
        "overall": {"score": score},
        "categories": [{"category": "Security & HTTPS", "checks": checks}],
    }


def failing(name, severity="critical"):
    return {"name": name, "status": "fail", "severity": severity}


class TestQuickAssessment:
    def test_clean_report(self):
        result = quick_assessment(report(92, [{"name": "a", "status": "pass"}, {"name": "b", "status": "warn"}]))
        assert result.score == 92
        assert result.warnings == 1
        assert result.message.startswith("Excellent security posture with 0 failing checks and 1 warnings")

    def test_more_than_two_failures_caps_at_60(self):
        checks = [failing("HTTPS Encryption"), failing("HSTS Header", "medium"), failing("Form Security")]
        result = quick_assessment(report(88, checks))
        assert result.score == 60
        assert result.failures == 3
        assert result.critical_failures == ["HTTPS Encryption", "Form Security"]
        assert "HTTPS Encryption, Form Security" in result.message

    def test_more_than_five_failures_caps_at_40(self):
        checks = [failing(f"check {i}") for i in range(6)]
        result = quick_assessment(report(95, checks))
        assert result.score == 40
        assert result.message.startswith("Serious security risks detected. 6 failing checks found. ")
        assert "check 0, check 1, check 2." in result.message

    def test_good_band_without_critical_names(self):
        result = quick_assessment(report(74.5, [failing("Meta Title", "high")]))
        assert result.score == 75
        assert result.message.endswith("Address: minor warnings.")

    def test_moderate_band_without_critical_names(self):
        checks = [failing("Meta Title", "high"), failing("HSTS Header", "medium"), failing("Alt Text", "low")]
        result = quick_assessment(report(90, checks))
        assert result.score == 60
        assert result.critical_failures == []
        assert result.message == "Moderate security concerns. 3 failing checks found, none of them critical."

    def test_serious_band_without_critical_names(self):
        result = quick_assessment(report(30, [failing("Meta Title", "high")]))
        assert result.message == "Serious security risks detected. 1 failing checks found, none of them critical."
        assert not result.message.endswith(": .")

    def test_non_finite_overall_score(self):
        result = quick_assessment(report(float("nan"), []))
        assert result.score == 0
        assert "### Overall Risk Score: 0/100" in security_insights(report(float("inf"), []))

    def test_malformed_report(self):
        result = quick_assessment({"overall": "n/a", "categories": ["x", {"checks": [None, {"status": "fail"}]}]})
        assert result.score == 0
        assert result.failures == 1


class TestSecurityInsights:
    def test_lists_findings_and_checklist(self):
        answer = security_insights(report(40, [
            {"name": "HTTPS Encryption", "status": "fail", "severity": "critical", "description": "Site does not use HTTPS"},
            {"name": "HSTS Header", "status": "warn", "severity": "medium", "description": "HSTS not configured"},
        ]))
        assert "- FAIL Security & HTTPS: HTTPS Encryption - Site does not use HTTPS" in answer
        assert "- WARN Security & HTTPS: HSTS Header" in answer
        assert "1. Fix https encryption" in answer
        assert "### Overall Risk Score: 40/100" in answer

    def test_clean_report(self):
        answer = security_insights(report(100, [{"name": "a", "status": "pass"}]))
        assert "No critical issues found" in answer
        assert "All security checks passed" in answer
