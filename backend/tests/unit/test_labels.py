"""
Tests for score labels and colours.
"""
import pytest

from sitesentinel.services.scoring.labels import (
    NOT_ANALYZED,
    NOT_ANALYZED_COLOR,
    SCORE_BANDS,
    score_to_color,
    score_to_label,
)


@pytest.mark.parametrize("score,label", [
    (100, "Excellent"),
    (90, "Excellent"),
    (89, "Good"),
    (75, "Good"),
    (74, "Fair"),
    (60, "Fair"),
    (59, "Poor"),
    (45, "Poor"),
    (44, "Critical"),
    (0, "Critical"),
])
def test_label_boundaries(score, label):
    assert score_to_label(score) == label


def test_none_is_not_analyzed():
    assert score_to_label(None) == NOT_ANALYZED
    assert score_to_color(None) == NOT_ANALYZED_COLOR


def test_colors_follow_label_buckets():
    colors = {color for _, _, color in SCORE_BANDS}
    assert len(colors) == 5
    assert score_to_color(90) == score_to_color(100)
    assert score_to_color(89) != score_to_color(90)
    assert score_to_color(44) == score_to_color(0)
    assert NOT_ANALYZED_COLOR not in colors
