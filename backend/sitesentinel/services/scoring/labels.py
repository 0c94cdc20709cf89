"""
Score labels and display colours.
"""
from typing import Optional

NOT_ANALYZED = "Not Analyzed"
NOT_ANALYZED_COLOR = "#9ca3af"  # grey

# (minimum score, label, colour), highest first
SCORE_BANDS = [
    (90, "Excellent", "#10b981"),  # green
    (75, "Good", "#3b82f6"),       # blue
    (60, "Fair", "#f59e0b"),       # amber
    (45, "Poor", "#ef4444"),       # red
    (0, "Critical", "#dc2626"),    # dark red
]


def _band(score: float):
    for minimum, label, color in SCORE_BANDS:
        if score >= minimum:
            return label, color
    return SCORE_BANDS[-1][1], SCORE_BANDS[-1][2]


def score_to_label(score: Optional[float]) -> str:
    if score is None:
        return NOT_ANALYZED
    return _band(score)[0]


def score_to_color(score: Optional[float]) -> str:
    if score is None:
        return NOT_ANALYZED_COLOR
    return _band(score)[1]
