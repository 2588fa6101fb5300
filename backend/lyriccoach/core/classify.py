"""
Score classifier: maps the scoring model's 1–3 verdict to a label and tier.

The tier only drives badge styling in the result table and detail view.
"""
from enum import Enum
from typing import Any, NamedTuple


class Tier(str, Enum):
    STRONG = "strong"
    MAYBE  = "maybe"
    WEAK   = "weak"
    NONE   = "none"


class ScoreClass(NamedTuple):
    label: str
    short_label: str
    tier: Tier

    @property
    def badge_class(self) -> str:
        if self.tier is Tier.NONE:
            return "score-badge"
        return f"score-badge score-{self.tier.value}"

    @property
    def number_badge_class(self) -> str:
        if self.tier is Tier.NONE:
            return "score-number-badge"
        return f"score-number-badge score-number-{self.tier.value}"


SCORE_CLASSES: dict[int, ScoreClass] = {
    3: ScoreClass("Strong candidate", "Strong", Tier.STRONG),
    2: ScoreClass("Maybe", "Maybe", Tier.MAYBE),
    1: ScoreClass("Probably not", "Probably not", Tier.WEAK),
}

UNKNOWN = ScoreClass("Unknown", "Unknown", Tier.NONE)


def classify_score(score: Any) -> ScoreClass:
    """Total over every input: anything but 1, 2 or 3 is Unknown."""
    if isinstance(score, bool) or not isinstance(score, int):
        return UNKNOWN
    return SCORE_CLASSES.get(score, UNKNOWN)
