"""
Explanation engine for a single scored song.

  find_deciding_factor / select_deciding_factor
      The one metric furthest (absolute distance) from its reference target,
      rendered as a single sentence. Ties go to the metric declared first.

  generate_insights
      Up to MAX_INSIGHTS short statements, one per metric, each picked from a
      high / moderate / low band. Metrics are visited in declared order and
      the list is cut at MAX_INSIGHTS.

Targets and band thresholds are hand-tuned against the scoring model's
calibration set, not derived from the data.
"""
import math
from functools import partial
from typing import Callable, List, NamedTuple, Optional

import numpy as np

from lyriccoach.core.formatting import format_fixed, format_percent
from lyriccoach.schemas.result import DecidingFactor, NormalizedRecord

MAX_INSIGHTS = 3

_rate2 = partial(format_fixed, precision=2)
_rate1 = partial(format_fixed, precision=1)


# ── Deciding factor ────────────────────────────────────────────────────────

class Candidate(NamedTuple):
    metric: str
    target: float
    render: Callable[[float], str]
    above: str
    below: str


CANDIDATES: tuple[Candidate, ...] = (
    Candidate(
        "promptable_phrase_coverage", 0.45, format_percent,
        above="Promptable phrases cover {value} of the song, above the {target} mark, "
              "so there are plenty of places to drop in a spoken prompt.",
        below="Promptable phrases cover only {value} of the song, below the {target} mark, "
              "which limits where spoken prompts can go.",
    ),
    Candidate(
        "comfortable_gaps_per_minute", 1.2, _rate2,
        above="The song averages {value} comfortable gaps per minute, above the target of "
              "{target}, giving regular room for prompts.",
        below="The song averages only {value} comfortable gaps per minute, below the target of "
              "{target}, so prompts would often have to wait.",
    ),
    Candidate(
        "usable_density", 0.70, _rate2,
        above="Usable density is {value}, above the target of {target}: most of the song is "
              "built from promptable structure.",
        below="Usable density is only {value}, below the target of {target}: too little of the "
              "song is built from promptable structure.",
    ),
    Candidate(
        "promptable_phrases_per_minute", 5.0, _rate1,
        above="There are {value} promptable phrases per minute, above the target of {target}, "
              "so prompts can keep pace with the lyrics.",
        below="There are only {value} promptable phrases per minute, below the target of "
              "{target}, which leaves long stretches without a prompt.",
    ),
)

_CANDIDATES_BY_METRIC = {c.metric: c for c in CANDIDATES}


def _usable(record: NormalizedRecord, metric: str) -> Optional[float]:
    value = getattr(record, metric, None)
    if value is None or not math.isfinite(value):
        return None
    return value


def find_deciding_factor(record: NormalizedRecord) -> Optional[DecidingFactor]:
    present = []
    for candidate in CANDIDATES:
        value = _usable(record, candidate.metric)
        if value is not None:
            present.append((candidate, value))
    if not present:
        return None

    values  = np.array([v for _, v in present], dtype=np.float64)
    targets = np.array([c.target for c, _ in present], dtype=np.float64)

    # argmax returns the first maximum, which keeps declared order on ties
    best = int(np.argmax(np.abs(values - targets)))
    candidate, value = present[best]

    return DecidingFactor(
        metric=candidate.metric,
        value=value,
        target=candidate.target,
        direction="above" if value >= candidate.target else "below",
    )


def render_deciding_factor(factor: DecidingFactor) -> str:
    candidate = _CANDIDATES_BY_METRIC[factor.metric]
    template = candidate.above if factor.direction == "above" else candidate.below
    return template.format(
        value=candidate.render(factor.value),
        target=candidate.render(factor.target),
    )


def select_deciding_factor(record: NormalizedRecord) -> Optional[str]:
    """Single sentence naming the metric that most decided the score, or None."""
    factor = find_deciding_factor(record)
    if factor is None:
        return None
    return render_deciding_factor(factor)


# ── Insights ───────────────────────────────────────────────────────────────

class Band(NamedTuple):
    metric: str
    high: float
    moderate: float
    render: Callable[[float], str]
    sentences: tuple[str, str, str]   # high, moderate, low


INSIGHT_BANDS: tuple[Band, ...] = (
    Band(
        "promptable_phrase_coverage", 0.55, 0.35, format_percent,
        (
            "Strong phrase coverage: {value} of the song sits in promptable phrases.",
            "Moderate phrase coverage: {value} of the song sits in promptable phrases.",
            "Low phrase coverage: only {value} of the song sits in promptable phrases.",
        ),
    ),
    Band(
        "comfortable_gaps_per_minute", 1.6, 0.8, _rate2,
        (
            "Frequent comfortable gaps ({value} per minute) leave room for prompts throughout.",
            "Comfortable gaps come at a workable pace ({value} per minute).",
            "Comfortable gaps are scarce ({value} per minute); prompts will be crowded.",
        ),
    ),
    Band(
        "promptable_phrases_per_minute", 6.0, 3.0, _rate1,
        (
            "A dense run of promptable phrases ({value} per minute) keeps prompts flowing.",
            "Promptable phrases arrive at a steady rate ({value} per minute).",
            "Few promptable phrases per minute ({value}); long stretches go unprompted.",
        ),
    ),
    Band(
        "usable_density", 0.75, 0.5, _rate2,
        (
            "High usable density ({value}): most of the song is promptable structure.",
            "Usable density is middling ({value}).",
            "Low usable density ({value}): little of the song is promptable structure.",
        ),
    ),
)


def _band_sentence(band: Band, value: float) -> str:
    if value >= band.high:
        template = band.sentences[0]
    elif value >= band.moderate:
        template = band.sentences[1]
    else:
        template = band.sentences[2]
    return template.format(value=band.render(value))


def generate_insights(record: NormalizedRecord) -> List[str]:
    insights: List[str] = []
    for band in INSIGHT_BANDS:
        if len(insights) >= MAX_INSIGHTS:
            break
        value = _usable(record, band.metric)
        if value is None:
            continue
        insights.append(_band_sentence(band, value))
    return insights
