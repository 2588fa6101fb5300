"""
Record normalizer: turns one result item from the scoring service into a
NormalizedRecord.

Two payload shapes are in circulation:
  legacy:  {"filename", "score", "explanation", <metrics flat>, "duration_seconds"}
  nested:  {"filename", "score", "explanation", "metrics": {<metrics>, "song_minutes"}}

This is the only place that knows about the difference. Fields of the wrong
type degrade to None instead of raising.
"""
import math
from typing import Any, Iterable, List, Mapping, Union

import structlog

from lyriccoach.schemas.result import NormalizedRecord

log = structlog.get_logger()

FLOAT_FIELDS = (
    "duration_seconds",
    "promptable_phrases_per_minute",
    "promptable_phrase_coverage",
    "comfortable_gaps_per_minute",
    "comfortable_gap_coverage",
    "total_gaps_per_minute",
    "avg_gap_duration_sec",
    "median_gap_duration_sec",
    "usable_density",
    "threshold_db",
    "quiet_percentile",
)

INT_FIELDS = (
    "num_promptable_phrases",
    "total_phrases",
    "total_gaps",
    "num_comfortable_gaps",
)

VALID_SCORES = {1, 2, 3}


# ── Field coercion ─────────────────────────────────────────────────────────

def _finite(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        value = float(value)
    except OverflowError:
        return None
    if math.isnan(value) or math.isinf(value):
        return None
    return value


def _whole(value: Any) -> int | None:
    number = _finite(value)
    if number is None or not number.is_integer():
        return None
    return int(number)


def _text(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _score(value: Any) -> int | None:
    score = _whole(value)
    return score if score in VALID_SCORES else None


# ── Normalization ──────────────────────────────────────────────────────────

def _flatten(raw: Mapping[str, Any]) -> dict[str, Any]:
    """Merge a nested ``metrics`` object over the top-level fields.

    In the nested shape the duration comes from ``metrics.song_minutes`` only;
    without it the duration is absent.
    """
    metrics = raw.get("metrics")
    if not isinstance(metrics, Mapping):
        return {k: v for k, v in raw.items() if k != "metrics"}

    merged = {k: v for k, v in raw.items() if k != "metrics"}
    merged.update(metrics)

    song_minutes = _finite(metrics.get("song_minutes"))
    merged["duration_seconds"] = None if song_minutes is None else song_minutes * 60
    return merged


def normalize(raw: Union[Mapping[str, Any], NormalizedRecord, Any]) -> NormalizedRecord:
    """Build a NormalizedRecord from a raw result item. Never raises."""
    if isinstance(raw, NormalizedRecord):
        raw = raw.model_dump()
    if not isinstance(raw, Mapping):
        log.warning("result_item_not_an_object", type=type(raw).__name__)
        return NormalizedRecord()

    flat = _flatten(raw)

    fields: dict[str, Any] = {
        "filename":    _text(flat.get("filename")),
        "score":       _score(flat.get("score")),
        "explanation": _text(flat.get("explanation")),
    }
    for name in FLOAT_FIELDS:
        fields[name] = _finite(flat.get(name))
    for name in INT_FIELDS:
        fields[name] = _whole(flat.get(name))

    if fields["duration_seconds"] is not None and fields["duration_seconds"] < 0:
        fields["duration_seconds"] = None

    return NormalizedRecord(**fields)


def normalize_results(items: Iterable[Any]) -> List[NormalizedRecord]:
    """Normalize a ``results`` array, keeping the service's order."""
    return [normalize(item) for item in items]
