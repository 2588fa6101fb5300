"""Table rows and detail views built from NormalizedRecords."""
from typing import List

from lyriccoach.core.classify import classify_score
from lyriccoach.core.explain import generate_insights, select_deciding_factor
from lyriccoach.core.formatting import format_duration, format_fixed, format_percent
from lyriccoach.schemas.result import DetailItem, NormalizedRecord, ResultDetailResponse, ResultRow


def _count(value) -> str:
    return "n/a" if value is None else str(value)


def _seconds(value) -> str:
    text = format_fixed(value, 2)
    return text if value is None else f"{text} sec"


def _duration(seconds) -> str:
    clock = format_duration(seconds)
    if seconds is None:
        return clock
    return f"{clock} ({format_fixed(seconds, 1)} sec)"


def _quiet_percentile(value) -> str:
    if value is None:
        return "n/a"
    return f"{value:g}%"


def table_row(index: int, record: NormalizedRecord) -> ResultRow:
    score_class = classify_score(record.score)
    return ResultRow(
        index=index,
        filename=record.filename,
        score=record.score,
        score_label=score_class.label,
        tier=score_class.tier.value,
        badge_class=score_class.badge_class,
        comfortable_gaps_per_minute=format_fixed(record.comfortable_gaps_per_minute, 2),
        total_gaps_per_minute=format_fixed(record.total_gaps_per_minute, 2),
        avg_gap_duration_sec=format_fixed(record.avg_gap_duration_sec, 2),
        explanation=record.explanation,
    )


def detail_items(record: NormalizedRecord) -> List[DetailItem]:
    return [
        DetailItem(label="Duration",                      value=_duration(record.duration_seconds)),
        DetailItem(label="Promptable phrases per min",    value=format_fixed(record.promptable_phrases_per_minute, 2)),
        DetailItem(label="Promptable phrase coverage",    value=format_percent(record.promptable_phrase_coverage)),
        DetailItem(label="Promptable phrases",            value=_count(record.num_promptable_phrases)),
        DetailItem(label="Total phrases",                 value=_count(record.total_phrases)),
        DetailItem(label="Comfortable gaps per min",      value=format_fixed(record.comfortable_gaps_per_minute, 2)),
        DetailItem(label="Comfortable gap coverage",      value=format_percent(record.comfortable_gap_coverage)),
        DetailItem(label="Total gaps per min",            value=format_fixed(record.total_gaps_per_minute, 2)),
        DetailItem(label="Total gaps",                    value=_count(record.total_gaps)),
        DetailItem(label="Comfortable gaps count",        value=_count(record.num_comfortable_gaps)),
        DetailItem(label="Average gap length",            value=_seconds(record.avg_gap_duration_sec)),
        DetailItem(label="Median gap length",             value=_seconds(record.median_gap_duration_sec)),
        DetailItem(label="Usable density",                value=format_fixed(record.usable_density, 2)),
        DetailItem(label="Quiet threshold (dB)",          value=format_fixed(record.threshold_db, 1)),
        DetailItem(label="Quiet percentile",              value=_quiet_percentile(record.quiet_percentile)),
    ]


def detail_view(index: int, record: NormalizedRecord) -> ResultDetailResponse:
    score_class = classify_score(record.score)
    return ResultDetailResponse(
        index=index,
        filename=record.filename,
        score=record.score,
        score_label=score_class.label,
        short_label=score_class.short_label,
        tier=score_class.tier.value,
        badge_class=score_class.badge_class,
        explanation=record.explanation,
        deciding_factor=select_deciding_factor(record),
        insights=generate_insights(record),
        details=detail_items(record),
        record=record,
    )
