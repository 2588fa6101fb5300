"""
CSV export of the current result set.

Consumers parse this file, so the column order, per-column precision and
CRLF row separator are fixed. Duration carries 3 decimals, every other
float column 4.
"""
from typing import Callable, Iterable, NamedTuple

from lyriccoach.core.classify import classify_score
from lyriccoach.core.formatting import MISSING_EXPORT, escape_csv_field, format_fixed
from lyriccoach.schemas.result import NormalizedRecord

ROW_SEPARATOR = "\r\n"


class Column(NamedTuple):
    header: str
    value: Callable[[NormalizedRecord], object]


def _fixed(field: str, precision: int) -> Callable[[NormalizedRecord], str]:
    return lambda r: format_fixed(getattr(r, field), precision, missing=MISSING_EXPORT)


def _raw(field: str) -> Callable[[NormalizedRecord], object]:
    return lambda r: getattr(r, field)


EXPORT_COLUMNS: tuple[Column, ...] = (
    Column("Filename",                   _raw("filename")),
    Column("Score",                      _raw("score")),
    Column("Score label",                lambda r: classify_score(r.score).label),
    Column("Explanation",                lambda r: r.explanation or ""),
    Column("Duration seconds",           _fixed("duration_seconds", 3)),
    Column("Promptable phrases per min", _fixed("promptable_phrases_per_minute", 4)),
    Column("Promptable phrase coverage", _fixed("promptable_phrase_coverage", 4)),
    Column("Comfortable gaps per min",   _fixed("comfortable_gaps_per_minute", 4)),
    Column("Comfortable gap coverage",   _fixed("comfortable_gap_coverage", 4)),
    Column("Total gaps per min",         _fixed("total_gaps_per_minute", 4)),
    Column("Average gap sec",            _fixed("avg_gap_duration_sec", 4)),
    Column("Median gap sec",             _fixed("median_gap_duration_sec", 4)),
    Column("Usable density",             _fixed("usable_density", 4)),
    Column("Promptable phrases",         _raw("num_promptable_phrases")),
    Column("Total phrases",              _raw("total_phrases")),
    Column("Total gaps",                 _raw("total_gaps")),
    Column("Comfortable gaps count",     _raw("num_comfortable_gaps")),
)


def _line(fields: Iterable[object]) -> str:
    return ",".join(escape_csv_field(f) for f in fields)


def export_csv(records: Iterable[NormalizedRecord]) -> str:
    lines = [_line(c.header for c in EXPORT_COLUMNS)]
    lines.extend(_line(c.value(r) for c in EXPORT_COLUMNS) for r in records)
    return ROW_SEPARATOR.join(lines)
