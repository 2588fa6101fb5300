"""Pydantic schemas for scored results, request/response."""
from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field


class NormalizedRecord(BaseModel):
    """One scored song, flattened from either payload shape.

    Metrics are finite or None, scores are 1–3 or None and durations are
    never negative; anything else fails validation.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", allow_inf_nan=False)

    filename: Optional[str] = None
    score: Optional[Literal[1, 2, 3]] = None
    explanation: Optional[str] = None
    duration_seconds: Optional[float] = Field(None, ge=0)

    # Phrases
    promptable_phrases_per_minute: Optional[float] = None
    promptable_phrase_coverage: Optional[float] = None
    num_promptable_phrases: Optional[int] = None
    total_phrases: Optional[int] = None

    # Gaps
    comfortable_gaps_per_minute: Optional[float] = None
    comfortable_gap_coverage: Optional[float] = None
    total_gaps_per_minute: Optional[float] = None
    avg_gap_duration_sec: Optional[float] = None
    median_gap_duration_sec: Optional[float] = None
    total_gaps: Optional[int] = None
    num_comfortable_gaps: Optional[int] = None

    # Composite / detector settings
    usable_density: Optional[float] = None
    threshold_db: Optional[float] = None
    quiet_percentile: Optional[float] = None


class DecidingFactor(BaseModel):
    model_config = ConfigDict(frozen=True)

    metric: str
    value: float
    target: float
    direction: Literal["above", "below"]


class ResultRow(BaseModel):
    """One line of the results table."""
    index: int
    filename: Optional[str] = None
    score: Optional[int] = None
    score_label: str
    tier: str
    badge_class: str
    comfortable_gaps_per_minute: str
    total_gaps_per_minute: str
    avg_gap_duration_sec: str
    explanation: Optional[str] = None


class ResultListResponse(BaseModel):
    status_message: str = ""
    error: Optional[str] = None
    results: List[ResultRow] = []


class DetailItem(BaseModel):
    label: str
    value: str


class ResultDetailResponse(BaseModel):
    index: int
    filename: Optional[str] = None
    score: Optional[int] = None
    score_label: str
    short_label: str
    tier: str
    badge_class: str
    explanation: Optional[str] = None
    deciding_factor: Optional[str] = None
    insights: List[str] = []
    details: List[DetailItem] = []
    record: NormalizedRecord
