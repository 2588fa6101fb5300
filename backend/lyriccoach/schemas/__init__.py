from lyriccoach.schemas.result import (
    DecidingFactor, DetailItem, NormalizedRecord, ResultDetailResponse, ResultListResponse, ResultRow,
)

__all__ = [
    "DecidingFactor", "DetailItem", "NormalizedRecord",
    "ResultDetailResponse", "ResultListResponse", "ResultRow",
]
