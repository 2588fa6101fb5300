"""Illustrative result set for demonstration mode, no scoring service needed."""
from typing import List

from lyriccoach.core.normalize import normalize_results
from lyriccoach.schemas.result import NormalizedRecord

EXAMPLE_RESULTS = [
    {
        "filename": "open_road_demo.wav",
        "score": 3,
        "explanation": "Regular comfortable gaps between verses and a long instrumental bridge.",
        "metrics": {
            "song_minutes": 3.25,
            "promptable_phrases_per_minute": 6.4,
            "promptable_phrase_coverage": 0.58,
            "num_promptable_phrases": 21,
            "total_phrases": 34,
            "comfortable_gaps_per_minute": 1.85,
            "comfortable_gap_coverage": 0.22,
            "total_gaps_per_minute": 4.3,
            "avg_gap_duration_sec": 1.42,
            "median_gap_duration_sec": 1.1,
            "total_gaps": 14,
            "num_comfortable_gaps": 6,
            "usable_density": 0.78,
            "threshold_db": -38.5,
            "quiet_percentile": 20,
        },
    },
    {
        "filename": "midnight_chorus_demo.mp3",
        "score": 2,
        "explanation": "Gaps exist but cluster in the intro and outro.",
        "metrics": {
            "song_minutes": 4.1,
            "promptable_phrases_per_minute": 4.2,
            "promptable_phrase_coverage": 0.41,
            "num_promptable_phrases": 17,
            "total_phrases": 40,
            "comfortable_gaps_per_minute": 0.95,
            "comfortable_gap_coverage": 0.12,
            "total_gaps_per_minute": 3.1,
            "avg_gap_duration_sec": 0.87,
            "median_gap_duration_sec": 0.74,
            "total_gaps": 13,
            "num_comfortable_gaps": 4,
            "usable_density": 0.56,
            "threshold_db": -36.0,
            "quiet_percentile": 20,
        },
    },
    {
        # legacy flat shape
        "filename": "wall_of_sound_demo.wav",
        "score": 1,
        "explanation": "Vocals run almost continuously; very few usable pauses.",
        "duration_seconds": 212.4,
        "comfortable_gaps_per_minute": 0.28,
        "total_gaps_per_minute": 1.7,
        "avg_gap_duration_sec": 0.41,
        "median_gap_duration_sec": 0.35,
        "total_gaps": 6,
        "num_comfortable_gaps": 1,
        "threshold_db": -34.0,
        "quiet_percentile": 15,
    },
]


def demo_records() -> List[NormalizedRecord]:
    return normalize_results(EXAMPLE_RESULTS)
