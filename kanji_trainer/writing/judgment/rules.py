"""
Calibration constants for handwriting validation.

These values were tuned by hand against real practice sessions. Keep them
exact: changing any of them shifts every learner's scores.
"""
from pydantic import BaseModel
from typing import List, Optional

# Reference stroke data lives in a 1024 x 1024 unit square
REFERENCE_SPACE_SIZE = 1024.0

# Stroke matcher
ENDPOINT_THRESHOLD_DIAGONAL_RATIO = 0.3
START_WEIGHT = 0.4
END_WEIGHT = 0.4
DIRECTION_WEIGHT = 0.2
UNPARSEABLE_REFERENCE_SIMILARITY = 0.5
STROKE_MATCH_THRESHOLD = 0.6
MATCH_DIRECTION_THRESHOLD = 0.6

# Timing, per-stroke average in milliseconds
MIN_STROKE_TIME_MS = 200.0
MAX_STROKE_TIME_MS = 5000.0

# Coverage
USABLE_CANVAS_RATIO = 0.8
MIN_DIMENSION_RATIO = 0.15

# Generic direction fallback
MIN_ANALYZED_STROKE_LENGTH = 10.0
DOMINANT_AXIS_RATIO = 0.3
GENERIC_DIRECTION_THRESHOLD = 0.7

PASS_SCORE = 60


class CoverageBand(BaseModel):
    name: str
    max_strokes: Optional[int]  # None = no upper bound
    min_percentage: float
    max_percentage: float


COVERAGE_BANDS: List[CoverageBand] = [
    CoverageBand(name="simple", max_strokes=5, min_percentage=8, max_percentage=35),
    CoverageBand(name="moderate", max_strokes=10, min_percentage=12, max_percentage=45),
    CoverageBand(name="complex", max_strokes=None, min_percentage=18, max_percentage=60),
]


def coverage_band_for(expected_strokes: int) -> CoverageBand:
    for band in COVERAGE_BANDS:
        if band.max_strokes is None or expected_strokes <= band.max_strokes:
            return band
    return COVERAGE_BANDS[-1]


class ScoreWeights(BaseModel):
    """Points available per signal in one scoring formula."""
    accuracy: float = 0
    similarity: float = 0
    stroke_count: float = 0
    count_penalty_per_stroke: float = 0
    timing: float = 0
    timing_partial: float = 0
    coverage: float = 0
    coverage_partial_cap: float = 0
    direction: float = 0


# Used when reference stroke paths were available
MATCH_WEIGHTS = ScoreWeights(
    accuracy=50,
    similarity=10,
    timing=15,
    timing_partial=7,
    coverage=25,
    coverage_partial_cap=20,
)

# Used when the validation fell back to generic heuristics
FALLBACK_WEIGHTS = ScoreWeights(
    stroke_count=40,
    count_penalty_per_stroke=10,
    timing=20,
    timing_partial=10,
    coverage=20,
    coverage_partial_cap=15,
    direction=20,
)
