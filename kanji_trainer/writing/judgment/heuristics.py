"""
Whole-drawing checks that do not need reference stroke data.

Each check returns a structured sub-result; the engine turns them into
points and feedback. All of them are defined for an empty stroke list.
"""
import math
from typing import Sequence
from ..ingestion.models import CapturedStroke, Target
from ..stroke_engine.geometry import bounding_box
from .rules import (
    DOMINANT_AXIS_RATIO,
    GENERIC_DIRECTION_THRESHOLD,
    MAX_STROKE_TIME_MS,
    MIN_ANALYZED_STROKE_LENGTH,
    MIN_DIMENSION_RATIO,
    MIN_STROKE_TIME_MS,
    USABLE_CANVAS_RATIO,
    coverage_band_for,
)
from .schema import CoverageCheck, DirectionCheck, StrokeCountCheck, TimingCheck


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def check_stroke_count(target: Target, strokes: Sequence[CapturedStroke]) -> StrokeCountCheck:
    expected = target.expected_stroke_count
    actual = len(strokes)
    return StrokeCountCheck(expected=expected, actual=actual, correct=actual == expected)


def check_timing(strokes: Sequence[CapturedStroke]) -> TimingCheck:
    if not strokes:
        return TimingCheck(total_time_ms=0, average_stroke_time_ms=0, reasonable=False)

    total = sum(s.duration_ms for s in strokes)
    average = total / len(strokes)
    return TimingCheck(
        total_time_ms=total,
        average_stroke_time_ms=average,
        reasonable=MIN_STROKE_TIME_MS <= average <= MAX_STROKE_TIME_MS,
    )


def check_coverage(
    target: Target,
    strokes: Sequence[CapturedStroke],
    canvas_width: float,
    canvas_height: float,
) -> CoverageCheck:
    """
    How much of the usable writing area the drawing's bounding box takes up.

    The acceptable band widens with the kanji's stroke count. On top of the
    area test, both sides of the box must reach a minimum length so that a
    long thin sliver cannot pass.
    """
    band = coverage_band_for(target.expected_stroke_count)
    box = bounding_box(strokes)
    if box is None:
        return CoverageCheck(
            percentage=0,
            adequate=False,
            min_percentage=band.min_percentage,
            max_percentage=band.max_percentage,
            issue="too_small",
        )

    usable_area = (canvas_width * USABLE_CANVAS_RATIO) * (canvas_height * USABLE_CANVAS_RATIO)
    # Judged on the exact value; only the reported figure is rounded
    raw_percentage = min(100.0, box.area / usable_area * 100)

    min_side = min(canvas_width, canvas_height) * MIN_DIMENSION_RATIO
    proportions_ok = box.width >= min_side and box.height >= min_side

    if raw_percentage < band.min_percentage:
        issue = "too_small"
    elif raw_percentage > band.max_percentage:
        issue = "too_large"
    elif not proportions_ok:
        issue = "proportions"
    else:
        issue = None

    return CoverageCheck(
        percentage=round_half_up(raw_percentage),
        adequate=issue is None,
        min_percentage=band.min_percentage,
        max_percentage=band.max_percentage,
        issue=issue,
    )


def is_conventional_direction(dx: float, dy: float) -> bool:
    # Kanji strokes generally run top to bottom, left to right. A clearly
    # vertical or horizontal stroke is the extreme case of each.
    downward = dy > 0 and dy >= abs(dx) * DOMINANT_AXIS_RATIO
    rightward = dx > 0 and dx >= abs(dy) * DOMINANT_AXIS_RATIO
    return downward or rightward


def check_generic_direction(strokes: Sequence[CapturedStroke]) -> DirectionCheck:
    """Fallback used only when no reference stroke data is available."""
    analyzed = 0
    acceptable = 0
    for stroke in strokes:
        if len(stroke.points) < 2:
            continue
        start, end = stroke.points[0], stroke.points[-1]
        dx = end.x - start.x
        dy = end.y - start.y
        if math.hypot(dx, dy) < MIN_ANALYZED_STROKE_LENGTH:
            continue
        analyzed += 1
        if is_conventional_direction(dx, dy):
            acceptable += 1

    if analyzed == 0:
        return DirectionCheck(score=0.0, reasonable=False)

    score = acceptable / analyzed
    return DirectionCheck(score=score, reasonable=score >= GENERIC_DIRECTION_THRESHOLD)
