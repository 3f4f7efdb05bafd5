"""
Compares one user stroke against one reference stroke.

This is a coarse endpoint + direction heuristic, not curve matching: two
strokes with the same start, end and net direction score the same whatever
happens in between. That is a known approximation.
"""
import math
from typing import Tuple
from pydantic import BaseModel
from ..ingestion.models import CapturedStroke
from ..judgment.rules import (
    DIRECTION_WEIGHT,
    END_WEIGHT,
    ENDPOINT_THRESHOLD_DIAGONAL_RATIO,
    REFERENCE_SPACE_SIZE,
    START_WEIGHT,
    UNPARSEABLE_REFERENCE_SIMILARITY,
)
from .geometry import direction_similarity, distance
from .paths import ReferenceStrokePath, extract_key_points


class StrokeComparison(BaseModel):
    similarity: float
    start_similarity: float = 0.0
    end_similarity: float = 0.0
    direction_similarity: float = 0.0
    comparable: bool = True  # False when the reference could not be parsed
    too_short: bool = False  # User stroke had fewer than two points


def to_canvas(point: Tuple[float, float], canvas_width: float, canvas_height: float) -> Tuple[float, float]:
    """
    Maps a reference-space point onto the canvas: uniform scale to the
    shorter side, centered on the longer one.
    """
    scale = min(canvas_width, canvas_height) / REFERENCE_SPACE_SIZE
    offset_x = (canvas_width - REFERENCE_SPACE_SIZE * scale) / 2
    offset_y = (canvas_height - REFERENCE_SPACE_SIZE * scale) / 2
    return point[0] * scale + offset_x, point[1] * scale + offset_y


def endpoint_similarity(d: float, canvas_width: float, canvas_height: float) -> float:
    threshold = math.hypot(canvas_width, canvas_height) * ENDPOINT_THRESHOLD_DIAGONAL_RATIO
    return max(0.0, 1 - d / threshold)


def compare_detailed(
    user_stroke: CapturedStroke,
    reference_path: ReferenceStrokePath,
    canvas_width: float,
    canvas_height: float,
) -> StrokeComparison:
    if len(user_stroke.points) < 2:
        return StrokeComparison(similarity=0.0, too_short=True)

    key_points = extract_key_points(reference_path)
    if len(key_points) < 2:
        return StrokeComparison(similarity=UNPARSEABLE_REFERENCE_SIMILARITY, comparable=False)

    ref_start = to_canvas(key_points[0], canvas_width, canvas_height)
    ref_end = to_canvas(key_points[-1], canvas_width, canvas_height)
    user_start = user_stroke.points[0]
    user_end = user_stroke.points[-1]

    start_sim = endpoint_similarity(distance(user_start, ref_start), canvas_width, canvas_height)
    end_sim = endpoint_similarity(distance(user_end, ref_end), canvas_width, canvas_height)
    dir_sim = direction_similarity(
        (user_end.x - user_start.x, user_end.y - user_start.y),
        (ref_end[0] - ref_start[0], ref_end[1] - ref_start[1]),
    )

    return StrokeComparison(
        similarity=START_WEIGHT * start_sim + END_WEIGHT * end_sim + DIRECTION_WEIGHT * dir_sim,
        start_similarity=start_sim,
        end_similarity=end_sim,
        direction_similarity=dir_sim,
    )


def compare(
    user_stroke: CapturedStroke,
    reference_path: ReferenceStrokePath,
    canvas_width: float,
    canvas_height: float,
) -> float:
    """Similarity in [0, 1] between a drawn stroke and a reference path."""
    return compare_detailed(user_stroke, reference_path, canvas_width, canvas_height).similarity
