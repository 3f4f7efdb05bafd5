import pytest
from pydantic import ValidationError

from kanji_trainer.writing.ingestion.models import CapturedStroke, Point


def test_pairs_are_coerced_to_points():
    stroke = CapturedStroke(points=[[1, 2], (3.5, 4), {"x": 5, "y": 6, "t": 12.0}], start_time=100, end_time=450)
    assert stroke.points[0] == Point(x=1, y=2)
    assert stroke.points[2].t == 12.0
    assert stroke.start == Point(x=1, y=2)
    assert stroke.end.x == 5
    assert stroke.duration_ms == 350


def test_empty_stroke_has_no_endpoints():
    stroke = CapturedStroke(points=[], start_time=0, end_time=10)
    assert stroke.start is None
    assert stroke.end is None


def test_captured_stroke_is_immutable():
    stroke = CapturedStroke(points=[[1, 2]], start_time=0, end_time=10)
    with pytest.raises(ValidationError):
        stroke.start_time = 5


def test_kanji_to_target(ichi):
    target = ichi.to_target()
    assert target.character == "一"
    assert target.expected_stroke_count == 1
