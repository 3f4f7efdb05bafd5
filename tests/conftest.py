import pytest

from kanji_trainer.writing.ingestion.models import CapturedStroke, Kanji, Target


@pytest.fixture
def make_stroke():
    def _make(points, duration=1000, start=10_000):
        return CapturedStroke(points=points, start_time=start, end_time=start + duration)
    return _make


@pytest.fixture
def one_stroke_target():
    return Target(character="一", expected_stroke_count=1)


@pytest.fixture
def complex_target():
    return Target(character="漢", expected_stroke_count=13)


@pytest.fixture
def ichi():
    return Kanji(
        id="test-1",
        character="一",
        level="N5",
        meanings=["one"],
        readings={"onyomi": ["イチ"], "kunyomi": ["ひと"]},
        strokes=1,
        frequency=1,
    )
