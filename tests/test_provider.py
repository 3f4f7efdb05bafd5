import asyncio

import pytest
import requests

from kanji_trainer.config import Settings
from kanji_trainer.writing.ingestion.models import Target
from kanji_trainer.writing.judgment.engine import StrokeValidator
from kanji_trainer.writing.reference.provider import (
    HanziWriterDataProvider,
    InMemoryStrokeDataCache,
    ReferenceStrokes,
    ReferenceUnavailable,
    StaticReferenceProvider,
    StrokeDataError,
    load_reference,
    parse_stroke_document,
)

ICHI_DOCUMENT = {
    "strokes": ["M 120 450 Q 500 420 900 460 L 905 470 Q 500 440 125 465 Z"],
    "medians": [[[120, 455], [900, 462]]],
}

# Same median in y-down reference space (900 - y)
ICHI_CANVAS_MEDIANS = [[[120.0, 445.0], [900.0, 438.0]]]


class FakeResponse:
    def __init__(self, payload=None, status=200, bad_json=False):
        self.payload = payload
        self.status = status
        self.bad_json = bad_json

    def raise_for_status(self):
        if self.status >= 400:
            raise requests.HTTPError(f"{self.status} error")

    def json(self):
        if self.bad_json:
            raise ValueError("Expecting value")
        return self.payload


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def get(self, url, timeout=None):
        self.calls.append((url, timeout))
        if self.error is not None:
            raise self.error
        return self.response


def make_provider(session, cache=None):
    settings = Settings(stroke_data_url="https://strokes.example/{character}.json", stroke_data_timeout=2.5)
    return HanziWriterDataProvider(settings=settings, cache=cache, session=session)


def test_fetches_and_caches():
    session = FakeSession(FakeResponse(ICHI_DOCUMENT))
    cache = InMemoryStrokeDataCache()
    provider = make_provider(session, cache)

    first = asyncio.run(provider.load_stroke_paths("一"))
    second = asyncio.run(provider.load_stroke_paths("一"))

    assert isinstance(first, ReferenceStrokes)
    assert first.paths == ICHI_CANVAS_MEDIANS
    assert second == first
    assert len(session.calls) == 1
    url, timeout = session.calls[0]
    assert url == "https://strokes.example/%E4%B8%80.json"
    assert timeout == 2.5
    assert cache.get("一") == ICHI_CANVAS_MEDIANS


@pytest.mark.parametrize("session", [
    FakeSession(FakeResponse(status=404)),
    FakeSession(error=requests.ConnectionError("offline")),
    FakeSession(error=requests.Timeout("slow")),
    FakeSession(FakeResponse(bad_json=True)),
    FakeSession(FakeResponse({"strokes": []})),
    FakeSession(FakeResponse(["not", "a", "document"])),
])
def test_failures_become_unavailable(session):
    provider = make_provider(session)
    result = asyncio.run(provider.load_stroke_paths("一"))
    assert isinstance(result, ReferenceUnavailable)
    assert result.character == "一"
    assert result.reason
    # Failures are not cached
    assert provider.cache.get("一") is None


def test_parse_stroke_document_rejects_non_string_outlines():
    with pytest.raises(StrokeDataError):
        parse_stroke_document({"strokes": [[1, 2]]})


def test_static_provider():
    provider = StaticReferenceProvider({"一": ["M 0 0 L 10 10"]})
    assert asyncio.run(provider.load_stroke_paths("一")).paths == ["M 0 0 L 10 10"]
    assert isinstance(asyncio.run(provider.load_stroke_paths("二")), ReferenceUnavailable)


def test_load_reference_guards_contract_violations():
    class Raising:
        async def load_stroke_paths(self, character):
            raise KeyError(character)

    class Silent:
        async def load_stroke_paths(self, character):
            return None

    for provider in (Raising(), Silent(), None):
        assert isinstance(asyncio.run(load_reference(provider, "一")), ReferenceUnavailable)


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("KANJI_STROKE_DATA_URL", "http://mirror.local/{character}")
    monkeypatch.setenv("KANJI_STROKE_DATA_TIMEOUT", "1.5")
    monkeypatch.setenv("KANJI_CANVAS_WIDTH", "300")
    settings = Settings.from_env()
    assert settings.stroke_data_url == "http://mirror.local/{character}"
    assert settings.stroke_data_timeout == 1.5
    assert settings.canvas_width == 300


def test_parse_prefers_medians_and_flips_y():
    assert parse_stroke_document(ICHI_DOCUMENT) == ICHI_CANVAS_MEDIANS


def test_parse_falls_back_to_outline_key_points():
    paths = parse_stroke_document({"strokes": ["M 100 800 L 100 100"]})
    assert paths == [[[100.0, 100.0], [100.0, 800.0]]]


@pytest.mark.parametrize("medians", [
    [],
    [[[1, 2]]],
    [[[1, 2], [3]]],
    [[[1, 2], ["a", 4]]],
    "M 0 0 L 1 1",
])
def test_parse_rejects_malformed_medians(medians):
    with pytest.raises(StrokeDataError):
        parse_stroke_document({"strokes": ["M 0 0 L 1 1"], "medians": medians})


def test_downloaded_stroke_matches_well_drawn_ichi(make_stroke):
    provider = make_provider(FakeSession(FakeResponse(ICHI_DOCUMENT)))
    target = Target(character="一", expected_stroke_count=1)
    # Along the median on a 400 x 400 canvas, left to right
    stroke = make_stroke([[47, 174], [200, 172], [351, 171]], duration=700)

    result = asyncio.run(StrokeValidator(target).validate([stroke], provider))

    match = result.stroke_matches[0]
    assert match.is_correct
    assert match.similarity >= 0.9
    assert result.feedback[0] == "✓ 1/1 strokes correct"


def test_y_up_vertical_median_matches_top_to_bottom_stroke(make_stroke):
    # 丨 as stored upstream: starts high (780) and ends low (-40) in y-up space
    document = {"strokes": ["M 500 780 L 520 -40 Z"], "medians": [[[512, 780], [512, -40]]]}
    provider = make_provider(FakeSession(FakeResponse(document)))
    target = Target(character="丨", expected_stroke_count=1)

    result = asyncio.run(StrokeValidator(target).validate([make_stroke([[200, 50], [200, 350]])], provider))

    assert result.stroke_matches[0].is_correct
    assert result.stroke_matches[0].similarity >= 0.9
