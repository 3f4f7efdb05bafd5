"""
Reference stroke data for a character.

A provider answers with either ReferenceStrokes or ReferenceUnavailable and
never raises. Unavailable data is routine (offline, unsupported character,
bad payload) and only switches the engine to its fallback scoring.
"""
import asyncio
import logging
from typing import Dict, List, Mapping, Optional, Protocol, Sequence, Union
from urllib.parse import quote

import requests
from pydantic import BaseModel

from ...config import Settings
from ..stroke_engine.paths import ReferenceStrokePath, extract_key_points

logger = logging.getLogger("kanji_trainer.writing.reference")

HANZI_WRITER_BASELINE = 900.0


class StrokeDataError(Exception):
    """A stroke data payload could not be read."""


class ReferenceStrokes(BaseModel):
    character: str
    paths: List[ReferenceStrokePath]  # Canonical stroke order


class ReferenceUnavailable(BaseModel):
    character: str
    reason: str = ""


ReferenceLookup = Union[ReferenceStrokes, ReferenceUnavailable]


class ReferenceStrokeProvider(Protocol):
    async def load_stroke_paths(self, character: str) -> ReferenceLookup:
        ...


class StrokeDataCache(Protocol):
    def get(self, character: str) -> Optional[List[ReferenceStrokePath]]:
        ...

    def set(self, character: str, paths: List[ReferenceStrokePath]) -> None:
        ...


class InMemoryStrokeDataCache:
    def __init__(self):
        self._paths: Dict[str, List[ReferenceStrokePath]] = {}

    def get(self, character: str) -> Optional[List[ReferenceStrokePath]]:
        return self._paths.get(character)

    def set(self, character: str, paths: List[ReferenceStrokePath]) -> None:
        self._paths[character] = list(paths)


class StaticReferenceProvider:
    """Serves preloaded paths, e.g. data bundled with the app or test fixtures."""

    def __init__(self, paths_by_character: Mapping[str, Sequence[ReferenceStrokePath]]):
        self._paths = {c: list(p) for c, p in paths_by_character.items()}

    async def load_stroke_paths(self, character: str) -> ReferenceLookup:
        paths = self._paths.get(character)
        if not paths:
            return ReferenceUnavailable(character=character, reason="no bundled stroke data")
        return ReferenceStrokes(character=character, paths=paths)


def _is_median(median: object) -> bool:
    if not isinstance(median, list) or len(median) < 2:
        return False
    for p in median:
        if not isinstance(p, list) or len(p) != 2:
            return False
        if not all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in p):
            return False
    return True


def to_canvas_orientation(points: Sequence[Sequence[float]]) -> List[List[float]]:
    # hanzi-writer-data is y-up around a 900 baseline; the canvas is y-down
    return [[float(x), HANZI_WRITER_BASELINE - float(y)] for x, y in points]


def parse_stroke_document(payload: object) -> List[ReferenceStrokePath]:
    """
    Pulls per-stroke centerlines out of a hanzi-writer-data document:
    {"strokes": ["M ...", ...], "medians": [[[x, y], ...], ...]}

    Medians run from the start of a stroke to its end. Outlines are closed
    polygons and are only used when a document has no medians. Either way
    the result is point lists in y-down reference space.
    """
    if not isinstance(payload, dict):
        raise StrokeDataError("stroke document is not an object")

    medians = payload.get("medians")
    if medians is not None:
        if not isinstance(medians, list) or not medians:
            raise StrokeDataError("stroke document has no medians")
        if not all(_is_median(m) for m in medians):
            raise StrokeDataError("medians must be lists of [x, y] pairs")
        return [to_canvas_orientation(m) for m in medians]

    strokes = payload.get("strokes")
    if not isinstance(strokes, list) or not strokes:
        raise StrokeDataError("stroke document has no strokes")
    if not all(isinstance(s, str) for s in strokes):
        raise StrokeDataError("stroke outlines must be path strings")
    return [to_canvas_orientation(extract_key_points(s)) for s in strokes]


class HanziWriterDataProvider:
    """
    Fetches hanzi-writer-data JSON over HTTP. Successful lookups are kept in
    the injected cache; failures are not cached so a later call can retry.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        cache: Optional[StrokeDataCache] = None,
        session: Optional[requests.Session] = None,
    ):
        self.settings = settings or Settings.from_env()
        self.cache = cache if cache is not None else InMemoryStrokeDataCache()
        self.session = session or requests.Session()

    def _url_for(self, character: str) -> str:
        return self.settings.stroke_data_url.format(character=quote(character))

    def _fetch(self, character: str) -> List[ReferenceStrokePath]:
        response = self.session.get(self._url_for(character), timeout=self.settings.stroke_data_timeout)
        response.raise_for_status()
        try:
            payload = response.json()
        except ValueError as e:
            raise StrokeDataError(f"invalid JSON: {e}") from e
        return parse_stroke_document(payload)

    async def load_stroke_paths(self, character: str) -> ReferenceLookup:
        cached = self.cache.get(character)
        if cached:
            return ReferenceStrokes(character=character, paths=cached)

        try:
            paths = await asyncio.to_thread(self._fetch, character)
        except (requests.RequestException, StrokeDataError) as e:
            logger.warning("Stroke data unavailable for %s: %s", character, e)
            return ReferenceUnavailable(character=character, reason=str(e))

        self.cache.set(character, paths)
        logger.info("Loaded %d reference strokes for %s", len(paths), character)
        return ReferenceStrokes(character=character, paths=paths)


async def load_reference(provider: Optional[ReferenceStrokeProvider], character: str) -> ReferenceLookup:
    """
    Asks the provider for data, holding third-party providers to the
    no-raise contract.
    """
    if provider is None:
        return ReferenceUnavailable(character=character, reason="no provider configured")
    try:
        lookup = await provider.load_stroke_paths(character)
    except Exception as e:
        logger.exception("Reference provider failed for %s: %s", character, e)
        return ReferenceUnavailable(character=character, reason=str(e))
    if lookup is None:
        return ReferenceUnavailable(character=character, reason="provider returned nothing")
    return lookup
