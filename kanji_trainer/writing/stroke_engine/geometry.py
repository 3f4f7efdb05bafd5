from typing import Optional, Sequence, Tuple, Union
import math
import numpy as np
from pydantic import BaseModel
from ..ingestion.models import CapturedStroke, Point

Coord = Union[Point, Tuple[float, float], Sequence[float]]


class BoundingBox(BaseModel):
    min_x: float
    max_x: float
    min_y: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def area(self) -> float:
        return self.width * self.height


def _xy(p: Coord) -> Tuple[float, float]:
    if isinstance(p, Point):
        return p.x, p.y
    return float(p[0]), float(p[1])


def distance(p1: Coord, p2: Coord) -> float:
    x1, y1 = _xy(p1)
    x2, y2 = _xy(p2)
    return math.sqrt((x1 - x2)**2 + (y1 - y2)**2)


def bounding_box(strokes: Sequence[CapturedStroke]) -> Optional[BoundingBox]:
    """
    Box around every point of every stroke. None when nothing was drawn.
    """
    xs = [p.x for s in strokes for p in s.points]
    ys = [p.y for s in strokes for p in s.points]
    if not xs:
        return None
    return BoundingBox(min_x=min(xs), max_x=max(xs), min_y=min(ys), max_y=max(ys))


def direction_similarity(a: Coord, b: Coord) -> float:
    """
    Maps the cosine of the angle between two vectors from [-1, 1] onto [0, 1].
    Opposite directions give 0, identical give 1, and a zero-length vector
    gives a neutral 0.5.
    """
    va = np.array(_xy(a), dtype=float)
    vb = np.array(_xy(b), dtype=float)
    na = np.linalg.norm(va)
    nb = np.linalg.norm(vb)
    if na == 0 or nb == 0:
        return 0.5
    cos_angle = float(np.clip(np.dot(va / na, vb / nb), -1.0, 1.0))
    return (cos_angle + 1) / 2
