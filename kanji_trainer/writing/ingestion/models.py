from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Literal, Optional

JLPTLevel = Literal["N1", "N2", "N3", "N4", "N5"]


class Point(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: float
    y: float
    t: Optional[float] = None  # Timestamp, when the canvas reports one


class Target(BaseModel):
    """What the user was asked to draw."""
    model_config = ConfigDict(frozen=True)

    character: str
    expected_stroke_count: int = Field(ge=0)


class Readings(BaseModel):
    model_config = ConfigDict(frozen=True)

    onyomi: List[str] = []
    kunyomi: List[str] = []


class Kanji(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    character: str
    level: JLPTLevel
    meanings: List[str] = []
    readings: Readings = Readings()
    strokes: int = Field(ge=0)
    frequency: int = 0

    def to_target(self) -> Target:
        return Target(character=self.character, expected_stroke_count=self.strokes)


class CapturedStroke(BaseModel):
    """
    One pen-down to pen-up gesture as reported by the drawing canvas.
    Times are milliseconds in the session's time base.
    """
    model_config = ConfigDict(frozen=True)

    points: List[Point]
    start_time: float
    end_time: float

    @field_validator("points", mode="before")
    @classmethod
    def _coerce_pairs(cls, value):
        # The canvas hands over bare [x, y] pairs
        coerced = []
        for p in value:
            if isinstance(p, (list, tuple)):
                coerced.append({"x": p[0], "y": p[1]})
            else:
                coerced.append(p)
        return coerced

    @property
    def start(self) -> Optional[Point]:
        return self.points[0] if self.points else None

    @property
    def end(self) -> Optional[Point]:
        return self.points[-1] if self.points else None

    @property
    def duration_ms(self) -> float:
        return self.end_time - self.start_time
