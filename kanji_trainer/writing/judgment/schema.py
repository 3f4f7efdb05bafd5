from pydantic import BaseModel, ConfigDict
from typing import List, Literal, Optional

CoverageIssue = Literal["too_small", "too_large", "proportions"]


class StrokeCountCheck(BaseModel):
    model_config = ConfigDict(frozen=True)

    expected: int
    actual: int
    correct: bool


class TimingCheck(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_time_ms: float
    average_stroke_time_ms: float
    reasonable: bool


class CoverageCheck(BaseModel):
    model_config = ConfigDict(frozen=True)

    percentage: float
    adequate: bool
    min_percentage: float  # Complexity band the drawing was held to
    max_percentage: float
    issue: Optional[CoverageIssue] = None


class DirectionCheck(BaseModel):
    model_config = ConfigDict(frozen=True)

    score: float
    reasonable: bool


class StrokeMatch(BaseModel):
    model_config = ConfigDict(frozen=True)

    stroke_index: int
    is_correct: bool
    similarity: float  # 0-1
    feedback: str


class ValidationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_valid: bool
    score: int  # 0-100
    feedback: List[str]
    stroke_count: StrokeCountCheck
    timing: TimingCheck
    coverage: CoverageCheck
    stroke_matches: Optional[List[StrokeMatch]] = None  # Only with reference data
