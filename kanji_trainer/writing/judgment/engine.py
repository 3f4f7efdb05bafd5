"""
Handwriting validation entry point.

Scores a drawing of one kanji:
1. Stroke count, timing and coverage checks always run.
2. With reference stroke data, every drawn stroke is matched against its
   reference stroke by index.
3. Without it, a generic top-to-bottom / left-to-right direction check
   stands in for the per-stroke matching.
4. The signals are merged into one 0-100 score, a pass/fail verdict and an
   ordered feedback list.

Reference data being unavailable is routine and never raises.
"""
import logging
from typing import List, Optional, Sequence, Union
from pydantic import BaseModel
from ...config import Settings
from ..ingestion.models import CapturedStroke, Kanji, Target
from ..reference.provider import (
    ReferenceLookup,
    ReferenceStrokeProvider,
    ReferenceStrokes,
    load_reference,
)
from ..stroke_engine.matcher import compare_detailed
from ..stroke_engine.paths import ReferenceStrokePath
from .feedback import EXTRA_STROKE, MISSING_STROKE, compose_feedback, describe_comparison
from .heuristics import (
    check_coverage,
    check_generic_direction,
    check_stroke_count,
    check_timing,
    round_half_up,
)
from .rules import (
    FALLBACK_WEIGHTS,
    MATCH_DIRECTION_THRESHOLD,
    MATCH_WEIGHTS,
    PASS_SCORE,
    STROKE_MATCH_THRESHOLD,
)
from .schema import (
    CoverageCheck,
    DirectionCheck,
    StrokeCountCheck,
    StrokeMatch,
    TimingCheck,
    ValidationResult,
)

logger = logging.getLogger("kanji_trainer.writing.judgment")

DEFAULT_CANVAS_SIZE = 400


class WithMatches(BaseModel):
    matches: List[StrokeMatch]

    @property
    def direction(self) -> DirectionCheck:
        correct = sum(1 for m in self.matches if m.is_correct)
        score = correct / len(self.matches) if self.matches else 0.0
        return DirectionCheck(score=score, reasonable=score >= MATCH_DIRECTION_THRESHOLD)


class Fallback(BaseModel):
    direction: DirectionCheck


ScoringContext = Union[WithMatches, Fallback]


def score_with_matches(context: WithMatches, timing: TimingCheck, coverage: CoverageCheck) -> float:
    w = MATCH_WEIGHTS
    matches = context.matches
    score = 0.0

    if matches:
        correct = sum(1 for m in matches if m.is_correct)
        score += w.accuracy * correct / len(matches)
        score += w.similarity * sum(m.similarity for m in matches) / len(matches)

    score += w.timing if timing.reasonable else w.timing_partial

    if coverage.adequate:
        score += w.coverage
    else:
        # Ramp up to the band minimum, capped
        score += min(w.coverage_partial_cap, coverage.percentage / coverage.min_percentage * w.coverage_partial_cap)

    return score


def score_fallback(
    context: Fallback,
    stroke_count: StrokeCountCheck,
    timing: TimingCheck,
    coverage: CoverageCheck,
) -> float:
    w = FALLBACK_WEIGHTS
    score = 0.0

    # Nothing drawn earns no count credit, even for a zero-stroke target
    if stroke_count.actual > 0:
        if stroke_count.correct:
            score += w.stroke_count
        else:
            diff = abs(stroke_count.actual - stroke_count.expected)
            score += max(0.0, w.stroke_count - diff * w.count_penalty_per_stroke)

    score += w.timing if timing.reasonable else w.timing_partial

    if coverage.adequate:
        score += w.coverage
    else:
        score += min(w.coverage_partial_cap, coverage.percentage)

    score += context.direction.score * w.direction
    return score


def calculate_score(
    context: ScoringContext,
    stroke_count: StrokeCountCheck,
    timing: TimingCheck,
    coverage: CoverageCheck,
) -> int:
    if isinstance(context, WithMatches):
        raw = score_with_matches(context, timing, coverage)
    else:
        raw = score_fallback(context, stroke_count, timing, coverage)
    return round_half_up(min(100.0, max(0.0, raw)))


class StrokeValidator:
    """Validates drawings of one target character on one canvas size."""

    def __init__(self, target: Target, canvas_width: float = DEFAULT_CANVAS_SIZE, canvas_height: float = DEFAULT_CANVAS_SIZE):
        if canvas_width <= 0 or canvas_height <= 0:
            raise ValueError(f"Canvas size must be positive, got {canvas_width}x{canvas_height}")
        self.target = target
        self.canvas_width = canvas_width
        self.canvas_height = canvas_height

    @classmethod
    def from_settings(cls, target: Target, settings: Settings) -> "StrokeValidator":
        return cls(target, settings.canvas_width, settings.canvas_height)

    def match_strokes(
        self,
        strokes: Sequence[CapturedStroke],
        paths: Sequence[ReferenceStrokePath],
    ) -> List[StrokeMatch]:
        """
        Pairs strokes by drawing order. Unpaired strokes on either side become
        zero-similarity matches.
        """
        matches: List[StrokeMatch] = []
        for i in range(max(len(strokes), len(paths))):
            if i >= len(paths):
                matches.append(StrokeMatch(stroke_index=i, is_correct=False, similarity=0.0, feedback=EXTRA_STROKE))
                continue
            if i >= len(strokes):
                matches.append(StrokeMatch(stroke_index=i, is_correct=False, similarity=0.0, feedback=MISSING_STROKE))
                continue

            comparison = compare_detailed(strokes[i], paths[i], self.canvas_width, self.canvas_height)
            is_correct = comparison.similarity >= STROKE_MATCH_THRESHOLD
            matches.append(StrokeMatch(
                stroke_index=i,
                is_correct=is_correct,
                similarity=comparison.similarity,
                feedback=describe_comparison(comparison, is_correct),
            ))
        return matches

    def _scoring_context(
        self,
        strokes: Sequence[CapturedStroke],
        reference: Optional[ReferenceLookup],
    ) -> ScoringContext:
        if isinstance(reference, ReferenceStrokes) and reference.paths:
            return WithMatches(matches=self.match_strokes(strokes, reference.paths))
        return Fallback(direction=check_generic_direction(strokes))

    def validate_strokes(
        self,
        strokes: Sequence[CapturedStroke],
        reference: Optional[ReferenceLookup] = None,
    ) -> ValidationResult:
        """
        Synchronous validation for callers that already hold the reference
        data (or know there is none).
        """
        stroke_count = check_stroke_count(self.target, strokes)
        timing = check_timing(strokes)
        coverage = check_coverage(self.target, strokes, self.canvas_width, self.canvas_height)

        context = self._scoring_context(strokes, reference)
        score = calculate_score(context, stroke_count, timing, coverage)

        if isinstance(context, WithMatches):
            matches: Optional[List[StrokeMatch]] = context.matches
            feedback = compose_feedback(self.target, stroke_count, timing, coverage, matches=matches)
        else:
            matches = None
            feedback = compose_feedback(self.target, stroke_count, timing, coverage, direction=context.direction)

        logger.debug(
            "Validated %s: score=%d strokes=%d/%d timing=%s coverage=%s%% direction=%.2f matched=%s",
            self.target.character, score, stroke_count.actual, stroke_count.expected,
            timing.reasonable, coverage.percentage, context.direction.score, matches is not None,
        )

        return ValidationResult(
            is_valid=score >= PASS_SCORE,
            score=score,
            feedback=feedback,
            stroke_count=stroke_count,
            timing=timing,
            coverage=coverage,
            stroke_matches=matches,
        )

    async def validate(
        self,
        strokes: Sequence[CapturedStroke],
        provider: Optional[ReferenceStrokeProvider],
    ) -> ValidationResult:
        reference = await load_reference(provider, self.target.character)
        return self.validate_strokes(strokes, reference)


async def validate(
    target: Target,
    strokes: Sequence[CapturedStroke],
    canvas_width: float,
    canvas_height: float,
    provider: Optional[ReferenceStrokeProvider],
) -> ValidationResult:
    return await StrokeValidator(target, canvas_width, canvas_height).validate(strokes, provider)


def validate_with_reference(
    target: Target,
    strokes: Sequence[CapturedStroke],
    canvas_width: float,
    canvas_height: float,
    reference: Optional[ReferenceLookup] = None,
) -> ValidationResult:
    return StrokeValidator(target, canvas_width, canvas_height).validate_strokes(strokes, reference)


def validate_kanji_drawing(
    kanji: Kanji,
    strokes: Sequence[CapturedStroke],
    canvas_width: float = DEFAULT_CANVAS_SIZE,
    canvas_height: float = DEFAULT_CANVAS_SIZE,
    reference: Optional[ReferenceLookup] = None,
) -> ValidationResult:
    """Convenience wrapper for the practice screen, which works with Kanji records."""
    return validate_with_reference(kanji.to_target(), strokes, canvas_width, canvas_height, reference)
