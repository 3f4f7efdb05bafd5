from typing import List, Optional, Sequence
from ..ingestion.models import Target
from ..stroke_engine.matcher import StrokeComparison
from .rules import MIN_STROKE_TIME_MS
from .schema import CoverageCheck, DirectionCheck, StrokeCountCheck, StrokeMatch, TimingCheck

EXTRA_STROKE = "Extra stroke - this kanji has fewer strokes"
MISSING_STROKE = "Missing stroke"
NO_STROKES = "No strokes drawn yet - draw the kanji to get feedback on your pacing"


def describe_comparison(comparison: StrokeComparison, is_correct: bool) -> str:
    """Short note for one compared stroke, naming its weakest aspect."""
    if is_correct:
        return "Good stroke"
    if comparison.too_short:
        return "Stroke is too short - draw it as one continuous line"
    if not comparison.comparable:
        return "Could not compare against the reference stroke"
    # Below 0.5 the stroke points more than 90 degrees away from the reference
    if comparison.direction_similarity < 0.5:
        return "Wrong direction - check where this stroke starts and ends"
    if comparison.start_similarity <= comparison.end_similarity:
        return "Starts too far from where it should"
    return "Ends too far from where it should"


def stroke_count_line(target: Target, check: StrokeCountCheck) -> str:
    if check.correct:
        return f"✓ Correct number of strokes ({check.expected})"
    if check.actual < check.expected:
        return (
            f"You used {check.actual} strokes, but {target.character} has "
            f"{check.expected} strokes. Try adding more detail."
        )
    return (
        f"You used {check.actual} strokes, but {target.character} only has "
        f"{check.expected} strokes. Try to be more efficient."
    )


def timing_line(check: TimingCheck, stroke_count: int) -> str:
    if stroke_count == 0:
        return NO_STROKES
    if check.reasonable:
        return "✓ Good pacing - not too fast or slow"
    if check.average_stroke_time_ms < MIN_STROKE_TIME_MS:
        return "Try slowing down a bit - take time to be deliberate with each stroke"
    return "Good attention to detail - you can try being a bit quicker"


def coverage_line(check: CoverageCheck) -> str:
    if check.adequate:
        return "✓ Good use of the writing space"
    if check.issue == "too_large":
        return "Your kanji is too large - leave some margin around it"
    if check.issue == "proportions":
        return "Check proportions - your kanji looks too narrow or too flat"
    return "Try making your kanji larger - use more of the writing area"


def direction_line(check: DirectionCheck) -> str:
    if check.reasonable:
        return "✓ Good stroke direction"
    return "Remember: Japanese strokes generally go from top to bottom, left to right"


def compose_feedback(
    target: Target,
    stroke_count: StrokeCountCheck,
    timing: TimingCheck,
    coverage: CoverageCheck,
    matches: Optional[Sequence[StrokeMatch]] = None,
    direction: Optional[DirectionCheck] = None,
) -> List[str]:
    """
    With stroke matches the list leads with the per-stroke verdicts and
    skips the generic count/direction lines.
    """
    feedback: List[str] = []

    if matches is not None:
        correct = sum(1 for m in matches if m.is_correct)
        if matches and correct == len(matches):
            feedback.append(f"✓ {correct}/{len(matches)} strokes correct")
        else:
            feedback.append(f"{correct}/{len(matches)} strokes correct")
        for m in matches:
            if not m.is_correct:
                feedback.append(f"Stroke {m.stroke_index + 1}: {m.feedback}")
        feedback.append(timing_line(timing, stroke_count.actual))
        feedback.append(coverage_line(coverage))
        return feedback

    feedback.append(stroke_count_line(target, stroke_count))
    feedback.append(timing_line(timing, stroke_count.actual))
    feedback.append(coverage_line(coverage))
    if direction is not None:
        feedback.append(direction_line(direction))
    return feedback
