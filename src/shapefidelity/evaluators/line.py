"""
Straight line evaluation.

Scores a stroke on how little motion it wasted (chord over path length)
and how closely its interior points hug the chord between its endpoints.
The simplifier is not used: the raw stroke is the evidence.
"""

from shapefidelity.evaluators.common import DIFFICULTY_DISCOUNT, clamp_score
from shapefidelity.geometry.primitives import (
    distance, is_finite_stroke, path_length, point_line_distance,
)
from shapefidelity.models import ShapeScore, ShapeType, to_points
from shapefidelity.tracer import get_tracer, trace

STRAIGHTNESS_WEIGHT = 60
DEVIATION_WEIGHT = 40


@trace(label="score_line")
def score_line(stroke):
    """
    Detailed line score.

    Returns ShapeScore with components straightness and deviation, both in
    [0, 1].
    """
    tracer = get_tracer()
    points = to_points(stroke)

    if len(points) < 2 or not is_finite_stroke(points):
        return ShapeScore(shape_type=ShapeType.LINE, score=0.0)

    start = points[0]
    end = points[-1]
    chord = distance(start, end)
    travelled = path_length(points)

    straightness = chord / (travelled or 1.0)

    interior = points[1:-1]
    if interior:
        reference = chord or 1.0
        mean_offset = sum(
            point_line_distance(p, start, end) / reference for p in interior
        ) / len(interior)
        deviation = max(0.0, 1.0 - mean_offset)
    else:
        deviation = 1.0

    raw = (straightness * STRAIGHTNESS_WEIGHT + deviation * DEVIATION_WEIGHT) * DIFFICULTY_DISCOUNT
    score = clamp_score(raw)

    tracer.event(
        f"Line: straightness={straightness:.3f} deviation={deviation:.3f} score={score:.2f}",
        level="DEBUG",
    )

    return ShapeScore(
        shape_type=ShapeType.LINE,
        score=score,
        components={"straightness": straightness, "deviation": deviation},
        vertices=[start, end],
    )


def evaluate_line(stroke):
    """Fidelity score in [0, 100] of a stroke drawn as a straight line."""
    return score_line(stroke).score
