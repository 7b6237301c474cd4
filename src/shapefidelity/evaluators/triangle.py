"""Equilateral triangle evaluation."""

import math

from shapefidelity.evaluators.common import (
    DIFFICULTY_DISCOUNT, angle_deviation_score, clamp_score, polygon_angles,
)
from shapefidelity.geometry.primitives import is_closed, is_finite_stroke
from shapefidelity.geometry.simplify import simplify_shape
from shapefidelity.models import ShapeScore, ShapeType, to_points
from shapefidelity.tracer import get_tracer, trace

IDEAL_ANGLE = math.pi / 3

ANGLE_WEIGHT = 70
CLOSURE_WEIGHT = 30


@trace(label="score_triangle")
def score_triangle(stroke):
    """
    Detailed triangle score.

    The stroke is reduced to three corners whose interior angles are
    compared with 60 degrees. Closure is judged on the raw stroke. A
    stroke that yields fewer than three corners scores 0.
    """
    tracer = get_tracer()
    points = to_points(stroke)

    if not is_finite_stroke(points):
        tracer.event("Stroke has non-finite coordinates", level="WARN")
        return ShapeScore(shape_type=ShapeType.TRIANGLE, score=0.0)

    shape = simplify_shape(points, ShapeType.TRIANGLE.vertex_count)
    if not shape.is_complete:
        tracer.event(f"Triangle needs 3 vertices, found {len(shape.vertices)}", level="WARN")
        return ShapeScore(shape_type=ShapeType.TRIANGLE, score=0.0, vertices=shape.vertices)

    angles = polygon_angles(shape.vertices)
    angle_score = angle_deviation_score(angles, IDEAL_ANGLE)
    closure = 1.0 if is_closed(points) else 0.5

    raw = (angle_score * ANGLE_WEIGHT + closure * CLOSURE_WEIGHT) * DIFFICULTY_DISCOUNT
    score = clamp_score(raw)

    tracer.event(
        f"Triangle: angles={[round(math.degrees(a), 1) for a in angles]} score={score:.2f}",
        level="DEBUG",
    )

    return ShapeScore(
        shape_type=ShapeType.TRIANGLE,
        score=score,
        components={"angle": angle_score, "closure": closure},
        vertices=shape.vertices,
    )


def evaluate_triangle(stroke):
    """Fidelity score in [0, 100] of a stroke drawn as an equilateral triangle."""
    return score_triangle(stroke).score
