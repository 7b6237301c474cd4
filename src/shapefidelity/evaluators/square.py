"""Square evaluation: right angles, equal sides, closed path."""

import math

from shapefidelity.evaluators.common import (
    DIFFICULTY_DISCOUNT, angle_deviation_score, clamp_score,
    polygon_angles, polygon_sides, side_deviation_score,
)
from shapefidelity.geometry.primitives import is_closed, is_finite_stroke
from shapefidelity.geometry.simplify import simplify_shape
from shapefidelity.models import ShapeScore, ShapeType, to_points
from shapefidelity.tracer import get_tracer, trace

IDEAL_ANGLE = math.pi / 2

ANGLE_WEIGHT = 40
SIDE_WEIGHT = 40
CLOSURE_WEIGHT = 20


@trace(label="score_square")
def score_square(stroke):
    """
    Detailed square score.

    Four corners are extracted; their angles are compared with 90 degrees
    and the four sides with their mean length. Fewer than four corners
    scores 0.
    """
    tracer = get_tracer()
    points = to_points(stroke)

    if not is_finite_stroke(points):
        tracer.event("Stroke has non-finite coordinates", level="WARN")
        return ShapeScore(shape_type=ShapeType.SQUARE, score=0.0)

    shape = simplify_shape(points, ShapeType.SQUARE.vertex_count)
    if not shape.is_complete:
        tracer.event(f"Square needs 4 vertices, found {len(shape.vertices)}", level="WARN")
        return ShapeScore(shape_type=ShapeType.SQUARE, score=0.0, vertices=shape.vertices)

    angle_score = angle_deviation_score(polygon_angles(shape.vertices), IDEAL_ANGLE)
    side_score = side_deviation_score(polygon_sides(shape.vertices))
    closure = 1.0 if is_closed(points) else 0.5

    raw = (
        angle_score * ANGLE_WEIGHT
        + side_score * SIDE_WEIGHT
        + closure * CLOSURE_WEIGHT
    ) * DIFFICULTY_DISCOUNT
    score = clamp_score(raw)

    tracer.event(
        f"Square: angle={angle_score:.3f} side={side_score:.3f} closure={closure} score={score:.2f}",
        level="DEBUG",
    )

    return ShapeScore(
        shape_type=ShapeType.SQUARE,
        score=score,
        components={"angle": angle_score, "side": side_score, "closure": closure},
        vertices=shape.vertices,
    )


def evaluate_square(stroke):
    """Fidelity score in [0, 100] of a stroke drawn as a square."""
    return score_square(stroke).score
