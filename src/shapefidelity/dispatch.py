"""
Single entry point for scoring a stroke against a target shape.

Scoring never raises for bad geometry: too-short strokes, non-finite
coordinates and unknown shape tags score 0 so a malformed attempt can not
break the drawing loop.
"""

from shapefidelity.evaluators.circle import score_circle
from shapefidelity.evaluators.line import score_line
from shapefidelity.evaluators.square import score_square
from shapefidelity.evaluators.triangle import score_triangle
from shapefidelity.geometry.primitives import is_finite_stroke
from shapefidelity.models import CircleTarget, ShapeScore, ShapeType, to_points
from shapefidelity.tracer import get_tracer, trace

MIN_STROKE_POINTS = 2


def _circle(points, target, options):
    circle_target = target if isinstance(target, CircleTarget) else None
    return score_circle(points, target=circle_target, **options)


EVALUATORS = {
    ShapeType.LINE: lambda points, target, options: score_line(points),
    ShapeType.TRIANGLE: lambda points, target, options: score_triangle(points),
    ShapeType.SQUARE: lambda points, target, options: score_square(points),
    ShapeType.CIRCLE: _circle,
}


@trace(label="score_stroke", arg_names=("shape_type",))
def score_stroke(stroke, shape_type, target=None, **circle_options):
    """
    Score a stroke and return the full breakdown.

    Args:
        stroke: ordered points (Point, (x, y) pairs or x/y mappings)
        shape_type: ShapeType or its string tag
        target: CircleTarget for circle strokes; ignored by polygon
            evaluators, which judge shape rather than placement
        circle_options: difficulty_level, penalty_mode, thresholds for the
            circle evaluator

    Returns:
        ShapeScore; score 0 with shape_type None for an unknown tag
    """
    tracer = get_tracer()
    tag = ShapeType.parse(shape_type)
    points = to_points(stroke)

    if len(points) < MIN_STROKE_POINTS:
        tracer.event(f"Stroke too short ({len(points)} points)", level="WARN")
        return ShapeScore(shape_type=tag, score=0.0)

    if not is_finite_stroke(points):
        tracer.event("Stroke has non-finite coordinates", level="WARN")
        return ShapeScore(shape_type=tag, score=0.0)

    evaluator = EVALUATORS.get(tag)
    if evaluator is None:
        tracer.event(f"Unknown shape type {shape_type!r}", level="WARN")
        return ShapeScore(shape_type=None, score=0.0)

    result = evaluator(points, target, circle_options)
    tracer.event(f"Scored {tag.value}: {result.score:.2f}", points=len(points))
    return result


def evaluate_shape(stroke, shape_type, target=None, **circle_options):
    """Fidelity score in [0, 100] of a stroke against shape_type."""
    return score_stroke(stroke, shape_type, target=target, **circle_options).score
