"""
Circle evaluation.

A circle stroke is judged against a reference circle: the caller's target
when one is given, otherwise the algebraic least-squares circle through
the stroke. Three sub-scores are combined:

- stroke deviation: mean relative distance of points from the circle
- angular smoothness: mean turning angle between consecutive segments
- completion offset: gap between the first and last point

Each sub-score maps its measurement through excellent/good/poor bands.
Difficulty and penalty mode tighten every band.
"""

import math

import numpy as np

from shapefidelity.evaluators.common import clamp_score
from shapefidelity.geometry.primitives import as_array, is_finite_stroke
from shapefidelity.models import CircleTarget, CircleThresholds, ShapeScore, ShapeType, to_points
from shapefidelity.tracer import get_tracer, trace

DEVIATION_WEIGHT = 0.5
SMOOTHNESS_WEIGHT = 0.3
COMPLETION_WEIGHT = 0.2

PENALTY_MULTIPLIER = 1.25

# Score at the good and poor band edges for each sub-score
DEVIATION_LEVELS = (80.0, 50.0)
SMOOTHNESS_LEVELS = (75.0, 40.0)
COMPLETION_LEVELS = (85.0, 60.0)


def banded_score(value, band, levels):
    """
    Map a measurement onto 0-100 through a threshold band.

    At or below band.excellent scores 100; between band edges the score
    falls linearly to levels[0] at band.good and levels[1] at band.poor;
    beyond band.poor it falls to 0 at twice band.poor.
    """
    good_level, poor_level = levels
    if value <= band.excellent:
        return 100.0
    if value <= band.good:
        ratio = (value - band.excellent) / (band.good - band.excellent)
        return 100.0 - ratio * (100.0 - good_level)
    if value <= band.poor:
        ratio = (value - band.good) / (band.poor - band.good)
        return good_level - ratio * (good_level - poor_level)
    excess = min(1.0, (value - band.poor) / band.poor)
    return max(0.0, poor_level - excess * poor_level)


def fit_circle(stroke):
    """
    Algebraic (Kasa) least-squares circle through the stroke points.

    Solves x^2 + y^2 + Dx + Ey + F = 0. Collinear or coincident points,
    and coordinates whose squares overflow, fall back to the centroid and
    mean radius; a zero radius becomes 1.
    """
    arr = as_array(stroke)
    if len(arr) == 0:
        return CircleTarget(x=0.0, y=0.0, radius=1.0)

    x = arr[:, 0]
    y = arr[:, 1]
    design = np.column_stack([x, y, np.ones_like(x)])
    rhs = -(x * x + y * y)

    # lstsq does not converge on inf or NaN input
    if np.isfinite(rhs).all():
        (d, e, f), _, rank, _ = np.linalg.lstsq(design, rhs, rcond=None)
        cx = -d / 2.0
        cy = -e / 2.0
        r_sq = cx * cx + cy * cy - f

        if rank == 3 and np.isfinite(r_sq) and r_sq > 0:
            return CircleTarget(x=float(cx), y=float(cy), radius=float(math.sqrt(r_sq)))

    center = arr.mean(axis=0)
    radius = float(np.mean(np.linalg.norm(arr - center, axis=1)))
    return CircleTarget(x=float(center[0]), y=float(center[1]), radius=radius or 1.0)


def stroke_deviation(arr, circle, band):
    """Sub-score for how closely the stroke follows the circle's rim."""
    radii = np.linalg.norm(arr - np.array([circle.x, circle.y]), axis=1)
    mean_deviation = float(np.mean(np.abs(radii - circle.radius) / circle.radius))
    return banded_score(mean_deviation, band, DEVIATION_LEVELS)


def turning_angles(arr):
    """Turning angle (degrees) at each interior point with two non-degenerate segments."""
    if len(arr) < 3:
        return np.zeros(0)
    v1 = arr[1:-1] - arr[:-2]
    v2 = arr[2:] - arr[1:-1]
    mag1 = np.linalg.norm(v1, axis=1)
    mag2 = np.linalg.norm(v2, axis=1)
    valid = (mag1 > 0) & (mag2 > 0)
    if not np.any(valid):
        return np.zeros(0)
    cos = np.sum(v1[valid] * v2[valid], axis=1) / (mag1[valid] * mag2[valid])
    return np.degrees(np.arccos(np.clip(cos, -1.0, 1.0)))


def angular_smoothness(arr, band):
    """Sub-score for how evenly the stroke turns."""
    angles = turning_angles(arr)
    if len(angles) == 0:
        return 100.0
    return banded_score(float(np.mean(angles)), band, SMOOTHNESS_LEVELS)


def completion_offset(arr, circle, band):
    """Sub-score for how well the stroke's end meets its start."""
    gap = float(np.linalg.norm(arr[-1] - arr[0]))
    return banded_score(gap / circle.radius, band, COMPLETION_LEVELS)


def radial_symmetry(arr, circle):
    """Standard deviation of radii about the circle centre, relative to their mean."""
    radii = np.linalg.norm(arr - np.array([circle.x, circle.y]), axis=1)
    mean_radius = float(np.mean(radii))
    return float(np.std(radii)) / (mean_radius or 1.0)


@trace(label="score_circle")
def score_circle(stroke, target=None, difficulty_level=50, penalty_mode=False, thresholds=None):
    """
    Detailed circle score.

    Args:
        stroke: ordered points of the attempt
        target: CircleTarget to compare against; fitted from the stroke
            when None
        difficulty_level: 0-100, scales thresholds by 0.5x-1.5x
        penalty_mode: tightens thresholds by a further 25%
        thresholds: CircleThresholds overriding the default bands

    Returns:
        ShapeScore with deviation, smoothness, completion and symmetry
        components. Fewer than three points, or any non-finite coordinate,
        scores 0.
    """
    tracer = get_tracer()
    points = to_points(stroke)

    if len(points) < 3:
        return ShapeScore(shape_type=ShapeType.CIRCLE, score=0.0)

    if not is_finite_stroke(points):
        tracer.event("Stroke has non-finite coordinates", level="WARN")
        return ShapeScore(shape_type=ShapeType.CIRCLE, score=0.0)

    arr = as_array(points)
    circle = target if target is not None else fit_circle(points)
    if not np.isfinite([circle.x, circle.y, circle.radius]).all():
        tracer.event("Reference circle is not finite", level="WARN")
        return ShapeScore(shape_type=ShapeType.CIRCLE, score=0.0)

    thresholds = thresholds or CircleThresholds()

    difficulty_level = max(0.0, min(100.0, float(difficulty_level)))
    multiplier = (0.5 + difficulty_level / 100.0) * (PENALTY_MULTIPLIER if penalty_mode else 1.0)
    deviation = stroke_deviation(arr, circle, thresholds.deviation.scaled(multiplier))
    smoothness = angular_smoothness(arr, thresholds.smoothness.scaled(multiplier))
    completion = completion_offset(arr, circle, thresholds.completion.scaled(multiplier))

    overall = (
        deviation * DEVIATION_WEIGHT
        + smoothness * SMOOTHNESS_WEIGHT
        + completion * COMPLETION_WEIGHT
    )
    score = clamp_score(round(overall, 2))

    tracer.event(
        f"Circle: deviation={deviation:.1f} smoothness={smoothness:.1f} "
        f"completion={completion:.1f} score={score:.2f}",
        level="DEBUG",
        fitted=target is None,
    )

    return ShapeScore(
        shape_type=ShapeType.CIRCLE,
        score=score,
        components={
            "deviation": round(deviation, 2),
            "smoothness": round(smoothness, 2),
            "completion": round(completion, 2),
            "symmetry": radial_symmetry(arr, circle),
            "radius": circle.radius,
        },
    )


def evaluate_circle(stroke, target=None, difficulty_level=50, penalty_mode=False):
    """Fidelity score in [0, 100] of a stroke drawn as a circle."""
    return score_circle(
        stroke, target=target, difficulty_level=difficulty_level, penalty_mode=penalty_mode,
    ).score
