"""Scoring helpers shared by the per-shape evaluators."""

import math

from shapefidelity.geometry.primitives import angle_between, distance

# Uniform difficulty discount: a perfect line, triangle or square scores 80.
DIFFICULTY_DISCOUNT = 0.8

MIN_SCORE = 0.0
MAX_SCORE = 100.0


def clamp_score(value):
    """Clamp a raw score into [0, 100], mapping NaN to 0."""
    if value is None or math.isnan(value):
        return MIN_SCORE
    return max(MIN_SCORE, min(MAX_SCORE, value))


def polygon_angles(vertices):
    """Interior angle (radians) at each vertex of a closed polygon."""
    n = len(vertices)
    return [
        angle_between(vertices[(i - 1) % n], vertices[i], vertices[(i + 1) % n])
        for i in range(n)
    ]


def polygon_sides(vertices):
    """Length of each side of a closed polygon, starting at vertex 0."""
    n = len(vertices)
    return [distance(vertices[i], vertices[(i + 1) % n]) for i in range(n)]


def angle_deviation_score(angles, ideal):
    """1 minus the mean relative deviation of angles from ideal, floored at 0."""
    if not angles:
        return 0.0
    deviation = sum(abs(a - ideal) / ideal for a in angles) / len(angles)
    return max(0.0, 1.0 - deviation)


def side_deviation_score(sides):
    """1 minus the mean relative deviation of sides from their mean, floored at 0."""
    if not sides:
        return 0.0
    mean_side = sum(sides) / len(sides)
    if mean_side == 0:
        return 0.0
    deviation = sum(abs(s - mean_side) / mean_side for s in sides) / len(sides)
    return max(0.0, 1.0 - deviation)
