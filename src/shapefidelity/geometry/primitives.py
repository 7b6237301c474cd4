"""
Geometry primitives shared by the simplifier and the evaluators.

All functions take Point models (or anything to_points accepts) and return
plain floats or Points. Degenerate inputs are guarded so callers always
get finite values.
"""

import math

import numpy as np

from shapefidelity.models import Point, to_points

# A stroke is "closed" when its end lands within this fraction of the
# distance from its start to its middle sample.
CLOSURE_RATIO = 0.3


def as_array(points):
    """Return points as an (n, 2) float array."""
    points = to_points(points)
    if not points:
        return np.zeros((0, 2), dtype=float)
    return np.array([[p.x, p.y] for p in points], dtype=float)


def is_finite_stroke(points):
    """True when every coordinate of the stroke is a finite number."""
    return bool(np.isfinite(as_array(points)).all())


def distance(a, b):
    """Euclidean distance between two points."""
    return math.hypot(b.x - a.x, b.y - a.y)


def centroid(points):
    """
    Arithmetic mean of all points.

    Raises ValueError on an empty sequence.
    """
    arr = as_array(points)
    if len(arr) == 0:
        raise ValueError("centroid of an empty point set is undefined")
    cx, cy = arr.mean(axis=0)
    return Point(x=float(cx), y=float(cy))


def angle_between(p1, p2, p3):
    """
    Interior angle at p2 (radians) of the triangle p1-p2-p3.

    Uses the law of cosines. Returns 0.0 when either side adjacent to p2
    has zero length.
    """
    a = distance(p2, p3)
    b = distance(p1, p2)
    c = distance(p1, p3)

    if a == 0 or b == 0:
        return 0.0

    cos_angle = (a * a + b * b - c * c) / (2 * a * b)
    return math.acos(max(-1.0, min(1.0, cos_angle)))


def normalize_points(points):
    """
    Translate points so their centroid is the origin and scale them so the
    farthest point lies at distance 1.

    A set whose points all coincide is only translated.
    """
    arr = as_array(points)
    if len(arr) == 0:
        return []

    centered = arr - arr.mean(axis=0)
    max_dist = float(np.max(np.linalg.norm(centered, axis=1)))
    scale = max_dist if max_dist > 0 else 1.0

    scaled = centered / scale
    return [Point(x=float(x), y=float(y)) for x, y in scaled]


def point_line_distance(p, a, b):
    """
    Perpendicular distance from p to the infinite line through a and b.

    When a and b coincide this is the distance from p to a.
    """
    length = distance(a, b)
    if length == 0:
        return distance(p, a)
    cross = (b.x - a.x) * (p.y - a.y) - (b.y - a.y) * (p.x - a.x)
    return abs(cross) / length


def point_segment_distance(p, a, b):
    """Distance from p to the closest point of segment a-b."""
    length_sq = (b.x - a.x) ** 2 + (b.y - a.y) ** 2
    if length_sq == 0:
        return distance(p, a)

    t = ((p.x - a.x) * (b.x - a.x) + (p.y - a.y) * (b.y - a.y)) / length_sq
    t = max(0.0, min(1.0, t))
    nearest = Point(x=a.x + t * (b.x - a.x), y=a.y + t * (b.y - a.y))
    return distance(p, nearest)


def path_length(points):
    """Sum of consecutive segment lengths along a stroke."""
    arr = as_array(points)
    if len(arr) < 2:
        return 0.0
    return float(np.sum(np.linalg.norm(np.diff(arr, axis=0), axis=1)))


def is_closed(points, ratio=CLOSURE_RATIO):
    """
    Closure heuristic: does the stroke end near where it started?

    Compares the start-to-end gap with the start-to-middle distance. This
    is a cheap proxy, not a polygon closure test.
    """
    points = to_points(points)
    if len(points) < 2:
        return False
    first = points[0]
    last = points[-1]
    middle = points[len(points) // 2]
    return distance(first, last) < distance(first, middle) * ratio
