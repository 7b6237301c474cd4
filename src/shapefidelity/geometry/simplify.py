"""
Heuristic reduction of a freehand stroke to a fixed number of vertices.

Closed strokes use angular sectors around the centroid and keep the
farthest candidate per sector. Open strokes start from the farthest pair
and grow a polyline by repeatedly adding the point farthest from it.
Neither path is a rigorous corner detector: the result records which
strategy ran and how many sectors came up empty.
"""

import math

import numpy as np
from shapely.geometry import LineString
from shapely.geometry import Point as ShapelyPoint

from shapefidelity.geometry.primitives import as_array, is_closed, is_finite_stroke
from shapefidelity.models import SimplifiedShape, SimplifyStrategy, to_points
from shapefidelity.tracer import get_tracer, trace


@trace(label="simplify_shape", arg_names=("target_vertices",))
def simplify_shape(stroke, target_vertices):
    """
    Reduce a stroke to target_vertices representative points.

    Args:
        stroke: ordered points of one drawing attempt
        target_vertices: number of vertices wanted (2 for a line, 3 or 4
            for closed polygons)

    Returns:
        SimplifiedShape whose vertices are in sector order for closed
        strokes and in drawing order for open ones

    Raises:
        ValueError: when any coordinate is NaN or infinite
    """
    tracer = get_tracer()
    points = to_points(stroke)

    if not is_finite_stroke(points):
        raise ValueError("stroke has non-finite coordinates")

    if len(points) <= target_vertices:
        return SimplifiedShape(
            vertices=points,
            indices=list(range(len(points))),
            target_count=target_vertices,
            strategy=SimplifyStrategy.PASSTHROUGH,
        )

    arr = as_array(points)
    closed = is_closed(points)
    tracer.event("Stroke closure", level="DEBUG", closed=closed, points=len(points))

    if closed and target_vertices in (3, 4):
        indices, strategy, empty = _closed_corners(arr, target_vertices)
    else:
        indices, strategy, empty = _open_vertices(arr, target_vertices)

    if empty:
        tracer.event(f"{empty} empty sector(s), used {strategy.value}", level="WARN")

    return SimplifiedShape(
        vertices=[points[i] for i in indices],
        indices=indices,
        target_count=target_vertices,
        strategy=strategy,
        empty_sectors=empty,
    )


def rank_by_centroid_distance(arr):
    """
    Indices of arr ordered by descending distance from its centroid.

    Equal distances keep drawing order.
    """
    center = arr.mean(axis=0)
    dists = np.linalg.norm(arr - center, axis=1)
    order = np.argsort(-dists, kind="stable")
    return [int(i) for i in order], center, dists


def _closed_corners(arr, n):
    """
    Pick one corner per angular sector around the centroid.

    Candidates are the 2n points farthest from the centroid. The circle is
    cut into n sectors of width 2*pi/n starting at angle 0; each sector
    keeps its farthest candidate, ties going to the candidate ranked first.
    Returns (indices, strategy, empty_sector_count).
    """
    # Sectors are centred on the whole stroke, not on the candidate subset
    ranked, center, dists = rank_by_centroid_distance(arr)
    candidates = ranked[:min(len(ranked), 2 * n)]

    step = 2 * math.pi / n
    best = [None] * n

    for idx in candidates:
        dx, dy = arr[idx] - center
        angle = math.atan2(dy, dx)
        if angle < 0:
            angle += 2 * math.pi
        sector = min(int(angle // step), n - 1)

        if best[sector] is None or dists[idx] > dists[best[sector]]:
            best[sector] = idx

    corners = [idx for idx in best if idx is not None]
    empty = n - len(corners)

    if empty:
        return ranked[:n], SimplifyStrategy.FARTHEST_FALLBACK, empty

    return corners, SimplifyStrategy.SECTORS, 0


def farthest_pair(arr):
    """
    Indices (i, j), i < j, of the two points with the greatest separation.

    The first maximal pair in drawing order wins. Memory stays linear in
    the stroke length: each row is compared only with the points after it.
    """
    n = len(arr)
    if n < 2:
        return 0, 0

    best = (0, n - 1)
    best_dist = 0.0
    for i in range(n - 1):
        dists = np.linalg.norm(arr[i + 1:] - arr[i], axis=1)
        k = int(np.argmax(dists))
        if dists[k] > best_dist:
            best_dist = float(dists[k])
            best = (i, i + 1 + k)
    return best


def _open_vertices(arr, n):
    """
    Anchor on the farthest pair, then grow a polyline to n vertices.

    Each round adds the unselected point whose distance to the current
    polyline is largest, then re-sorts the selection by stroke index.
    Returns (indices, strategy, 0).
    """
    i, j = farthest_pair(arr)
    selected = [i, j]

    if n <= 2:
        return selected[:n], SimplifyStrategy.FARTHEST_PAIR, 0

    while len(selected) < n:
        coords = [tuple(arr[k]) for k in selected]
        if len(set(coords)) > 1:
            reference = LineString(coords)
        else:
            reference = ShapelyPoint(coords[0])

        best_idx = None
        best_dist = -1.0
        chosen = set(selected)
        for k in range(len(arr)):
            if k in chosen:
                continue
            d = reference.distance(ShapelyPoint(arr[k][0], arr[k][1]))
            if d > best_dist:
                best_dist = d
                best_idx = k

        if best_idx is None:
            break

        selected.append(best_idx)
        selected.sort()

    return selected, SimplifyStrategy.POLYLINE_GROWTH, 0
