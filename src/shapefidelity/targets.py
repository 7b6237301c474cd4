"""
Reference geometry for shape challenges.

Targets are laid out on a canvas of the given size; nothing here reads
the screen, so callers pass the canvas dimensions explicitly.
"""

import math

import numpy as np

from shapefidelity.models import CircleTarget, Point, ShapeType, TargetShape
from shapefidelity.tracer import get_tracer, trace

# Height of an equilateral triangle relative to its side
TRIANGLE_HEIGHT_RATIO = math.sqrt(3) / 2
CIRCLE_TARGET_SAMPLES = 64


@trace(label="generate_target_shape")
def generate_target_shape(shape_type, canvas_width, canvas_height, size_ratio=0.3, bottom_inset=70):
    """
    Build the target outline for a shape centred on the usable canvas.

    The usable canvas excludes bottom_inset pixels of navigation chrome.
    Closed shapes repeat their first point at the end.

    Raises:
        ValueError: for an unknown shape type or a non-positive canvas
    """
    tag = ShapeType.parse(shape_type)
    if tag is None:
        raise ValueError(f"Unknown shape type: {shape_type!r}")

    usable_height = canvas_height - bottom_inset
    if canvas_width <= 0 or usable_height <= 0:
        raise ValueError(f"Canvas too small: {canvas_width}x{canvas_height} (inset {bottom_inset})")

    cx = canvas_width / 2
    cy = usable_height / 2
    size = min(canvas_width, usable_height) * size_ratio
    half = size / 2

    if tag == ShapeType.LINE:
        coords = [(cx - half, cy), (cx + half, cy)]
    elif tag == ShapeType.TRIANGLE:
        h = size * TRIANGLE_HEIGHT_RATIO
        coords = [
            (cx, cy - h / 2),
            (cx - half, cy + h / 2),
            (cx + half, cy + h / 2),
            (cx, cy - h / 2),
        ]
    elif tag == ShapeType.SQUARE:
        coords = [
            (cx - half, cy - half),
            (cx + half, cy - half),
            (cx + half, cy + half),
            (cx - half, cy + half),
            (cx - half, cy - half),
        ]
    else:
        theta = np.linspace(0, 2 * np.pi, CIRCLE_TARGET_SAMPLES + 1)
        coords = list(zip(cx + half * np.cos(theta), cy + half * np.sin(theta)))
        coords[-1] = coords[0]

    get_tracer().event(f"Target {tag.value}: size={size:.1f} centre=({cx:.1f}, {cy:.1f})")

    return TargetShape(
        shape_type=tag,
        points=[Point(x=float(x), y=float(y)) for x, y in coords],
        width=size,
        height=size * TRIANGLE_HEIGHT_RATIO if tag == ShapeType.TRIANGLE else size,
        circle=CircleTarget(x=cx, y=cy, radius=half) if tag == ShapeType.CIRCLE else None,
    )


def generate_target_circle(canvas_width, canvas_height, padding=100, rng=None):
    """
    Random target circle that stays padding pixels clear of every edge.

    The radius is drawn from 15%-25% of the smaller canvas side. Pass a
    seeded numpy Generator for repeatable targets.

    Raises:
        ValueError: when the canvas cannot fit the circle and its padding
    """
    rng = rng if rng is not None else np.random.default_rng()
    smaller = min(canvas_width, canvas_height)
    min_radius = smaller * 0.15
    max_radius = smaller * 0.25

    radius = min_radius + rng.random() * (max_radius - min_radius)

    free_x = canvas_width - 2 * (radius + padding)
    free_y = canvas_height - 2 * (radius + padding)
    if free_x < 0 or free_y < 0:
        raise ValueError(
            f"Canvas {canvas_width}x{canvas_height} cannot fit radius {radius:.1f} with padding {padding}"
        )

    x = padding + radius + rng.random() * free_x
    y = padding + radius + rng.random() * free_y
    return CircleTarget(x=float(x), y=float(y), radius=float(radius))
