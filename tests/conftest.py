"""Pytest fixtures for shape fidelity tests."""

import math
import tempfile

import numpy as np
import pytest

from shapefidelity.models import Point


def polygon_stroke(vertices, points_per_side=5, close=True):
    """Sample a polygon outline as a stroke, starting at the first vertex."""
    stroke = []
    n = len(vertices)
    for i in range(n):
        (x0, y0), (x1, y1) = vertices[i], vertices[(i + 1) % n]
        for k in range(points_per_side):
            t = k / points_per_side
            stroke.append(Point(x=x0 + t * (x1 - x0), y=y0 + t * (y1 - y0)))
    if close:
        stroke.append(Point(x=vertices[0][0], y=vertices[0][1]))
    return stroke


def circle_stroke(cx, cy, radius, samples=64, wobble=0.0, lobes=5, sweep=2 * math.pi):
    """Sample a (possibly wobbly or partial) circle as a stroke."""
    theta = np.linspace(0, sweep, samples + 1)
    r = radius * (1 + wobble * np.sin(lobes * theta))
    return [Point(x=float(cx + ri * math.cos(t)), y=float(cy + ri * math.sin(t))) for ri, t in zip(r, theta)]


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def make_polygon_stroke():
    return polygon_stroke


@pytest.fixture
def make_circle_stroke():
    return circle_stroke


@pytest.fixture
def equilateral_vertices():
    return [(0.0, 0.0), (100.0, 0.0), (50.0, 50.0 * math.sqrt(3))]


@pytest.fixture
def square_vertices():
    return [(0.0, 0.0), (100.0, 0.0), (100.0, 100.0), (0.0, 100.0)]


@pytest.fixture
def equilateral_stroke(equilateral_vertices):
    """Closed equilateral triangle, 5 samples per side."""
    return polygon_stroke(equilateral_vertices)


@pytest.fixture
def square_stroke(square_vertices):
    """Closed square, 5 samples per side."""
    return polygon_stroke(square_vertices)


@pytest.fixture
def straight_line_stroke():
    """50 evenly spaced points from (0, 0) to (100, 0)."""
    return [Point(x=float(x), y=0.0) for x in np.linspace(0, 100, 50)]


@pytest.fixture(autouse=True)
def reset_tracer():
    """Leave the global tracer disabled after every test."""
    yield
    from shapefidelity.tracer import configure_tracer
    configure_tracer(enabled=False)
