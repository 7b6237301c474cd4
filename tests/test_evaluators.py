"""Tests for the line, triangle and square evaluators."""

import math

import pytest

from shapefidelity.evaluators.circle import evaluate_circle
from shapefidelity.evaluators.common import DIFFICULTY_DISCOUNT, clamp_score
from shapefidelity.evaluators.line import evaluate_line, score_line
from shapefidelity.evaluators.square import evaluate_square, score_square
from shapefidelity.evaluators.triangle import evaluate_triangle, score_triangle
from shapefidelity.models import Point


def P(x, y):
    return Point(x=x, y=y)


class TestClampScore:
    """Tests for the final clamp."""

    def test_clamps_both_ends(self):
        assert clamp_score(-5.0) == 0.0
        assert clamp_score(150.0) == 100.0
        assert clamp_score(42.5) == 42.5

    def test_nan_becomes_zero(self):
        assert clamp_score(float("nan")) == 0.0


class TestLine:
    """Tests for straight line scoring."""

    def test_perfect_line_caps_at_80(self, straight_line_stroke):
        result = score_line(straight_line_stroke)

        assert result.components["straightness"] == pytest.approx(1.0)
        assert result.components["deviation"] == pytest.approx(1.0)
        assert result.score == pytest.approx((60 + 40) * DIFFICULTY_DISCOUNT)
        assert result.score == pytest.approx(80.0)

    def test_two_points(self):
        assert evaluate_line([P(0, 0), P(30, 40)]) == pytest.approx(80.0)

    def test_wobbly_line_scores_lower(self, straight_line_stroke):
        wobbly = [P(p.x, 5.0 * math.sin(p.x / 5.0)) for p in straight_line_stroke]

        assert evaluate_line(wobbly) < evaluate_line(straight_line_stroke)

    def test_backtracking_wastes_motion(self):
        direct = [P(0, 0), P(50, 0), P(100, 0)]
        backtrack = [P(0, 0), P(80, 0), P(40, 0), P(100, 0)]

        result = score_line(backtrack)

        assert result.components["straightness"] == pytest.approx(100 / 180)
        assert result.score < evaluate_line(direct)

    def test_deviation_uses_mean_offset(self):
        # Interior offsets 10 and 30 against a chord of 100
        stroke = [P(0, 0), P(25, 10), P(75, 30), P(100, 0)]

        result = score_line(stroke)

        assert result.components["deviation"] == pytest.approx(1 - 0.2)

    def test_closed_loop_guarded(self):
        """Zero-length chord does not divide by zero."""
        loop = [P(0, 0), P(50, 0), P(50, 50), P(0, 0)]

        score = evaluate_line(loop)

        assert 0.0 <= score <= 100.0
        assert score_line(loop).components["straightness"] == 0.0

    def test_too_short(self):
        assert evaluate_line([P(1, 1)]) == 0.0


class TestTriangle:
    """Tests for equilateral triangle scoring."""

    def test_equilateral_closed_caps_at_80(self, equilateral_stroke):
        result = score_triangle(equilateral_stroke)

        assert result.components["angle"] == pytest.approx(1.0)
        assert result.components["closure"] == 1.0
        assert result.score == pytest.approx((70 + 30) * DIFFICULTY_DISCOUNT)

    def test_open_triangle_loses_closure(self, make_polygon_stroke, equilateral_vertices):
        # Stop two samples short of the start
        stroke = make_polygon_stroke(equilateral_vertices, points_per_side=5, close=False)[:-2]

        result = score_triangle(stroke)

        assert result.components["closure"] == 0.5
        assert result.score < 80.0

    def test_taller_apex_scores_lower(self, make_polygon_stroke):
        """Moving the apex away from 60 degrees never raises the score."""
        heights = [50 * math.sqrt(3), 100.0, 115.0]
        scores = [
            evaluate_triangle(make_polygon_stroke([(0.0, 0.0), (100.0, 0.0), (50.0, h)]))
            for h in heights
        ]

        assert scores[0] > scores[1] > scores[2]

    def test_right_triangle_scores_below_equilateral(self, make_polygon_stroke, equilateral_stroke):
        stroke = make_polygon_stroke([(0.0, 0.0), (100.0, 0.0), (0.0, 100.0)])

        result = score_triangle(stroke)

        assert result.components["angle"] < 1.0
        assert result.score < evaluate_triangle(equilateral_stroke)

    def test_too_few_vertices(self):
        assert evaluate_triangle([P(0, 0), P(10, 0)]) == 0.0


class TestSquare:
    """Tests for square scoring."""

    def test_square_closed_caps_at_80(self, square_stroke):
        result = score_square(square_stroke)

        assert result.components["angle"] == pytest.approx(1.0)
        assert result.components["side"] == pytest.approx(1.0)
        assert result.components["closure"] == 1.0
        assert result.score == pytest.approx((40 + 40 + 20) * DIFFICULTY_DISCOUNT)

    def test_rectangle_loses_side_score(self, make_polygon_stroke):
        stroke = make_polygon_stroke([(0.0, 0.0), (200.0, 0.0), (200.0, 100.0), (0.0, 100.0)])

        result = score_square(stroke)

        assert result.components["angle"] == pytest.approx(1.0)
        assert result.components["side"] == pytest.approx(1 - 1 / 3)
        assert result.score < 80.0

    def test_skewed_corner_scores_lower(self, make_polygon_stroke):
        scores = [
            evaluate_square(make_polygon_stroke([(0.0, 0.0), (100.0, 0.0), (100.0 + s, 100.0 + s), (0.0, 100.0)]))
            for s in (0.0, 10.0, 20.0, 30.0)
        ]

        assert all(a >= b for a, b in zip(scores, scores[1:]))
        assert scores[-1] < scores[0]

    def test_too_few_vertices(self):
        assert evaluate_square([P(0, 0), P(10, 0), P(10, 10)]) == 0.0


class TestAdversarialStrokes:
    """Scores stay inside [0, 100] for degenerate input."""

    STROKES = {
        "identical": [P(5, 5)] * 12,
        "revisits": [P(0, 0), P(10, 0)] * 10,
        "two_identical": [P(3, 3), P(3, 3)],
        "collinear_closed": [P(float(x), 0.0) for x in list(range(0, 101, 10)) + list(range(90, -1, -10))],
        "huge": [P(1e12, -1e12), P(-1e12, 1e12), P(1e12, 1e12), P(1e12, -1e12)],
        "tiny": [P(0, 0), P(1e-12, 0), P(0, 1e-12), P(0, 0)],
    }

    @pytest.mark.parametrize("name", sorted(STROKES))
    @pytest.mark.parametrize("evaluate", [evaluate_line, evaluate_triangle, evaluate_square])
    def test_score_in_range(self, name, evaluate):
        score = evaluate(self.STROKES[name])

        assert not math.isnan(score)
        assert 0.0 <= score <= 100.0

    @pytest.mark.parametrize("evaluate", [evaluate_line, evaluate_triangle, evaluate_square])
    def test_bit_identical_repeat(self, evaluate, square_stroke):
        assert evaluate(square_stroke) == evaluate(square_stroke)

    @pytest.mark.parametrize("bad", [float("nan"), float("inf"), float("-inf")])
    @pytest.mark.parametrize("evaluate", [evaluate_line, evaluate_triangle, evaluate_square, evaluate_circle])
    def test_non_finite_coordinate_scores_zero(self, bad, evaluate, square_stroke):
        stroke = list(square_stroke)
        stroke[3] = P(bad, 5.0)

        assert evaluate(stroke) == 0.0
