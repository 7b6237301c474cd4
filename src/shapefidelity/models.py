"""
Pydantic data models for shape fidelity scoring.

Strokes, simplified shapes, targets and score breakdowns all flow through
these validated models. Points are frozen so a stroke handed to the engine
can never be mutated by it.
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ShapeType(str, Enum):
    """Target shapes a stroke can be scored against."""
    LINE = "line"
    TRIANGLE = "triangle"
    SQUARE = "square"
    CIRCLE = "circle"

    @property
    def vertex_count(self):
        """Canonical number of vertices (0 for circle, which is never simplified)."""
        return _VERTEX_COUNTS[self]

    @classmethod
    def parse(cls, value):
        """Return the ShapeType for value, or None if it is not a known tag."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None


_VERTEX_COUNTS = {
    ShapeType.LINE: 2,
    ShapeType.TRIANGLE: 3,
    ShapeType.SQUARE: 4,
    ShapeType.CIRCLE: 0,
}


class SimplifyStrategy(str, Enum):
    """How a SimplifiedShape's vertices were chosen."""
    PASSTHROUGH = "passthrough"
    SECTORS = "sectors"
    FARTHEST_FALLBACK = "farthest_fallback"
    FARTHEST_PAIR = "farthest_pair"
    POLYLINE_GROWTH = "polyline_growth"


class Point(BaseModel):
    """A captured pointer position in device pixel space."""
    x: float
    y: float

    model_config = ConfigDict(frozen=True, extra="forbid")

    def as_tuple(self):
        return (self.x, self.y)


class SimplifiedShape(BaseModel):
    """
    Corner candidates extracted from a stroke.

    The extraction is a heuristic: vertices may number fewer than
    target_count when the stroke is too short, and empty_sectors records
    how many angular sectors had no candidate before any fallback ran.
    """
    vertices: List[Point] = Field(default_factory=list)
    indices: List[int] = Field(default_factory=list)
    target_count: int = Field(..., ge=0)
    strategy: SimplifyStrategy
    empty_sectors: int = Field(default=0, ge=0)

    model_config = ConfigDict(extra="forbid")

    @property
    def is_complete(self):
        """True when exactly target_count vertices were found."""
        return len(self.vertices) == self.target_count

    @property
    def shortfall(self):
        return max(0, self.target_count - len(self.vertices))


class CircleTarget(BaseModel):
    """Reference circle a circle stroke is scored against."""
    x: float
    y: float
    radius: float = Field(..., gt=0.0)

    model_config = ConfigDict(frozen=True, extra="forbid")

    @property
    def center(self):
        return Point(x=self.x, y=self.y)


class TargetShape(BaseModel):
    """Reference geometry shown to the player for a shape challenge."""
    shape_type: ShapeType
    points: List[Point] = Field(default_factory=list)
    width: float = 0.0
    height: float = 0.0
    circle: Optional[CircleTarget] = None

    model_config = ConfigDict(extra="forbid")


class ThresholdBand(BaseModel):
    """Upper bounds of the excellent/good/poor bands for one circle sub-score."""
    excellent: float = Field(..., gt=0.0)
    good: float = Field(..., gt=0.0)
    poor: float = Field(..., gt=0.0)

    model_config = ConfigDict(extra="forbid")

    def scaled(self, divisor):
        """Return a band with every bound divided by divisor."""
        return ThresholdBand(
            excellent=self.excellent / divisor,
            good=self.good / divisor,
            poor=self.poor / divisor,
        )


class CircleThresholds(BaseModel):
    """Threshold bands for the three circle sub-scores."""
    deviation: ThresholdBand = Field(
        default_factory=lambda: ThresholdBand(excellent=0.05, good=0.10, poor=0.20)
    )
    smoothness: ThresholdBand = Field(
        default_factory=lambda: ThresholdBand(excellent=15.0, good=30.0, poor=45.0)
    )
    completion: ThresholdBand = Field(
        default_factory=lambda: ThresholdBand(excellent=0.05, good=0.10, poor=0.20)
    )

    model_config = ConfigDict(extra="forbid")


class ShapeScore(BaseModel):
    """Detailed fidelity result for one stroke."""
    shape_type: Optional[ShapeType] = None
    score: float = Field(default=0.0, ge=0.0, le=100.0)
    components: Dict[str, float] = Field(default_factory=dict)
    vertices: List[Point] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


class StrokeRecord(BaseModel):
    """A stroke loaded from a file, with the shape it should be scored as."""
    record_id: str
    shape: str
    points: List[Point] = Field(default_factory=list)
    target: Optional[CircleTarget] = None

    model_config = ConfigDict(extra="forbid")


class RecordResult(BaseModel):
    """Score for one StrokeRecord."""
    record_id: str
    shape: str
    point_count: int = 0
    score: float = 0.0
    components: Dict[str, float] = Field(default_factory=dict)

    model_config = ConfigDict(extra="forbid")


class ScoringReport(BaseModel):
    """Scores for a batch of strokes with per-shape averages."""
    results: List[RecordResult] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")

    @property
    def count(self):
        return len(self.results)

    def mean_scores(self):
        """Mean score per shape tag, in first-seen order."""
        totals = {}
        for result in self.results:
            total, n = totals.get(result.shape, (0.0, 0))
            totals[result.shape] = (total + result.score, n + 1)
        return {shape: total / n for shape, (total, n) in totals.items()}


def to_point(value):
    """
    Coerce a Point, an (x, y) pair or an {"x", "y"} mapping to a Point.

    Raises ValueError for anything else.
    """
    if isinstance(value, Point):
        return value
    if isinstance(value, dict):
        if "x" not in value or "y" not in value:
            raise ValueError(f"point mapping needs 'x' and 'y': {value!r}")
        return Point(x=value["x"], y=value["y"])
    try:
        x, y = value
    except (TypeError, ValueError):
        raise ValueError(f"cannot interpret {value!r} as a point") from None
    return Point(x=x, y=y)


def to_points(stroke):
    """Coerce every element of a stroke to Point, preserving order."""
    if stroke is None:
        return []
    return [to_point(p) for p in stroke]
