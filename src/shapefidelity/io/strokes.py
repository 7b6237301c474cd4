"""
Reading stroke files and writing score reports.

A stroke file is JSON holding one record or a list of records:

    {"id": "attempt-1", "shape": "triangle", "points": [[0, 0], [10, 5], ...]}

Points may also be {"x": ..., "y": ...} mappings. Circle records may carry
a "target": {"x": ..., "y": ..., "radius": ...}.
"""

import json
import os

from pydantic import ValidationError

from shapefidelity.models import CircleTarget, StrokeRecord, to_points
from shapefidelity.tracer import get_tracer, trace


class StrokeFileError(ValueError):
    """A stroke file or one of its records could not be read."""


def ensure_dir(path):
    """Create directory if it does not exist."""
    if path:
        os.makedirs(path, exist_ok=True)


@trace(label="load_stroke_file")
def load_stroke_file(path, default_shape=None):
    """
    Load and validate every record in a stroke file.

    Args:
        path: JSON file path
        default_shape: shape tag for records that do not name one

    Raises:
        StrokeFileError: missing file, invalid JSON or an invalid record
    """
    tracer = get_tracer()

    if not os.path.exists(path):
        raise StrokeFileError(f"File not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise StrokeFileError(f"Invalid JSON in {path}: {e}") from e

    records = parse_records(data, default_shape=default_shape)
    tracer.event(f"Loaded {len(records)} stroke record(s) from {path}")
    return records


def parse_records(data, default_shape=None):
    """Validate decoded JSON into a list of StrokeRecords."""
    if isinstance(data, dict):
        data = [data]
    if not isinstance(data, list):
        raise StrokeFileError(f"Expected a record or a list of records, got {type(data).__name__}")

    return [_parse_record(raw, index, default_shape) for index, raw in enumerate(data)]


def _parse_record(raw, index, default_shape):
    if not isinstance(raw, dict):
        raise StrokeFileError(f"Record {index}: expected an object, got {type(raw).__name__}")

    record_id = str(raw.get("id", f"stroke_{index}"))
    shape = raw.get("shape", default_shape)
    if shape is None:
        raise StrokeFileError(f"Record {record_id}: no shape given")

    raw_points = raw.get("points")
    if not isinstance(raw_points, list):
        raise StrokeFileError(f"Record {record_id}: 'points' must be a list")

    try:
        points = to_points(raw_points)
        target = CircleTarget(**raw["target"]) if raw.get("target") else None
    except (ValidationError, ValueError, TypeError) as e:
        raise StrokeFileError(f"Record {record_id}: {e}") from e

    return StrokeRecord(record_id=record_id, shape=str(shape), points=points, target=target)


def save_json(data, path, indent=2):
    """Save a dictionary or Pydantic model to JSON."""
    tracer = get_tracer()

    ensure_dir(os.path.dirname(path))

    if hasattr(data, "model_dump"):
        data = data.model_dump(mode="json")

    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=indent, default=str)

    tracer.event(f"Saved JSON: {path}")
