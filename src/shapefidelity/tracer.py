"""
Hierarchical runtime tracing for shape fidelity scoring.

Scoring calls nest (dispatcher, evaluator, simplifier), so the tracer
keeps a span stack and indents each line by depth. Output goes to stderr
and optionally a file, as text or one JSON object per line. Tracing is off
by default and costs a single flag check per call when disabled.
"""

import functools
import inspect
import json
import sys
import time
from contextlib import contextmanager
from datetime import datetime


class Tracer:
    """
    Structured, nested logger for scoring runs.

    Levels follow ERROR < WARN < INFO < DEBUG; a line is written when its
    level is at or above the configured verbosity.
    """

    LEVELS = {"ERROR": 0, "WARN": 1, "INFO": 2, "DEBUG": 3}

    def __init__(self):
        self.enabled = False
        self.level = "INFO"
        self.json_output = False
        self.file_path = None
        self._sink = None
        self._stack = []

    @property
    def depth(self):
        return len(self._stack)

    def configure(self, enabled=False, level="INFO", file_path=None, json_output=False):
        """Apply settings, reopening the trace file if one is given."""
        self.close()
        self.enabled = enabled
        self.level = level.upper()
        self.json_output = json_output
        self.file_path = file_path
        self._stack = []
        if enabled and file_path:
            self._sink = open(file_path, "w", encoding="utf-8")

    def close(self):
        """Close the trace file if open."""
        if self._sink is not None:
            self._sink.close()
            self._sink = None

    def is_enabled_for(self, level):
        if not self.enabled:
            return False
        return self.LEVELS.get(level, 2) <= self.LEVELS.get(self.level, 2)

    def _emit(self, level, location, message, meta=None):
        if not self.is_enabled_for(level):
            return

        now = datetime.now()
        stamp = now.strftime("%H:%M:%S.") + f"{now.microsecond // 1000:03d}"

        if self.json_output:
            line = json.dumps({
                "timestamp": stamp,
                "level": level,
                "depth": self.depth,
                "location": location,
                "message": message,
                "meta": {k: summarize(v) for k, v in (meta or {}).items()},
            })
        else:
            line = f"{stamp} {level:<5} {'  ' * self.depth}{location}  {message}"

        print(line, file=sys.stderr)
        if self._sink is not None:
            self._sink.write(line + "\n")
            self._sink.flush()

    @contextmanager
    def span(self, name, module="", **meta):
        """
        Trace a block: one line on entry, one on exit with elapsed time.

        An exception leaving the block is logged at ERROR and re-raised.
        """
        if not self.enabled:
            yield
            return

        location = f"{module}:{name}" if module else name
        details = _format_meta(meta)
        self._emit("INFO", location, f"start {details}".strip(), meta)
        self._stack.append(location)
        started = time.perf_counter()

        try:
            yield
        except Exception as e:
            elapsed_ms = (time.perf_counter() - started) * 1000
            self._stack.pop()
            self._emit("ERROR", location, f"failed dt={elapsed_ms:.1f}ms {type(e).__name__}: {str(e)[:100]}")
            raise

        elapsed_ms = (time.perf_counter() - started) * 1000
        self._stack.pop()
        self._emit("INFO", location, f"end ok dt={elapsed_ms:.1f}ms")

    def event(self, message, level="INFO", **meta):
        """Log a one-off line attributed to the innermost open span."""
        if not self.is_enabled_for(level):
            return
        location = self._stack[-1] if self._stack else ""
        self._emit(level, location, f"{message} {_format_meta(meta)}".strip(), meta)


def _format_meta(meta):
    return " ".join(f"{k}={summarize(v)}" for k, v in meta.items())


def summarize(obj, max_len=200):
    """
    Compact, length-capped description of a value for trace lines.

    Strokes are described by length and bounding box rather than content.
    """
    try:
        text = _describe(obj)
    except Exception:
        text = f"<{type(obj).__name__}>"
    if len(text) > max_len:
        return text[:max_len - 3] + "..."
    return text


def _describe(obj):
    # Imported here so the tracer has no hard import-time dependencies
    import numpy as np
    from pydantic import BaseModel
    from shapely.geometry.base import BaseGeometry

    from shapefidelity.models import Point, ShapeScore, SimplifiedShape

    if obj is None:
        return "None"
    if isinstance(obj, bool):
        return str(obj)
    if isinstance(obj, float):
        return f"{obj:.4g}"
    if isinstance(obj, int):
        return str(obj)
    if isinstance(obj, str):
        return repr(obj) if len(obj) <= 50 else f"str(len={len(obj)})"

    if isinstance(obj, Point):
        return f"Point({obj.x:.1f},{obj.y:.1f})"
    if isinstance(obj, SimplifiedShape):
        return f"SimplifiedShape({obj.strategy.value},{len(obj.vertices)}/{obj.target_count})"
    if isinstance(obj, ShapeScore):
        tag = obj.shape_type.value if obj.shape_type else "unknown"
        return f"ShapeScore({tag},{obj.score:.2f})"
    if isinstance(obj, BaseModel):
        fields = list(type(obj).model_fields)[:3]
        return f"{type(obj).__name__}(fields={fields}...)"

    if isinstance(obj, np.ndarray):
        shape = "x".join(str(s) for s in obj.shape)
        return f"ndarray({obj.dtype},{shape})"
    if isinstance(obj, BaseGeometry):
        bounds = ",".join(f"{b:.1f}" for b in obj.bounds)
        return f"{obj.geom_type}(bounds=[{bounds}])"

    if isinstance(obj, (list, tuple)):
        if obj and all(isinstance(p, Point) for p in obj):
            xs = [p.x for p in obj]
            ys = [p.y for p in obj]
            return f"stroke(n={len(obj)},bbox=[{min(xs):.1f},{min(ys):.1f},{max(xs):.1f},{max(ys):.1f}])"
        first = type(obj[0]).__name__ if obj else "-"
        return f"{type(obj).__name__}(len={len(obj)},first={first})"

    if isinstance(obj, dict):
        keys = ",".join(str(k) for k in list(obj)[:5])
        return f"dict(len={len(obj)},keys=[{keys}])"

    return f"<{type(obj).__name__}>"


def trace(label=None, arg_names=None):
    """
    Decorator that runs a function inside a span.

    Arguments listed in arg_names, positional or keyword, are summarized
    into the span's start line.
    """
    def decorator(func):
        signature = inspect.signature(func)
        name = label or func.__name__
        module = func.__module__.rsplit(".", 1)[-1] if func.__module__ else ""

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            if not _tracer.enabled:
                return func(*args, **kwargs)

            meta = {}
            if arg_names:
                bound = signature.bind_partial(*args, **kwargs)
                meta = {k: bound.arguments[k] for k in arg_names if k in bound.arguments}

            with _tracer.span(name, module=module, **meta):
                return func(*args, **kwargs)

        return wrapper
    return decorator


_tracer = Tracer()


def get_tracer():
    """Get the global tracer instance."""
    return _tracer


def configure_tracer(enabled=False, level="INFO", file_path=None, json_output=False):
    """Configure the global tracer."""
    _tracer.configure(enabled=enabled, level=level, file_path=file_path, json_output=json_output)
