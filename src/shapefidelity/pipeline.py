"""
Batch scoring of stroke records.

Runs every record through the dispatcher with the configured circle
settings and collects the results into a ScoringReport.
"""

from shapefidelity.config import ScoringConfig, load_config
from shapefidelity.dispatch import score_stroke
from shapefidelity.io.strokes import load_stroke_file, save_json
from shapefidelity.models import RecordResult, ScoringReport
from shapefidelity.tracer import get_tracer, trace


@trace(label="score_records")
def score_records(records, config=None):
    """
    Score a batch of StrokeRecords.

    Args:
        records: StrokeRecords from load_stroke_file or parse_records
        config: ScoringConfig; defaults are used when None

    Returns:
        ScoringReport with one result per record, in input order
    """
    tracer = get_tracer()
    config = config or ScoringConfig()
    digits = config.output.round_digits
    thresholds = config.circle.thresholds()

    results = []
    for record in records:
        with tracer.span(f"record_{record.record_id}", module="pipeline"):
            result = score_stroke(
                record.points,
                record.shape,
                target=record.target,
                difficulty_level=config.circle.difficulty_level,
                penalty_mode=config.circle.penalty_mode,
                thresholds=thresholds,
            )

        results.append(RecordResult(
            record_id=record.record_id,
            shape=record.shape,
            point_count=len(record.points),
            score=round(result.score, digits),
            components={k: round(v, digits + 2) for k, v in result.components.items()},
        ))

    report = ScoringReport(results=results)
    for shape, mean in report.mean_scores().items():
        tracer.event(f"Mean {shape} score: {mean:.2f}")

    return report


@trace(label="score_file")
def score_file(input_path, out_path=None, config=None, config_path=None, default_shape=None):
    """
    Load a stroke file, score it and optionally write the JSON report.

    Raises:
        StrokeFileError: when the input file is unreadable or invalid
    """
    if config is None:
        config = load_config(config_path)

    records = load_stroke_file(input_path, default_shape=default_shape)
    report = score_records(records, config)

    if out_path:
        save_json(report, out_path)

    return report
