"""
Command-line interface for shape fidelity scoring.

Provides commands for scoring stroke files, printing target shapes and
writing a default configuration.
"""

import argparse
import json
import sys

import numpy as np

from shapefidelity.config import load_config, save_default_config
from shapefidelity.io.strokes import StrokeFileError
from shapefidelity.models import ShapeType
from shapefidelity.tracer import configure_tracer, get_tracer

SHAPE_CHOICES = [t.value for t in ShapeType]


def main(argv=None):
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Shape Fidelity: score freehand strokes against target shapes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Score command
    score_parser = subparsers.add_parser("score", help="Score strokes from a JSON file")
    score_parser.add_argument(
        "--input", "-i",
        required=True,
        help="Stroke JSON file",
    )
    score_parser.add_argument(
        "--shape", "-s",
        default=None,
        choices=SHAPE_CHOICES,
        help="Shape for records that do not name one",
    )
    score_parser.add_argument(
        "--out", "-o",
        default=None,
        help="Path to write the JSON report",
    )
    score_parser.add_argument(
        "--config", "-c",
        default=None,
        help="Path to YAML configuration file",
    )
    score_parser.add_argument(
        "--trace",
        action="store_true",
        help="Enable runtime tracing",
    )
    score_parser.add_argument(
        "--trace-level",
        default=None,
        choices=["ERROR", "WARN", "INFO", "DEBUG"],
        help="Trace log level",
    )
    score_parser.add_argument(
        "--trace-file",
        default=None,
        help="Path to write trace logs",
    )
    score_parser.add_argument(
        "--trace-json",
        action="store_true",
        help="Enable JSON trace output",
    )

    # Target command
    target_parser = subparsers.add_parser("target", help="Print a target shape as JSON")
    target_parser.add_argument(
        "--shape", "-s",
        required=True,
        choices=SHAPE_CHOICES,
        help="Shape to generate",
    )
    target_parser.add_argument("--width", type=float, default=None, help="Canvas width")
    target_parser.add_argument("--height", type=float, default=None, help="Canvas height")
    target_parser.add_argument(
        "--random",
        action="store_true",
        help="Place a random circle target instead of the centred one",
    )
    target_parser.add_argument("--seed", type=int, default=None, help="Seed for --random")
    target_parser.add_argument(
        "--config", "-c",
        default=None,
        help="Path to YAML configuration file",
    )

    # Init config command
    init_parser = subparsers.add_parser("init-config", help="Create default config file")
    init_parser.add_argument(
        "--out", "-o",
        default="shapefidelity_config.yaml",
        help="Output path for config file",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "score":
        return handle_score(args)
    elif args.command == "target":
        return handle_target(args)
    elif args.command == "init-config":
        return handle_init_config(args)

    return 0


def handle_score(args):
    """Handle the score command."""
    config = load_config(args.config)

    # Command-line flags win over the config file
    configure_tracer(
        enabled=args.trace or config.tracing.enabled,
        level=args.trace_level or config.tracing.level,
        file_path=args.trace_file or config.tracing.file_path,
        json_output=args.trace_json or config.tracing.json_output,
    )

    tracer = get_tracer()

    try:
        from shapefidelity.pipeline import score_file

        with tracer.span("cli_score", module="cli"):
            report = score_file(
                args.input,
                out_path=args.out,
                config=config,
                default_shape=args.shape,
            )
    except (StrokeFileError, OSError) as e:
        tracer.event(f"Scoring failed: {e}", level="ERROR")
        print(f"\nError: {e}", file=sys.stderr)
        return 1
    finally:
        tracer.close()

    print(f"\nScored {report.count} stroke(s).")
    for result in report.results:
        print(f"  {result.record_id:<20} {result.shape:<9} {result.score:6.2f}")

    means = report.mean_scores()
    if means:
        print("\nMean score per shape:")
        for shape, mean in means.items():
            print(f"  {shape:<9} {mean:6.2f}")

    if args.out:
        print(f"\nReport saved to: {args.out}")

    return 0


def handle_target(args):
    """Handle the target command."""
    from shapefidelity.targets import generate_target_circle, generate_target_shape

    config = load_config(args.config)
    width = args.width if args.width is not None else config.target.canvas_width
    height = args.height if args.height is not None else config.target.canvas_height

    if args.random and args.shape != ShapeType.CIRCLE.value:
        print("\nError: --random only applies to circle targets", file=sys.stderr)
        return 1

    try:
        if args.random:
            target = generate_target_circle(
                width,
                height,
                padding=config.target.circle_padding,
                rng=np.random.default_rng(args.seed),
            )
        else:
            target = generate_target_shape(
                args.shape,
                width,
                height,
                size_ratio=config.target.size_ratio,
                bottom_inset=config.target.bottom_inset,
            )
    except ValueError as e:
        print(f"\nError: {e}", file=sys.stderr)
        return 1

    print(json.dumps(target.model_dump(mode="json"), indent=2))
    return 0


def handle_init_config(args):
    """Handle the init-config command."""
    save_default_config(args.out)
    print(f"Default configuration saved to: {args.out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
