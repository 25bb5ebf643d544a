#!/usr/bin/env python3
"""
Command line entry point.
Computes min/mean/max per station for a '<station>;<value>' file.
"""

import argparse
import logging
import os
import sys
from typing import List, Optional

# Allow running as a script from a source checkout
sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), '..'))

from client.monitoring import ProgressPrinter, show_resource_usage
from client.reporter import write_report
from common.config import EXECUTOR_KINDS, OUTPUT_STYLES, PipelineConfig
from common.errors import AggregationFailure, PipelineError
from common.records import load_lines
from coordinator.metrics import RunMetrics
from coordinator.pipeline import run_pipeline

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Per-station min/mean/max over a '<station>;<value>' measurements file")
    parser.add_argument("input", nargs="?", default=None,
                        help="Measurements file, or '-' for stdin (default: $BRC_INPUT_FILE or ./measurements.txt)")
    parser.add_argument("--workers", "-w", type=int, default=None,
                        help="Number of parallel workers (default: $BRC_WORKERS or CPU count)")
    parser.add_argument("--executor", choices=EXECUTOR_KINDS, default=None,
                        help="Run chunks on threads or processes (default: $BRC_EXECUTOR or thread)")
    parser.add_argument("--style", choices=OUTPUT_STYLES, default=None,
                        help="'map' prints one {k=v, ...} block, 'lines' prints one row per station")
    parser.add_argument("--output", "-o", default=None,
                        help="Write the report to this file instead of stdout")
    parser.add_argument("--metrics-file", default=None,
                        help="Save run metrics as JSON")
    parser.add_argument("--timings", action="store_true",
                        help="Print phase timings and memory usage to stderr")
    parser.add_argument("--progress", action="store_true",
                        help="Show a progress bar while chunks are merged")
    parser.add_argument("--log-level", default=None,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Logging level (default: $BRC_LOG_LEVEL or WARNING)")
    return parser


def resolve_config(args: argparse.Namespace) -> PipelineConfig:
    """Apply command line flags on top of environment settings"""
    config = PipelineConfig.from_env()
    if args.input is not None:
        config.input_path = args.input
    if args.workers is not None:
        config.workers = args.workers
    if args.executor is not None:
        config.executor = args.executor
    if args.style is not None:
        config.output_style = args.style
    if args.log_level is not None:
        config.log_level = args.log_level
    return config.validate()


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = resolve_config(args)
    except PipelineError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.WARNING),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    metrics = RunMetrics()
    metrics.start(config.input_path)

    progress = ProgressPrinter() if args.progress else None

    try:
        try:
            records = load_lines(config.input_path)
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Cannot read input {config.input_path}: {e}")
            metrics.finish(success=False, error_message=str(e))
            print(f"Error: cannot read {config.input_path}: {e}", file=sys.stderr)
            return 1

        result = run_pipeline(records, config, progress_callback=progress, metrics=metrics)
    except AggregationFailure as e:
        # The coordinator has already logged the failing chunk
        print(f"Error: {e.cause if e.cause is not None else e}", file=sys.stderr)
        return 1
    except PipelineError as e:
        logger.error(f"Run failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        if args.metrics_file:
            metrics.save_to_file(args.metrics_file)

    if args.output:
        with open(args.output, 'w', encoding='utf-8') as f:
            write_report(result.rows, f, config.output_style)
    else:
        write_report(result.rows, sys.stdout, config.output_style)

    if args.timings:
        show_resource_usage(result.metrics)

    return 0


if __name__ == '__main__':
    sys.exit(main())
