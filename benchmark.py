#!/usr/bin/env python3
"""
Automated benchmarking script for the station statistics pipeline.
Runs the pipeline over several worker counts and executors and collects metrics.
"""

import argparse
import csv
import json
import os
import sys
import time
from datetime import datetime
from pathlib import Path

sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), 'src'))

from common.config import PipelineConfig
from common.errors import PipelineError
from common.records import load_lines
from coordinator.metrics import RunMetrics
from coordinator.pipeline import run_pipeline

# Configuration
RESULTS_DIR = Path("benchmark_results")
DEFAULT_INPUT = Path("shared") / "input" / "measurements_medium.txt"

# Benchmark configurations
BENCHMARKS = [
    # Experiment 1: Thread worker scaling
    {"name": "thread_workers_1", "executor": "thread", "workers": 1, "description": "1 thread"},
    {"name": "thread_workers_2", "executor": "thread", "workers": 2, "description": "2 threads"},
    {"name": "thread_workers_4", "executor": "thread", "workers": 4, "description": "4 threads"},
    {"name": "thread_workers_8", "executor": "thread", "workers": 8, "description": "8 threads"},

    # Experiment 2: Process worker scaling
    {"name": "process_workers_1", "executor": "process", "workers": 1, "description": "1 process"},
    {"name": "process_workers_2", "executor": "process", "workers": 2, "description": "2 processes"},
    {"name": "process_workers_4", "executor": "process", "workers": 4, "description": "4 processes"},
    {"name": "process_workers_8", "executor": "process", "workers": 8, "description": "8 processes"},
]


def run_benchmark(config, records, input_path: Path, run_number=1):
    """Run a single benchmark configuration."""
    print(f"\n{'='*70}")
    print(f"Benchmark: {config['name']} (Run {run_number})")
    print(f"Description: {config['description']}")
    print(f"{'='*70}")

    pipeline_config = PipelineConfig(workers=config["workers"], executor=config["executor"],
                                     input_path=str(input_path))
    metrics = RunMetrics()
    metrics.start(str(input_path))

    try:
        run_pipeline(records, pipeline_config, metrics=metrics)
        print(f"  ✓ {metrics.summary()}")
    except PipelineError as e:
        print(f"  ❌ Run failed: {e}")

    input_size = metrics.input_size_bytes
    duration = metrics.total_time_seconds
    result = {
        "benchmark_name": config["name"],
        "description": config["description"],
        "run_number": run_number,
        "timestamp": datetime.now().isoformat(),
        "run_id": metrics.run_id,
        "input_file": str(input_path),
        "input_size_bytes": input_size,
        "input_size_mb": round(input_size / 1024 / 1024, 2),
        "executor": config["executor"],
        "num_workers": config["workers"],
        "num_records": metrics.num_records,
        "num_keys": metrics.num_keys,
        "success": metrics.success,
        "total_runtime_seconds": round(duration, 4),
        "aggregation_seconds": round(metrics.aggregation_time_seconds, 4),
        "throughput_mbps": round((input_size / 1024 / 1024) / duration, 3) if duration > 0 else 0,
        "peak_memory_mb": round(metrics.peak_memory_bytes / 1024 / 1024, 1),
    }
    return result


def save_results(results, timestamp):
    """Save results to JSON and CSV files."""
    RESULTS_DIR.mkdir(exist_ok=True)

    json_file = RESULTS_DIR / f"benchmark_results_{timestamp}.json"
    with open(json_file, 'w') as f:
        json.dump(results, f, indent=2)
    print(f"\n✓ Results saved to: {json_file}")

    csv_file = RESULTS_DIR / f"benchmark_results_{timestamp}.csv"
    if results:
        fieldnames = list(results[0].keys())
        with open(csv_file, 'w', newline='') as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames)
            writer.writeheader()
            writer.writerows(results)
        print(f"✓ Results saved to: {csv_file}")

    return json_file, csv_file


def print_summary(results):
    """Print a summary table of results."""
    print(f"\n{'='*70}")
    print("BENCHMARK SUMMARY")
    print(f"{'='*70}")
    print(f"{'Benchmark':<25} {'Executor':>8} {'Workers':>7} {'Runtime':>10} {'Status':>8}")
    print(f"{'-'*70}")

    for r in results:
        print(f"{r['benchmark_name']:<25} {r['executor']:>8} {r['num_workers']:>7} "
              f"{r['total_runtime_seconds']:>9.2f}s {'✓' if r['success'] else '✗':>8}")

    print(f"{'='*70}")

    successful = sum(1 for r in results if r['success'])
    print(f"Total: {len(results)} runs, {successful} successful, {len(results) - successful} failed")


def main():
    """Main benchmarking workflow."""
    parser = argparse.ArgumentParser(description="Benchmark the station statistics pipeline")
    parser.add_argument("--input", type=Path, default=DEFAULT_INPUT,
                        help="Measurements file (generate with scripts/generate_measurements.py)")
    parser.add_argument("--runs", type=int, default=1, help="Runs per benchmark (1-5)")
    args = parser.parse_args()

    print("="*70)
    print("Station Statistics Benchmark Suite")
    print("="*70)

    if not args.input.exists():
        print(f"❌ Input file not found: {args.input}")
        print("   Run: python scripts/generate_measurements.py")
        return 1

    runs_per_benchmark = max(1, min(5, args.runs))
    print(f"Loading {args.input}...")
    records = load_lines(str(args.input))
    print(f"✓ Loaded {len(records)} lines")
    print(f"\nRunning {len(BENCHMARKS)} benchmarks × {runs_per_benchmark} runs")

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    all_results = []

    for config in BENCHMARKS:
        for run in range(1, runs_per_benchmark + 1):
            all_results.append(run_benchmark(config, records, args.input, run_number=run))
            if run < runs_per_benchmark:
                time.sleep(1)

    json_file, _ = save_results(all_results, timestamp)
    print_summary(all_results)
    print(f"\nGenerate plots: python plot_results.py {json_file}")
    return 0


if __name__ == "__main__":
    exit(main())
