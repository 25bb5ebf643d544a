#!/usr/bin/env python3
"""
Generate plots from benchmark results.
"""

import json
import sys
from collections import defaultdict
from pathlib import Path

import matplotlib
matplotlib.use('Agg')  # Non-interactive backend
import matplotlib.pyplot as plt
import numpy as np

# Configuration
PLOTS_DIR = Path("benchmark_results/plots")
EXECUTOR_COLORS = {'thread': 'orangered', 'process': 'steelblue'}


def load_results(json_file):
    """Load benchmark results from JSON file."""
    with open(json_file, 'r') as f:
        return json.load(f)


def aggregate_runs(results):
    """
    Aggregate multiple runs of the same benchmark.
    Returns dict: benchmark_name -> {avg_runtime, std_runtime, config, ...}
    """
    by_benchmark = defaultdict(list)

    for r in results:
        if r['success']:  # Only include successful runs
            by_benchmark[r['benchmark_name']].append(r)

    aggregated = {}
    for name, runs in by_benchmark.items():
        runtimes = [r['total_runtime_seconds'] for r in runs]
        throughputs = [r['throughput_mbps'] for r in runs]
        first = runs[0]

        aggregated[name] = {
            'benchmark_name': name,
            'description': first['description'],
            'executor': first['executor'],
            'num_workers': first['num_workers'],
            'input_size_mb': first['input_size_mb'],
            'avg_runtime': float(np.mean(runtimes)),
            'std_runtime': float(np.std(runtimes)),
            'min_runtime': float(np.min(runtimes)),
            'max_runtime': float(np.max(runtimes)),
            'avg_throughput': float(np.mean(throughputs)),
            'num_runs': len(runs)
        }

    return aggregated


def _series(aggregated, executor):
    return sorted((v['num_workers'], v['avg_runtime'], v['std_runtime'])
                  for v in aggregated.values() if v['executor'] == executor)


def plot_worker_scaling(aggregated, output_file):
    """Plot runtime vs number of workers, one line per executor."""
    plt.figure(figsize=(10, 6))
    plotted = False

    for executor, color in EXECUTOR_COLORS.items():
        data = _series(aggregated, executor)
        if not data:
            continue
        workers, runtimes, stds = zip(*data)
        plt.errorbar(workers, runtimes, yerr=stds, marker='o', capsize=5,
                     linewidth=2, markersize=8, color=color, label=executor)
        plotted = True

    if not plotted:
        print("⚠️  No worker scaling data found")
        plt.close()
        return

    plt.xlabel('Number of Workers', fontsize=12)
    plt.ylabel('Runtime (seconds)', fontsize=12)
    plt.title('Worker Scaling', fontsize=14, fontweight='bold')
    plt.legend(fontsize=11)
    plt.grid(True, alpha=0.3)
    plt.tight_layout()
    plt.savefig(output_file, dpi=300, bbox_inches='tight')
    print(f"✓ Saved: {output_file}")
    plt.close()


def plot_speedup(aggregated, output_file):
    """Plot speedup relative to one worker against ideal linear speedup."""
    plt.figure(figsize=(10, 6))
    all_workers = set()

    for executor, color in EXECUTOR_COLORS.items():
        data = _series(aggregated, executor)
        if len(data) < 2:
            continue
        workers, runtimes, _ = zip(*data)
        baseline = runtimes[0]
        speedups = [baseline / rt if rt > 0 else 0 for rt in runtimes]
        plt.plot(workers, speedups, marker='o', linewidth=2, markersize=8,
                 label=f'{executor} speedup', color=color)
        all_workers.update(workers)

    if not all_workers:
        print("⚠️  Insufficient data for speedup plot")
        plt.close()
        return

    ideal = sorted(all_workers)
    plt.plot(ideal, ideal, linestyle='--', linewidth=2,
             label='Ideal (Linear) Speedup', color='gray', alpha=0.7)
    plt.xlabel('Number of Workers', fontsize=12)
    plt.ylabel('Speedup', fontsize=12)
    plt.title('Speedup vs Ideal Linear Speedup', fontsize=14, fontweight='bold')
    plt.xticks(ideal)
    plt.legend(fontsize=11)
    plt.grid(True, alpha=0.3)
    plt.tight_layout()
    plt.savefig(output_file, dpi=300, bbox_inches='tight')
    print(f"✓ Saved: {output_file}")
    plt.close()


def generate_summary_table(aggregated, output_file):
    """Generate a markdown table summarizing all results."""
    lines = [
        "# Benchmark Results Summary\n",
        "| Benchmark | Executor | Workers | Input (MB) | Avg Runtime (s) | Std Dev | Throughput (MB/s) |",
        "|-----------|----------|---------|------------|-----------------|---------|-------------------|"
    ]

    for name in sorted(aggregated.keys()):
        v = aggregated[name]
        lines.append(
            f"| {v['benchmark_name']:<21} | {v['executor']:>8} | "
            f"{v['num_workers']:>7} | {v['input_size_mb']:>10.2f} | "
            f"{v['avg_runtime']:>15.3f} | {v['std_runtime']:>7.3f} | "
            f"{v['avg_throughput']:>17.3f} |"
        )

    with open(output_file, 'w') as f:
        f.write('\n'.join(lines))

    print(f"✓ Saved: {output_file}")


def main():
    """Generate all plots from benchmark results."""
    if len(sys.argv) < 2:
        print("Usage: python plot_results.py <results.json>")
        sys.exit(1)

    json_file = sys.argv[1]

    if not Path(json_file).exists():
        print(f"❌ File not found: {json_file}")
        sys.exit(1)

    print(f"Loading results from: {json_file}")
    results = load_results(json_file)
    aggregated = aggregate_runs(results)
    print(f"✓ Aggregated {len(results)} runs into {len(aggregated)} benchmarks")

    PLOTS_DIR.mkdir(parents=True, exist_ok=True)

    plot_worker_scaling(aggregated, PLOTS_DIR / "1_worker_scaling.png")
    plot_speedup(aggregated, PLOTS_DIR / "2_speedup.png")
    generate_summary_table(aggregated, PLOTS_DIR / "results_table.md")

    print(f"\nAll plots saved to: {PLOTS_DIR}/")


if __name__ == "__main__":
    main()
