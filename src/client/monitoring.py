"""Helpers for showing run progress and resource usage on the terminal."""

import sys
import threading
from typing import TextIO

from coordinator.metrics import RunMetrics


def format_duration(seconds: float) -> str:
    """Format duration in seconds to human readable string."""
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes = int(seconds / 60)
    seconds = seconds % 60
    if minutes < 60:
        return f"{minutes}m {seconds:.1f}s"
    hours = int(minutes / 60)
    minutes = minutes % 60
    return f"{hours}h {minutes}m {seconds:.1f}s"


def format_progress_bar(completed: int, total: int, width: int = 40) -> str:
    """Create a progress bar string."""
    percentage = (completed / total) if total > 0 else 0
    filled = int(width * percentage)
    bar = "█" * filled + "░" * (width - filled)
    return f"[{bar}] {percentage:.1%}"


def format_bytes(num_bytes: int) -> str:
    return f"{num_bytes / (1024 * 1024):.1f} MB"


class ProgressPrinter:
    """Progress callback that redraws a bar on stderr after each merged chunk."""

    def __init__(self, stream: TextIO = None, width: int = 40):
        self.stream = stream or sys.stderr
        self.width = width
        # Called from worker threads
        self._lock = threading.Lock()

    def __call__(self, merged: int, total: int):
        with self._lock:
            self.stream.write(f"\rMerged chunks: {format_progress_bar(merged, total, self.width)} {merged}/{total}")
            if merged == total:
                self.stream.write("\n")
            self.stream.flush()


def show_resource_usage(metrics: RunMetrics, stream: TextIO = None):
    """Print timing and memory figures for a finished run."""
    out = stream or sys.stderr
    print(f"Run {metrics.run_id}:", file=out)
    print(f"  Workers: {metrics.num_workers} ({metrics.executor})", file=out)
    print(f"  Records: {metrics.num_records} in {metrics.num_chunks} chunks, {metrics.num_keys} keys", file=out)
    print(f"  Partition: {format_duration(metrics.partition_time_seconds)}", file=out)
    print(f"  Aggregate: {format_duration(metrics.aggregation_time_seconds)}", file=out)
    print(f"  Report: {format_duration(metrics.report_time_seconds)}", file=out)
    print(f"  Total: {format_duration(metrics.total_time_seconds)}", file=out)
    print(f"  Input: {format_bytes(metrics.input_size_bytes)}", file=out)
    print(f"  Peak Memory: {format_bytes(metrics.peak_memory_bytes)}", file=out)
