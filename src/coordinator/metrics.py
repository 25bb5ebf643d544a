"""
Performance metrics collection for pipeline runs.
"""

import json
import os
import time
import uuid
from dataclasses import dataclass, asdict, field

import psutil


@dataclass
class RunMetrics:
    """Metrics for a single pipeline run."""

    run_id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])
    start_time: float = 0.0
    end_time: float = 0.0
    partition_start: float = 0.0
    partition_end: float = 0.0
    aggregation_start: float = 0.0
    aggregation_end: float = 0.0
    report_start: float = 0.0
    report_end: float = 0.0
    num_workers: int = 0
    executor: str = ''
    num_records: int = 0
    num_chunks: int = 0
    num_keys: int = 0
    input_size_bytes: int = 0
    peak_memory_bytes: int = 0
    success: bool = False
    error_message: str = ''

    @property
    def total_time_seconds(self) -> float:
        """Total run time in seconds."""
        return self.end_time - self.start_time

    @property
    def partition_time_seconds(self) -> float:
        return self.partition_end - self.partition_start

    @property
    def aggregation_time_seconds(self) -> float:
        """Time from first dispatch to the merge barrier, in seconds."""
        return self.aggregation_end - self.aggregation_start

    @property
    def report_time_seconds(self) -> float:
        return self.report_end - self.report_start

    @property
    def throughput_records_per_second(self) -> float:
        total = self.total_time_seconds
        return self.num_records / total if total > 0 else 0.0

    def start(self, input_path: str = ''):
        """Mark the run start and record the input size when it is a file."""
        self.start_time = time.time()
        if input_path and input_path != '-' and os.path.exists(input_path):
            self.input_size_bytes = os.path.getsize(input_path)
        self.sample_memory()

    def sample_memory(self):
        """Fold the current RSS of this process and its worker processes into the peak."""
        process = psutil.Process()
        rss = process.memory_info().rss
        for child in process.children(recursive=True):
            try:
                rss += child.memory_info().rss
            except (psutil.NoSuchProcess, psutil.AccessDenied):
                # Worker exited or is not readable
                continue
        self.peak_memory_bytes = max(self.peak_memory_bytes, rss)

    def finish(self, success: bool, error_message: str = ''):
        """Mark the run end and take a final memory sample."""
        self.end_time = time.time()
        self.success = success
        self.error_message = error_message
        self.sample_memory()

    def summary(self) -> str:
        """One-line timing summary for logs."""
        return (f"run {self.run_id}: {self.num_records} records, {self.num_chunks} chunks, "
                f"{self.num_keys} keys; partition {self.partition_time_seconds * 1000:.1f}ms, "
                f"aggregate {self.aggregation_time_seconds * 1000:.1f}ms, "
                f"report {self.report_time_seconds * 1000:.1f}ms, "
                f"total {self.total_time_seconds * 1000:.1f}ms")

    def to_dict(self) -> dict:
        """Convert metrics to dictionary, including derived durations."""
        data = asdict(self)
        data['total_time_seconds'] = self.total_time_seconds
        data['partition_time_seconds'] = self.partition_time_seconds
        data['aggregation_time_seconds'] = self.aggregation_time_seconds
        data['report_time_seconds'] = self.report_time_seconds
        data['throughput_records_per_second'] = self.throughput_records_per_second
        return data

    def save_to_file(self, filepath: str):
        """Save metrics to JSON file."""
        with open(filepath, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)
