"""
Pipeline
input -> partition -> parallel aggregate and merge -> sorted report
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import List, Mapping, Optional, Sequence

from client.reporter import ReportRow, build_rows
from common.config import PipelineConfig
from coordinator.merge_coordinator import MergeCoordinator, ProgressCallback
from coordinator.metrics import RunMetrics
from coordinator.partitioner import partition
from worker.running_stats import RunningStats

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    """Outcome of a successful run"""
    rows: List[ReportRow]
    stats: Mapping[str, RunningStats]
    metrics: RunMetrics


def run_pipeline(records: Sequence, config: PipelineConfig,
                 progress_callback: Optional[ProgressCallback] = None,
                 metrics: Optional[RunMetrics] = None) -> PipelineResult:
    """
    Run one aggregation over an in-memory record sequence

    Every run gets a fresh coordinator and a fresh global map.

    Args:
        records: Raw '<key>;<value>' lines or parsed Records
        config: Worker count and executor kind
        progress_callback: Forwarded to the coordinator
        metrics: Metrics object to fill in; a new one is created if omitted

    Returns:
        PipelineResult with key-sorted rows

    Raises:
        PartitionError: On invalid configuration, before any work starts
        AggregationFailure: If any chunk fails
    """
    config.validate()
    if metrics is None:
        metrics = RunMetrics()
    if not metrics.start_time:
        metrics.start()
    metrics.num_workers = config.workers
    metrics.executor = config.executor
    metrics.num_records = len(records)

    try:
        metrics.partition_start = time.time()
        chunks = partition(len(records), config.workers)
        metrics.partition_end = time.time()
        metrics.sample_memory()
        metrics.num_chunks = len(chunks)
        logger.info(f"Partitioned {len(records)} records into {len(chunks)} chunks")

        memory_lock = threading.Lock()

        def on_chunk_merged(merged: int, total: int):
            # Worker processes are still alive here
            with memory_lock:
                metrics.sample_memory()
            if progress_callback is not None:
                progress_callback(merged, total)

        coordinator = MergeCoordinator(config.workers, config.executor, on_chunk_merged)
        metrics.aggregation_start = time.time()
        stats = coordinator.run(records, chunks)
        metrics.aggregation_end = time.time()
        metrics.sample_memory()
        metrics.num_keys = len(stats)

        metrics.report_start = time.time()
        rows = build_rows(stats)
        metrics.report_end = time.time()
        logger.info(f"Rendered {len(rows)} rows")
    except Exception as e:
        metrics.finish(success=False, error_message=str(e))
        raise

    metrics.finish(success=True)
    logger.info(metrics.summary())
    return PipelineResult(rows=rows, stats=stats, metrics=metrics)
