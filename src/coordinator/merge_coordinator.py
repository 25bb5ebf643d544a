"""
Merge Coordinator
Dispatches one aggregation task per chunk to a bounded pool and folds each
chunk's result into the global map as soon as the task completes
"""

import functools
import logging
import threading
from concurrent.futures import Executor, Future, ProcessPoolExecutor, ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from common.config import EXECUTOR_KINDS
from common.errors import AggregationFailure, PartitionError
from coordinator.partitioner import Chunk
from worker.chunk_aggregator import LocalResultMap, aggregate_chunk
from worker.running_stats import RunningStats

logger = logging.getLogger(__name__)

GlobalResultMap = Dict[str, RunningStats]
ProgressCallback = Callable[[int, int], None]


class TaskStatus(Enum):
    """Status of an individual chunk task"""
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass
class ChunkTask:
    """Tracking record for one chunk"""
    chunk: Chunk
    status: TaskStatus = TaskStatus.PENDING
    num_keys: int = 0
    error_message: str = ''


class MergeCoordinator:
    """Runs chunk aggregation in parallel and owns the global result map for one run"""

    def __init__(self, workers: int, executor: str = 'thread',
                 progress_callback: Optional[ProgressCallback] = None):
        """
        Initialize the coordinator

        Args:
            workers: Upper bound on concurrently running tasks
            executor: 'thread' or 'process'
            progress_callback: Called as (merged_chunks, total_chunks) after each fold

        Raises:
            PartitionError: If workers < 1 or the executor kind is unknown
        """
        if workers < 1:
            raise PartitionError(f"Worker count must be >= 1, got {workers}")
        if executor not in EXECUTOR_KINDS:
            raise PartitionError(f"Unknown executor {executor!r}, expected one of {EXECUTOR_KINDS}")

        self.workers = workers
        self.executor = executor
        self.progress_callback = progress_callback
        self.tasks: Dict[int, ChunkTask] = {}
        self.lock = threading.Lock()

        # Run-scoped state, reset by run()
        self._global_map: GlobalResultMap = {}
        self._remaining = 0
        self._failure: Optional[Tuple[int, BaseException]] = None
        self._barrier = threading.Event()

    def run(self, records: Sequence, chunks: List[Chunk]) -> Mapping[str, RunningStats]:
        """
        Aggregate every chunk and wait until all of them are merged

        Args:
            records: Read-only sequence of lines (or Records) shared by all tasks
            chunks: Output of the partitioner for this sequence

        Returns:
            Read-only view of the global map, keyed by station

        Raises:
            AggregationFailure: If any chunk task fails; no partial map is returned
        """
        with self.lock:
            self.tasks = {chunk.index: ChunkTask(chunk) for chunk in chunks}
            self._global_map = {}
            self._remaining = len(chunks)
            self._failure = None
            self._barrier = threading.Event()

        global_map = self._global_map
        if not chunks:
            logger.info("No chunks to aggregate")
            return MappingProxyType(global_map)

        pool_size = min(self.workers, len(chunks))
        logger.info(f"Dispatching {len(chunks)} chunks to {pool_size} {self.executor} workers")

        pool = self._create_pool(pool_size)
        futures: List[Future] = []
        try:
            for chunk in chunks:
                future = self._submit(pool, records, chunk)
                self._set_status(chunk.index, TaskStatus.RUNNING)
                futures.append(future)
                future.add_done_callback(functools.partial(self._on_chunk_done, chunk))

            # Single barrier: set once every chunk is merged, or on the first failure
            self._barrier.wait()

            if self._failure is not None:
                chunk_index, error = self._failure
                cancelled = sum(1 for f in futures if f.cancel())
                logger.error(f"Chunk {chunk_index} failed, cancelled {cancelled} pending tasks: {error}")
                raise AggregationFailure(chunk_index, error) from error
        finally:
            pool.shutdown(wait=True, cancel_futures=True)

        logger.info(f"Merged {len(chunks)} chunks into {len(global_map)} keys")
        return MappingProxyType(global_map)

    def get_status(self) -> Dict:
        """Snapshot of task progress for the current run"""
        with self.lock:
            total = len(self.tasks)
            counts = {status.value: 0 for status in TaskStatus}
            for task in self.tasks.values():
                counts[task.status.value] += 1

            completed = counts[TaskStatus.COMPLETED.value]
            return {
                'total': total,
                'progress': int(completed / total * 100) if total > 0 else 0,
                'error_message': str(self._failure[1]) if self._failure else '',
                **counts,
            }

    def _create_pool(self, pool_size: int) -> Executor:
        if self.executor == 'process':
            return ProcessPoolExecutor(max_workers=pool_size)
        return ThreadPoolExecutor(max_workers=pool_size, thread_name_prefix='chunk')

    def _submit(self, pool: Executor, records: Sequence, chunk: Chunk) -> Future:
        if self.executor == 'process':
            # Ship only this chunk's slice to the worker process
            return pool.submit(aggregate_chunk, records[chunk.start:chunk.end], chunk.rebased(), chunk.start)
        return pool.submit(aggregate_chunk, records, chunk)

    def _set_status(self, chunk_index: int, status: TaskStatus):
        with self.lock:
            task = self.tasks[chunk_index]
            # Callbacks may already have finalized the task
            if task.status in (TaskStatus.PENDING, TaskStatus.RUNNING):
                task.status = status

    def _on_chunk_done(self, chunk: Chunk, future: Future):
        """Runs in whichever thread completed the future"""
        if future.cancelled():
            self._set_status(chunk.index, TaskStatus.CANCELLED)
            return

        error = future.exception()
        if error is None:
            try:
                merged, total = self._fold(chunk, future.result())
            except Exception as e:
                error = e
            else:
                if merged and self.progress_callback is not None:
                    self.progress_callback(merged, total)
                return

        self._record_failure(chunk, error)

    def _fold(self, chunk: Chunk, local_map: LocalResultMap) -> Tuple[int, int]:
        """
        Merge one chunk's map into the global map under the coordinator lock

        Returns:
            (merged chunk count, total chunk count); merged is 0 when the
            result was ignored because the run already failed
        """
        with self.lock:
            task = self.tasks[chunk.index]
            total = len(self.tasks)
            if self._failure is not None:
                task.status = TaskStatus.CANCELLED
                return 0, total

            for key, stats in local_map.items():
                existing = self._global_map.get(key)
                if existing is None:
                    self._global_map[key] = stats.copy()
                else:
                    existing.merge(stats)

            task.status = TaskStatus.COMPLETED
            task.num_keys = len(local_map)
            self._remaining -= 1
            merged = total - self._remaining
            if self._remaining == 0:
                self._barrier.set()

        logger.debug(f"Merged chunk {chunk.index} ({len(local_map)} keys), {merged}/{total} done")
        return merged, total

    def _record_failure(self, chunk: Chunk, error: BaseException):
        with self.lock:
            task = self.tasks[chunk.index]
            task.status = TaskStatus.FAILED
            task.error_message = str(error)
            if self._failure is None:
                self._failure = (chunk.index, error)
                self._barrier.set()
