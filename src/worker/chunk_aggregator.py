"""
Chunk Aggregator
Builds per-key running statistics for one contiguous chunk of input lines
"""

import logging
import time
from typing import Dict, Sequence, Union

from common.records import Record, parse_record
from coordinator.partitioner import Chunk
from worker.running_stats import RunningStats

logger = logging.getLogger(__name__)

LocalResultMap = Dict[str, RunningStats]


class ChunkAggregator:
    """Aggregates a single chunk"""

    def __init__(self, records: Sequence[Union[str, Record]], chunk: Chunk, line_offset: int = 0):
        """
        Initialize the chunk aggregator

        Args:
            records: Read-only sequence of raw lines or parsed Records
            chunk: Index range of records this task owns
            line_offset: Added to indexes when reporting line numbers, for
                tasks that were handed only their own slice of the input
        """
        self.records = records
        self.chunk = chunk
        self.line_offset = line_offset

    def execute(self) -> LocalResultMap:
        """
        Observe every record of the chunk

        Returns:
            Mapping from key to the RunningStats of this chunk

        Raises:
            MalformedRecord: On the first line that cannot be parsed
        """
        start_time = time.time()
        result: LocalResultMap = {}

        for i in range(self.chunk.start, self.chunk.end):
            item = self.records[i]
            if isinstance(item, Record):
                record = item
            else:
                # 1-based line numbers, as an editor shows them
                record = parse_record(item, self.line_offset + i + 1)

            stats = result.get(record.key)
            if stats is None:
                stats = result[record.key] = RunningStats()
            stats.observe(record.value)

        elapsed_ms = int((time.time() - start_time) * 1000)
        logger.debug(f"Chunk {self.chunk.index}: {len(self.chunk)} records, "
                     f"{len(result)} keys in {elapsed_ms}ms")
        return result


def aggregate_chunk(records: Sequence[Union[str, Record]], chunk: Chunk, line_offset: int = 0) -> LocalResultMap:
    """Module-level entry point so process pools can pickle the task"""
    return ChunkAggregator(records, chunk, line_offset).execute()
