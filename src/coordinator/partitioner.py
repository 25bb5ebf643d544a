"""
Partitioner
Splits N records into at most W balanced, contiguous index ranges
"""

from dataclasses import dataclass
from typing import List

from common.errors import PartitionError


@dataclass(frozen=True)
class Chunk:
    """Half-open index range [start, end) handled by one task"""
    index: int
    start: int
    end: int

    def __len__(self) -> int:
        return self.end - self.start

    def rebased(self) -> 'Chunk':
        """Same chunk addressed from 0, for tasks that receive only their own slice"""
        return Chunk(self.index, 0, len(self))


def partition(num_records: int, num_workers: int) -> List[Chunk]:
    """
    Split num_records into min(num_workers, num_records) chunks

    Chunk sizes differ by at most one; the first (num_records % k)
    chunks carry the extra record.

    Args:
        num_records: Total number of records N (may be 0)
        num_workers: Configured worker count W

    Returns:
        Chunks in record order; empty when num_records is 0

    Raises:
        PartitionError: If num_workers < 1 or num_records < 0
    """
    if num_workers < 1:
        raise PartitionError(f"Worker count must be >= 1, got {num_workers}")
    if num_records < 0:
        raise PartitionError(f"Record count must be >= 0, got {num_records}")

    num_chunks = min(num_workers, num_records)
    if num_chunks == 0:
        return []

    base_size, remainder = divmod(num_records, num_chunks)

    chunks = []
    start = 0
    for i in range(num_chunks):
        end = start + base_size + (1 if i < remainder else 0)
        chunks.append(Chunk(index=i, start=start, end=end))
        start = end

    return chunks
