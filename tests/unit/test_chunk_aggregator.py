"""
Unit tests for ChunkAggregator
"""

import pytest

from common.errors import MalformedRecord
from common.records import Record
from coordinator.partitioner import Chunk
from worker.chunk_aggregator import ChunkAggregator, aggregate_chunk
from worker.running_stats import RunningStats


class TestChunkAggregator:
    """Tests for aggregating one chunk"""

    def test_aggregates_whole_sequence(self):
        lines = ["A;10.0", "A;20.0", "B;5.0"]
        result = aggregate_chunk(lines, Chunk(0, 0, 3))

        assert result == {
            'A': RunningStats(min=10.0, max=20.0, total=30.0, count=2),
            'B': RunningStats(min=5.0, max=5.0, total=5.0, count=1),
        }

    def test_only_reads_its_own_range(self):
        lines = ["A;1.0", "B;2.0", "C;3.0", "D;4.0"]
        result = aggregate_chunk(lines, Chunk(1, 1, 3))
        assert sorted(result) == ['B', 'C']

    def test_empty_chunk_returns_empty_map(self):
        assert aggregate_chunk(["A;1.0"], Chunk(0, 1, 1)) == {}

    def test_accepts_parsed_records(self):
        records = [Record("X", 1.0), Record("X", 3.0)]
        result = aggregate_chunk(records, Chunk(0, 0, 2))
        assert result['X'].mean() == 2.0

    def test_does_not_modify_input(self):
        lines = ["A;1.0", "A;2.0"]
        aggregate_chunk(lines, Chunk(0, 0, 2))
        assert lines == ["A;1.0", "A;2.0"]

    def test_malformed_line_fails_the_chunk(self):
        lines = ["A;10.0", "A;10.0", "A;notanumber"]
        with pytest.raises(MalformedRecord) as exc_info:
            ChunkAggregator(lines, Chunk(0, 0, 3)).execute()
        assert exc_info.value.line_number == 3

    def test_line_offset_keeps_global_line_numbers(self):
        # Slice of a larger input that started at index 100
        lines = ["A;1.0", "bad"]
        with pytest.raises(MalformedRecord) as exc_info:
            aggregate_chunk(lines, Chunk(5, 0, 2), line_offset=100)
        assert exc_info.value.line_number == 102

    def test_malformed_line_outside_chunk_is_ignored(self):
        lines = ["bad", "A;1.0"]
        assert aggregate_chunk(lines, Chunk(1, 1, 2))['A'].count == 1
