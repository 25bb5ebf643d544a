"""
Unit tests for run_pipeline
"""

from unittest.mock import patch

import pytest

from common.config import PipelineConfig
from common.errors import AggregationFailure, MalformedRecord, PartitionError
from coordinator.metrics import RunMetrics
from coordinator.pipeline import run_pipeline


def rows_as_text(result):
    return [str(row) for row in result.rows]


class TestRunPipeline:
    """Tests for the full partition, aggregate, merge and report flow"""

    def test_two_keys_two_workers(self):
        result = run_pipeline(["A;10.0", "A;20.0", "B;5.0"], PipelineConfig(workers=2))
        assert rows_as_text(result) == ["A=10.0/15.0/20.0", "B=5.0/5.0/5.0"]

    def test_key_observed_in_every_chunk(self):
        result = run_pipeline(["X;1.0", "Y;2.0", "X;3.0", "Y;4.0"], PipelineConfig(workers=4))
        assert rows_as_text(result) == ["X=1.0/2.0/3.0", "Y=2.0/3.0/4.0"]
        assert result.metrics.num_chunks == 4

    def test_empty_input(self):
        result = run_pipeline([], PipelineConfig(workers=4))
        assert result.rows == []
        assert result.metrics.num_chunks == 0
        assert result.metrics.success is True

    def test_malformed_line_fails_the_run(self):
        metrics = RunMetrics()
        with pytest.raises(AggregationFailure) as exc_info:
            run_pipeline(["A;10.0", "A;notanumber"], PipelineConfig(workers=2), metrics=metrics)

        assert isinstance(exc_info.value.cause, MalformedRecord)
        assert metrics.success is False
        assert "notanumber" in metrics.error_message

    def test_invalid_worker_count_fails_before_dispatch(self):
        with pytest.raises(PartitionError):
            run_pipeline(["A;1.0"], PipelineConfig(workers=0))

    def test_result_independent_of_worker_count(self, sample_lines):
        baseline = rows_as_text(run_pipeline(sample_lines, PipelineConfig(workers=1)))
        for workers in range(2, len(sample_lines) + 3):
            assert rows_as_text(run_pipeline(sample_lines, PipelineConfig(workers=workers))) == baseline

    def test_thread_and_process_executors_agree(self, sample_lines):
        threaded = run_pipeline(sample_lines, PipelineConfig(workers=3, executor='thread'))
        processes = run_pipeline(sample_lines, PipelineConfig(workers=3, executor='process'))
        assert rows_as_text(threaded) == rows_as_text(processes)

    def test_metrics_are_filled_in(self, sample_lines):
        result = run_pipeline(sample_lines, PipelineConfig(workers=4))
        metrics = result.metrics
        assert metrics.num_records == len(sample_lines)
        assert metrics.num_keys == len(result.rows)
        assert metrics.num_workers == 4
        assert metrics.executor == 'thread'
        assert metrics.aggregation_end >= metrics.aggregation_start > 0
        assert metrics.end_time >= metrics.start_time

    def test_sample_statistics(self, sample_lines):
        rows = {row.key: str(row) for row in run_pipeline(sample_lines, PipelineConfig(workers=3)).rows}
        assert rows['Hamburg'] == "Hamburg=-3.5/4.3/12.0"
        assert rows['Istanbul'] == "Istanbul=6.2/14.6/23.0"
        assert rows['Bulawayo'] == "Bulawayo=8.9/14.6/20.3"
        assert list(rows) == sorted(rows)

    def test_huge_value_is_reported(self):
        result = run_pipeline(["A;1e308"], PipelineConfig(workers=1))
        huge = f"{1e308:.1f}"
        assert rows_as_text(result) == [f"A={huge}/{huge}/{huge}"]

    def test_sum_overflow_across_chunks(self):
        result = run_pipeline(["A;1.5e308", "A;1.5e308"], PipelineConfig(workers=2))
        row = result.rows[0]
        assert (row.min, row.mean, row.max) == (f"{1.5e308:.1f}", "Infinity", f"{1.5e308:.1f}")
        assert result.metrics.num_chunks == 2

    def test_memory_sampled_at_each_phase_and_merge(self):
        progress = []
        with patch.object(RunMetrics, 'sample_memory') as sample_memory:
            run_pipeline(["A;1.0", "B;2.0"], PipelineConfig(workers=2),
                         progress_callback=lambda merged, total: progress.append(merged))

        # start, partition, two merges, aggregation, finish
        assert sample_memory.call_count == 6
        assert sorted(progress) == [1, 2]

    def test_process_run_reports_memory(self, sample_lines):
        result = run_pipeline(sample_lines, PipelineConfig(workers=2, executor='process'))
        assert result.metrics.peak_memory_bytes > 0
