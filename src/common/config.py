"""
Pipeline configuration
Defaults, overridden by environment variables, overridden by command line flags
"""

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

import psutil

from common.errors import PartitionError

DEFAULT_INPUT_FILE = './measurements.txt'
EXECUTOR_KINDS = ('thread', 'process')
OUTPUT_STYLES = ('map', 'lines')


def default_worker_count() -> int:
    """Number of available parallel execution units on this host"""
    return psutil.cpu_count(logical=True) or 1


@dataclass
class PipelineConfig:
    """Settings for a single pipeline run"""
    workers: int = field(default_factory=default_worker_count)
    executor: str = 'thread'
    input_path: str = DEFAULT_INPUT_FILE
    output_style: str = 'map'
    log_level: str = 'WARNING'

    def validate(self) -> 'PipelineConfig':
        """Reject settings that would make partitioning impossible"""
        if isinstance(self.workers, bool) or not isinstance(self.workers, int):
            raise PartitionError(f"Worker count must be an integer, got {self.workers!r}")
        if self.workers < 1:
            raise PartitionError(f"Worker count must be >= 1, got {self.workers}")
        if self.executor not in EXECUTOR_KINDS:
            raise PartitionError(f"Unknown executor {self.executor!r}, expected one of {EXECUTOR_KINDS}")
        if self.output_style not in OUTPUT_STYLES:
            raise PartitionError(f"Unknown output style {self.output_style!r}, expected one of {OUTPUT_STYLES}")
        return self

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'PipelineConfig':
        """
        Build a configuration from BRC_* environment variables

        Args:
            environ: Mapping to read from (defaults to os.environ)

        Raises:
            PartitionError: If BRC_WORKERS is not an integer
        """
        env = os.environ if environ is None else environ
        config = cls()

        workers = env.get('BRC_WORKERS')
        if workers:
            try:
                config.workers = int(workers)
            except ValueError:
                raise PartitionError(f"BRC_WORKERS must be an integer, got {workers!r}") from None

        config.executor = env.get('BRC_EXECUTOR', config.executor)
        config.input_path = env.get('BRC_INPUT_FILE', config.input_path)
        config.log_level = env.get('BRC_LOG_LEVEL', config.log_level).upper()
        return config
