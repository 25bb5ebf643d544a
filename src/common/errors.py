"""
Error types for the station statistics pipeline.
Every failure a run can end with derives from PipelineError.
"""

from typing import Optional


class PipelineError(Exception):
    """Base class for all pipeline failures"""


class MalformedRecord(PipelineError):
    """A line lacks the ';' delimiter or its value is not a finite number"""

    def __init__(self, line_number: int, line: str, reason: str):
        self.line_number = line_number
        self.line = line
        self.reason = reason
        super().__init__(f"Malformed record at line {line_number}: {reason} ({line!r})")

    def __reduce__(self):
        # Process pools pickle exceptions raised in workers
        return (self.__class__, (self.line_number, self.line, self.reason))


class PartitionError(PipelineError):
    """Invalid configuration detected before any work is dispatched"""


class AggregationFailure(PipelineError):
    """A chunk task failed; the run produces no report"""

    def __init__(self, chunk_index: int, cause: Optional[BaseException] = None):
        self.chunk_index = chunk_index
        self.cause = cause
        message = f"Chunk {chunk_index} failed"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)
