"""
Input records
Reads the measurement file into memory and parses '<key>;<value>' lines
"""

import math
import sys
from dataclasses import dataclass
from typing import List

from common.errors import MalformedRecord

DELIMITER = ';'


@dataclass(frozen=True)
class Record:
    """One parsed measurement line"""
    key: str
    value: float


def parse_record(line: str, line_number: int = 0) -> Record:
    """
    Parse a single '<key>;<value>' line

    Args:
        line: Raw line without its line terminator
        line_number: Position of the line in the input, used in error messages

    Returns:
        The parsed Record

    Raises:
        MalformedRecord: If the delimiter is missing, the key is empty,
            or the value is not a finite number
    """
    delimiter_index = line.find(DELIMITER)
    if delimiter_index == -1:
        raise MalformedRecord(line_number, line, "missing ';' delimiter")

    key = line[:delimiter_index]
    if not key:
        raise MalformedRecord(line_number, line, "empty key")

    raw_value = line[delimiter_index + 1:]
    try:
        value = float(raw_value)
    except ValueError:
        raise MalformedRecord(line_number, line, f"value {raw_value!r} is not a number") from None

    if not math.isfinite(value):
        raise MalformedRecord(line_number, line, f"value {raw_value!r} is not finite")

    return Record(key, value)


def load_lines(input_path: str) -> List[str]:
    """
    Read the whole input into an indexable list of lines

    Only '\\n', '\\r\\n' and '\\r' end a record; other Unicode line
    separators are ordinary key characters.

    Args:
        input_path: Path to a UTF-8 text file, or '-' for standard input

    Returns:
        List of lines with line terminators removed
    """
    if input_path == '-':
        return [line.rstrip('\r\n') for line in sys.stdin]

    with open(input_path, 'r', encoding='utf-8') as f:
        return [line.rstrip('\r\n') for line in f]
