"""
Reporter
Renders the merged statistics as key-sorted rows and text
"""

from dataclasses import dataclass
from typing import List, Mapping, TextIO

from worker.running_stats import RunningStats


@dataclass(frozen=True)
class ReportRow:
    """One formatted output row"""
    key: str
    min: str
    mean: str
    max: str

    def __str__(self) -> str:
        return f"{self.key}={self.min}/{self.mean}/{self.max}"


def build_rows(global_map: Mapping[str, RunningStats]) -> List[ReportRow]:
    """
    Format every key of the finished map, sorted by key in codepoint order

    Args:
        global_map: Merged statistics; must not be mutated while rendering

    Returns:
        One ReportRow per key
    """
    rows = []
    for key in sorted(global_map):
        rows.append(ReportRow(key, *global_map[key].formatted()))
    return rows


def render_report(rows: List[ReportRow]) -> str:
    """Sorted map block: {A=1.0/2.0/3.0, B=...}"""
    return "{" + ", ".join(str(row) for row in rows) + "}"


def render_lines(rows: List[ReportRow]) -> str:
    """One 'key=min/mean/max' line per key"""
    return "".join(f"{row}\n" for row in rows)


def write_report(rows: List[ReportRow], stream: TextIO, style: str = 'map'):
    """Write rows to a text stream in 'map' or 'lines' style"""
    if style == 'lines':
        stream.write(render_lines(rows))
    else:
        stream.write(render_report(rows) + "\n")
