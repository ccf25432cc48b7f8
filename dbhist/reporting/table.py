"""Normalized tab-separated histogram report."""
from __future__ import annotations
from typing import TextIO

import numpy as np

from dbhist.analysis.buckets import MIN_DBFS, bucket_label, build_bucket_table
from dbhist.types import BucketTable, ChannelResult, HistogramKind

HEADER_LINES = (
    "# bucket 1 covers all values greater than 0 dBFS",
    f"# bucket {MIN_DBFS} covers all values lower or equal {MIN_DBFS} dBFS",
    "#",
)


def normalize_counts(counts: np.ndarray, max_count: int) -> np.ndarray:
    """
    Scale counts so that ``max_count`` maps to 100.

    An empty histogram (max_count == 0) normalizes to all zeros.
    """
    c = np.asarray(counts, dtype=np.float64)
    if max_count <= 0:
        return np.zeros_like(c)
    return 100.0 * c / float(max_count)


def _fmt(x: float) -> str:
    return f"{x:.1f}"


def header_row(num_channels: int) -> str:
    cols = ["# bucket"]
    for ch in range(num_channels):
        cols.extend([f"ch_{ch}_peak", f"ch_{ch}_rms"])
    return "\t".join(cols)


def report_rows(
    results: list[ChannelResult],
    table: BucketTable | None = None
) -> list[list[float]]:
    """
    Build the numeric report rows, loudest bucket first.

    Each row is ``[label, ch0_peak, ch0_rms, ch1_peak, ...]``.
    """
    if table is None:
        table = build_bucket_table()
    columns = []
    for res in results:
        for kind in (HistogramKind.PEAK, HistogramKind.RMS):
            columns.append(normalize_counts(res.histogram(kind).counts, res.max_count(kind)))
    rows = []
    for idx in range(len(table) - 1, -1, -1):
        row = [bucket_label(table, idx)]
        row.extend(float(col[idx]) for col in columns)
        rows.append(row)
    return rows


def render_report(results: list[ChannelResult], table: BucketTable | None = None) -> str:
    """Render the full report text."""
    lines = list(HEADER_LINES)
    lines.append(header_row(len(results)))
    for row in report_rows(results, table):
        lines.append("\t".join(_fmt(v) for v in row))
    return "\n".join(lines) + "\n"


def write_report(
    fp: TextIO,
    results: list[ChannelResult],
    table: BucketTable | None = None
) -> None:
    """Write the report to an open text stream."""
    fp.write(render_report(results, table))
