"""Peak and RMS dBFS histograms."""
from __future__ import annotations

import numpy as np

from dbhist.analysis.buckets import build_bucket_table
from dbhist.dsp.windowing import rms_series
from dbhist.metrics.levels import zero_count
from dbhist.types import BucketTable, ChannelResult, Histogram


def new_histogram(table: BucketTable | None = None) -> Histogram:
    """Return a zeroed histogram over the shared bucket table."""
    if table is None:
        table = build_bucket_table()
    return Histogram(table=table, counts=np.zeros(len(table), dtype=np.int64))


def classify(table: BucketTable, values: np.ndarray) -> np.ndarray:
    """
    Return the bucket index of each value.

    A value lands in the smallest boundary >= value, so a value equal to a
    boundary belongs to that (quieter) bucket. NaN and inf go to the
    sentinel bucket, not to the -140 dBFS bucket an ordered-map lower
    bound would pick for NaN, so broken samples are reported as over 0 dBFS.
    """
    v = np.asarray(values, dtype=np.float64)
    idx = np.searchsorted(table.boundaries, v, side="left")
    return np.minimum(idx, len(table) - 1)


def _accumulate(hist: Histogram, values: np.ndarray) -> Histogram:
    idx = classify(hist.table, values)
    hist.counts += np.bincount(idx.ravel(), minlength=len(hist.table)).astype(np.int64)
    return hist


def accumulate_peak(hist: Histogram, signal: np.ndarray) -> Histogram:
    """Count the absolute value of every sample."""
    return _accumulate(hist, np.abs(np.asarray(signal, dtype=np.float64)))


def accumulate_rms(hist: Histogram, rms_values: np.ndarray) -> Histogram:
    """Count RMS window values (already non-negative)."""
    return _accumulate(hist, rms_values)


def analyze_channel(
    signal: np.ndarray,
    channel: int,
    win_size: int,
    table: BucketTable | None = None
) -> ChannelResult:
    """Build the peak and RMS histograms of one channel."""
    x = np.asarray(signal, dtype=np.float64)
    if x.ndim != 1:
        raise ValueError("Expected 1D channel signal.")
    if table is None:
        table = build_bucket_table()
    peak = accumulate_peak(new_histogram(table), x)
    rms = accumulate_rms(new_histogram(table), rms_series(x, win_size))
    return ChannelResult(
        channel=int(channel),
        peak=peak,
        rms=rms,
        max_peak_count=peak.max_count,
        max_rms_count=rms.max_count,
        zero_count=zero_count(x),
    )
