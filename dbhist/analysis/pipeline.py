"""Per-channel histogram analysis of a whole decoded buffer."""
from __future__ import annotations
from concurrent.futures import ProcessPoolExecutor

import numpy as np

from dbhist.analysis.buckets import build_bucket_table
from dbhist.analysis.channels import split_channels
from dbhist.metrics.histogram import analyze_channel
from dbhist.types import AudioBuffer, BucketTable, ChannelResult, Histogram


def _channel_worker(args: tuple[np.ndarray, int, int]) -> tuple[int, np.ndarray, np.ndarray, int]:
    """Worker for one channel; returns only counts so no table is pickled back."""
    signal, channel, win_size = args
    res = analyze_channel(signal, channel, win_size, build_bucket_table())
    return res.channel, res.peak.counts, res.rms.counts, res.zero_count


def _rebuild_result(
    table: BucketTable,
    worker_out: tuple[int, np.ndarray, np.ndarray, int]
) -> ChannelResult:
    """Attach worker counts to the caller's shared bucket table."""
    channel, peak_counts, rms_counts, zeros = worker_out
    peak = Histogram(table=table, counts=np.asarray(peak_counts, dtype=np.int64))
    rms = Histogram(table=table, counts=np.asarray(rms_counts, dtype=np.int64))
    return ChannelResult(
        channel=int(channel),
        peak=peak,
        rms=rms,
        max_peak_count=peak.max_count,
        max_rms_count=rms.max_count,
        zero_count=int(zeros),
    )


def analyze_signals(
    signals: list[np.ndarray],
    win_size: int,
    *,
    workers: int = 1
) -> list[ChannelResult]:
    """
    Analyze each channel signal and return results indexed by channel.

    With ``workers > 1`` channels are processed in a process pool; the
    result order still follows channel numbers and every result shares
    this process's read-only bucket table.
    """
    if win_size <= 0:
        raise ValueError("win_size must be positive.")
    table = build_bucket_table()
    jobs = [(sig, ch, win_size) for ch, sig in enumerate(signals)]
    max_workers = min(max(1, int(workers)), max(1, len(jobs)))
    if max_workers == 1:
        return [analyze_channel(sig, ch, win, table) for sig, ch, win in jobs]
    with ProcessPoolExecutor(max_workers=max_workers) as ex:
        return [_rebuild_result(table, out) for out in ex.map(_channel_worker, jobs)]


def analyze_buffer(
    audio: AudioBuffer,
    win_size: int,
    *,
    workers: int = 1
) -> list[ChannelResult]:
    """Split an interleaved AudioBuffer and analyze every channel."""
    signals = split_channels(audio.samples, audio.channels)
    return analyze_signals(signals, win_size, workers=workers)
