from __future__ import annotations

import numpy as np
import pytest

from dbhist.analysis.buckets import build_bucket_table
from dbhist.analysis.channels import interleave
from dbhist.analysis.pipeline import analyze_buffer, analyze_signals
from dbhist.types import AudioBuffer


def _stereo_buffer() -> AudioBuffer:
    left = np.array([0.5, 0.5, -0.5, 0.5, 0.0])
    right = np.array([1.5, 0.0, 0.0, 0.0, 0.0])
    return AudioBuffer(
        samples=interleave([left, right]),
        fs=400,
        channels=2,
        frames=5,
        backend="test",
    )


def test_analyze_buffer_per_channel():
    results = analyze_buffer(_stereo_buffer(), 2)
    assert [r.channel for r in results] == [0, 1]
    left, right = results
    assert left.peak.total == 5
    assert left.rms.total == 3
    assert left.zero_count == 1
    assert right.peak.counts[141] == 1
    assert right.zero_count == 4


def test_analyze_signals_with_workers_matches_serial():
    rng = np.random.default_rng(1)
    signals = [rng.uniform(-1.0, 1.0, size=1000) for _ in range(3)]
    serial = analyze_signals(signals, 50)
    parallel = analyze_signals(signals, 50, workers=2)
    assert [r.channel for r in parallel] == [0, 1, 2]
    for a, b in zip(serial, parallel):
        assert np.array_equal(a.peak.counts, b.peak.counts)
        assert np.array_equal(a.rms.counts, b.rms.counts)


def test_analyze_buffer_rejects_empty_audio():
    audio = AudioBuffer(samples=np.array([]), fs=48000, channels=1, frames=0)
    with pytest.raises(ValueError):
        analyze_buffer(audio, 240)


def test_parallel_results_share_read_only_table():
    signals = [np.array([0.5, 0.25, 0.0]), np.array([1.5, 0.1, 0.1])]
    results = analyze_signals(signals, 2, workers=2)
    table = build_bucket_table()
    for res in results:
        assert res.peak.table is table
        assert res.rms.table is table
        assert not res.peak.table.boundaries.flags.writeable
    assert results[1].peak.counts[141] == 1
    assert results[1].max_peak_count == 2
    assert results[0].zero_count == 1
