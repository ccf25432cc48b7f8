"""
dbhist - dBFS Histogram Tool

Computes per-channel peak and RMS level histograms of audio files in dBFS
buckets and writes them as a normalized tab-separated report.
"""
from dbhist.version import __version__
from dbhist.types import (
    HistogramKind,
    AudioBuffer,
    BucketTable,
    Histogram,
    ChannelResult,
)

__all__ = [
    "__version__",
    "HistogramKind",
    "AudioBuffer",
    "BucketTable",
    "Histogram",
    "ChannelResult",
]
