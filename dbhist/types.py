from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
import numpy as np


class HistogramKind(str, Enum):
    PEAK = "peak"
    RMS = "rms"


@dataclass(frozen=True)
class AudioBuffer:
    samples: np.ndarray
    fs: int
    channels: int
    frames: int
    backend: str = "soundfile"
    format_desc: str = ""
    warnings: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class BucketTable:
    """Ascending linear-amplitude boundaries with their dBFS labels."""
    boundaries: np.ndarray
    dbfs: np.ndarray

    def __len__(self) -> int:
        return int(self.boundaries.size)


@dataclass
class Histogram:
    table: BucketTable
    counts: np.ndarray

    @property
    def total(self) -> int:
        return int(np.sum(self.counts))

    @property
    def max_count(self) -> int:
        return int(np.max(self.counts))


@dataclass(frozen=True)
class ChannelResult:
    channel: int
    peak: Histogram
    rms: Histogram
    max_peak_count: int
    max_rms_count: int
    zero_count: int = 0

    def histogram(self, kind: HistogramKind) -> Histogram:
        return self.peak if kind == HistogramKind.PEAK else self.rms

    def max_count(self, kind: HistogramKind) -> int:
        return self.max_peak_count if kind == HistogramKind.PEAK else self.max_rms_count
