"""De-interleaving of multi-channel sample buffers."""
from __future__ import annotations

import numpy as np


def frame_count(samples: np.ndarray, channels: int) -> int:
    """Number of whole frames in an interleaved buffer."""
    if channels < 1:
        raise ValueError("Channel count must be at least 1.")
    return int(np.asarray(samples).size // channels)


def split_channels(samples: np.ndarray, channels: int) -> list[np.ndarray]:
    """
    Split an interleaved buffer into one signal per channel.

    signal[c][i] == samples[i * channels + c]. A trailing partial frame is
    dropped. The returned arrays are read-only copies.
    """
    x = np.asarray(samples, dtype=np.float64).ravel()
    frames = frame_count(x, channels)
    if frames <= 0:
        raise ValueError("no audio read: buffer holds zero frames.")
    frames_2d = x[: frames * channels].reshape(frames, channels)
    signals = []
    for ch in range(channels):
        sig = np.ascontiguousarray(frames_2d[:, ch])
        sig.setflags(write=False)
        signals.append(sig)
    return signals


def interleave(signals: list[np.ndarray]) -> np.ndarray:
    """Interleave equal-length per-channel signals into one buffer."""
    if not signals:
        raise ValueError("Expected at least one channel signal.")
    arrs = [np.asarray(s, dtype=np.float64) for s in signals]
    if any(a.ndim != 1 for a in arrs):
        raise ValueError("Expected 1D channel signals.")
    if len({a.size for a in arrs}) != 1:
        raise ValueError("Channel signals must have equal length.")
    return np.stack(arrs, axis=1).ravel()
