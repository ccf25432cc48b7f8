"""Fixed-size RMS windowing."""
from __future__ import annotations

import numpy as np

# Window length is sample_rate / 200 frames.
RMS_WINDOWS_PER_SECOND = 200


def window_size_for_rate(fs: int) -> int:
    """Return the RMS window length in frames for a sample rate."""
    win = int(fs) // RMS_WINDOWS_PER_SECOND
    if win <= 0:
        raise ValueError(
            f"Sample rate {fs} Hz is too low for a {RMS_WINDOWS_PER_SECOND}/s RMS window."
        )
    return win


def _validate_signal(x: np.ndarray) -> np.ndarray:
    x = np.asarray(x, dtype=np.float64)
    if x.ndim != 1:
        raise ValueError("Expected 1D channel signal.")
    return x


def window_rms(signal: np.ndarray, start: int, win_size: int) -> float:
    """
    RMS of the window starting at ``start``.

    The window is truncated to the samples that remain, so the final window
    of a signal may be shorter than ``win_size``.
    """
    x = _validate_signal(signal)
    if win_size <= 0:
        raise ValueError("win_size must be positive.")
    if not 0 <= start < x.size:
        raise ValueError(f"Window start {start} outside signal of length {x.size}.")
    win = min(win_size, x.size - start)
    frame = x[start:start + win]
    return float(np.sqrt(np.sum(frame * frame) / win))


def rms_series(signal: np.ndarray, win_size: int) -> np.ndarray:
    """RMS of consecutive non-overlapping windows, last one truncated."""
    x = _validate_signal(signal)
    if win_size <= 0:
        raise ValueError("win_size must be positive.")
    if x.size == 0:
        return np.array([], dtype=np.float64)
    n_full = x.size // win_size
    full = x[: n_full * win_size].reshape(n_full, win_size)
    out = np.sqrt(np.sum(full * full, axis=1) / win_size)
    tail_start = n_full * win_size
    if tail_start < x.size:
        out = np.append(out, window_rms(x, tail_start, win_size))
    return out
