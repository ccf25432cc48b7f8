"""DSP modules for dbhist."""

from dbhist.dsp.windowing import (
    RMS_WINDOWS_PER_SECOND,
    rms_series,
    window_rms,
    window_size_for_rate,
)

__all__ = [
    "RMS_WINDOWS_PER_SECOND",
    "rms_series",
    "window_rms",
    "window_size_for_rate",
]
