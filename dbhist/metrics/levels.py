"""Per-channel sample statistics."""
from __future__ import annotations

import numpy as np


def zero_count(x: np.ndarray) -> int:
    """Count samples that are exactly 0.0."""
    x = np.asarray(x, dtype=np.float64)
    return int(np.count_nonzero(x == 0.0))
