"""dBFS bucket boundaries shared by every histogram."""
from __future__ import annotations
from functools import lru_cache
import math
import sys

import numpy as np

from dbhist.types import BucketTable

MAX_DBFS = 0
MIN_DBFS = -140
SENTINEL_BOUNDARY = sys.float_info.max
# Label of the catch-all "> 0 dBFS" row; outside the real dBFS range.
SENTINEL_LABEL = 1.0


def from_dbfs(dbfs: float) -> float:
    """Convert a dBFS value to linear amplitude."""
    return float(10.0 ** (dbfs / 20.0))


def to_dbfs(value: float) -> float:
    """Convert a positive linear amplitude to dBFS."""
    if not value > 0:
        raise ValueError("to_dbfs expects a positive amplitude.")
    return float(20.0 * math.log10(value))


def _readonly(a: np.ndarray) -> np.ndarray:
    a.setflags(write=False)
    return a


@lru_cache(maxsize=1)
def build_bucket_table() -> BucketTable:
    """
    Build the 142-entry bucket table.

    One bucket per integer dBFS from 0 down to -140 inclusive, plus a
    sentinel bucket catching anything louder than 0 dBFS. Entries are
    ordered by ascending linear amplitude.
    """
    dbfs = np.arange(MIN_DBFS, MAX_DBFS + 1, dtype=np.float64)
    boundaries = np.array([from_dbfs(d) for d in dbfs], dtype=np.float64)
    boundaries = np.append(boundaries, SENTINEL_BOUNDARY)
    labels = np.append(dbfs, SENTINEL_LABEL)
    return BucketTable(boundaries=_readonly(boundaries), dbfs=_readonly(labels))


def bucket_label(table: BucketTable, index: int) -> float:
    """Return the report label for a bucket index."""
    return float(table.dbfs[index])
