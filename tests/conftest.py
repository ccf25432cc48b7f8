from __future__ import annotations

import sys
from pathlib import Path

import numpy as np
import soundfile as sf

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def write_wav(tmp_path: Path, samples, fs: int, name: str = "input.wav") -> Path:
    """Write float samples (frames or frames x channels) to a float WAV."""
    path = tmp_path / name
    sf.write(path, np.asarray(samples, dtype=np.float64), fs, subtype="FLOAT")
    return path


def read_report(path: Path) -> tuple[list[str], list[list[float]]]:
    """Return (comment lines, numeric rows) of a report file."""
    comments = []
    rows = []
    for line in path.read_text(encoding="utf-8").splitlines():
        if line.startswith("#"):
            comments.append(line)
        else:
            rows.append([float(v) for v in line.split("\t")])
    return comments, rows
