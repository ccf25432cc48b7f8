"""Audio I/O module."""
from __future__ import annotations
import json
import os
import shutil
import subprocess
import warnings as py_warnings
import numpy as np
from dbhist.types import AudioBuffer


def libsndfile_version() -> str:
    """Return the libsndfile version string used by soundfile."""
    try:
        import soundfile as sf
    except Exception as exc:
        raise RuntimeError("soundfile backend not available.") from exc
    return f"libsndfile-{sf.__libsndfile_version__}"


def _interleave_frames(data: np.ndarray) -> tuple[np.ndarray, int, int]:
    """Flatten a (frames, channels) array into an interleaved buffer."""
    x = np.asarray(data, dtype=np.float64)
    if x.ndim == 1:
        x = x.reshape(-1, 1)
    if x.ndim != 2:
        raise ValueError("Decoded audio must be 1D or 2D array.")
    frames, channels = x.shape
    return np.ascontiguousarray(x).ravel(), int(frames), int(channels)


def _decode_soundfile(path: str) -> tuple[np.ndarray, int, str, list[str]]:
    """Decode using soundfile (libsndfile)."""
    try:
        import soundfile as sf
    except Exception as exc:
        raise RuntimeError("soundfile backend not available.") from exc

    with py_warnings.catch_warnings(record=True) as w:
        py_warnings.simplefilter("always")
        info = sf.info(path)
        data, fs = sf.read(path, always_2d=True, dtype="float64")
    warn_list = [str(wi.message) for wi in w]
    desc = f"format: {info.format}, encoding: {info.subtype}, endian: {info.endian}"
    if data.shape[0] < info.frames:
        warn_list.append("soundfile: decoded fewer frames than file reports.")
    return data, int(fs), desc, warn_list


def _ffprobe_info(path: str) -> tuple[int, int, str]:
    """Return (sample_rate, channels, codec_name) from ffprobe."""
    ffprobe = shutil.which("ffprobe")
    if not ffprobe:
        raise RuntimeError("ffprobe not found for ffmpeg backend.")
    cmd = [
        ffprobe,
        "-v", "error",
        "-select_streams", "a:0",
        "-show_entries", "stream=sample_rate,channels,codec_name",
        "-of", "json",
        path,
    ]
    proc = subprocess.run(cmd, capture_output=True, text=True, check=False)
    if proc.returncode != 0:
        raise ValueError(f"ffprobe failed: {proc.stderr.strip()}")
    info = json.loads(proc.stdout)
    streams = info.get("streams", [])
    if not streams:
        raise ValueError("ffprobe reported no audio streams.")
    stream = streams[0]
    sr = int(stream["sample_rate"])
    ch = int(stream["channels"])
    return sr, ch, str(stream.get("codec_name", "unknown"))


def _decode_ffmpeg(path: str) -> tuple[np.ndarray, int, str, list[str]]:
    """Decode using ffmpeg to raw float32 PCM."""
    ffmpeg = shutil.which("ffmpeg")
    if not ffmpeg:
        raise RuntimeError("ffmpeg backend not available.")
    fs, ch, codec = _ffprobe_info(path)
    if ch <= 0:
        raise ValueError("ffprobe reported no audio channels.")
    cmd = [
        ffmpeg,
        "-v", "warning",
        "-i", path,
        "-f", "f32le",
        "-acodec", "pcm_f32le",
        "-vn",
        "pipe:1",
    ]
    proc = subprocess.run(cmd, capture_output=True, check=False)
    warn_list = [line for line in proc.stderr.decode("utf-8", errors="replace").splitlines() if line.strip()]
    if proc.returncode != 0:
        raise ValueError("ffmpeg decode failed.")
    data = np.frombuffer(proc.stdout, dtype=np.float32)
    n = (data.size // ch) * ch
    if n != data.size:
        warn_list.append("ffmpeg: trimmed partial frame at end of stream.")
        data = data[:n]
    data = data.reshape(-1, ch)
    return data.astype(np.float64), fs, f"format: {codec}, encoding: FLOAT, endian: LITTLE", warn_list


def load_audio(path: str) -> AudioBuffer:
    """
    Load an audio file as an interleaved float64 buffer.

    Uses soundfile (WAV, FLAC, AIFF, OGG, ...) and falls back to ffmpeg
    when soundfile cannot decode the file and ffmpeg is installed.
    """
    if not os.path.isfile(path):
        raise FileNotFoundError(path)
    warnings_list: list[str] = []
    backend = "soundfile"
    try:
        data, fs, desc, warn_list = _decode_soundfile(path)
        warnings_list.extend(warn_list)
    except Exception as exc:
        warnings_list.append(f"soundfile decode failed: {exc}")
        backend = "ffmpeg"
        try:
            data, fs, desc, warn_list = _decode_ffmpeg(path)
        except RuntimeError as ff_exc:
            raise ValueError(f"unsupported or unreadable audio file {path}: {exc}") from ff_exc
        warnings_list.extend(warn_list)

    if fs <= 0:
        raise ValueError(f"invalid sample rate {fs} in {path}.")
    samples, frames, channels = _interleave_frames(data)
    return AudioBuffer(
        samples=samples,
        fs=int(fs),
        channels=channels,
        frames=frames,
        backend=backend,
        format_desc=desc,
        warnings=warnings_list
    )


def describe(path: str, audio: AudioBuffer) -> str:
    """One-line description of a decoded file."""
    return (
        f"{path} - frames: {audio.frames}, samplerate: {audio.fs}, "
        f"channels: {audio.channels}, {audio.format_desc}"
    )
