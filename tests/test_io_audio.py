from __future__ import annotations

from types import SimpleNamespace

import numpy as np
import pytest

import dbhist.io.audio as audio_mod
from dbhist.io.audio import describe, libsndfile_version, load_audio
from tests.conftest import write_wav


def test_load_audio_interleaved(tmp_path):
    fs = 8000
    t = np.arange(0, 0.05, 1.0 / fs)
    mono = 0.25 * np.sin(2.0 * np.pi * 440.0 * t)
    stereo = np.stack([mono, -0.5 * mono], axis=1)
    path = write_wav(tmp_path, stereo, fs)

    audio = load_audio(str(path))
    assert audio.channels == 2
    assert audio.fs == fs
    assert audio.frames == stereo.shape[0]
    assert audio.backend == "soundfile"
    assert np.allclose(audio.samples, stereo.ravel(), atol=1e-7)
    assert "WAV" in audio.format_desc


def test_load_audio_mono(tmp_path):
    path = write_wav(tmp_path, np.array([0.5, -0.5, 0.25]), 400)
    audio = load_audio(str(path))
    assert audio.channels == 1
    assert np.allclose(audio.samples, [0.5, -0.5, 0.25])
    line = describe(str(path), audio)
    assert "frames: 3" in line
    assert "samplerate: 400" in line


def test_load_audio_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_audio(str(tmp_path / "missing.wav"))


def test_libsndfile_version():
    assert libsndfile_version().startswith("libsndfile-")


def _fail_soundfile(path):
    raise RuntimeError("soundfile cannot decode this")


def test_load_audio_without_ffmpeg_is_unsupported(tmp_path, monkeypatch):
    path = tmp_path / "clip.xyz"
    path.write_bytes(b"\x00" * 16)
    monkeypatch.setattr(audio_mod, "_decode_soundfile", _fail_soundfile)
    monkeypatch.setattr(audio_mod.shutil, "which", lambda name: None)

    with pytest.raises(ValueError, match="unsupported or unreadable"):
        load_audio(str(path))


def test_load_audio_falls_back_to_ffmpeg(tmp_path, monkeypatch):
    path = tmp_path / "clip.mp3"
    path.write_bytes(b"\x00" * 16)
    frames = np.array([[0.1, -0.1], [0.2, -0.2], [0.3, -0.3]])
    monkeypatch.setattr(audio_mod, "_decode_soundfile", _fail_soundfile)
    monkeypatch.setattr(
        audio_mod,
        "_decode_ffmpeg",
        lambda p: (frames, 44100, "format: mp3, encoding: FLOAT, endian: LITTLE", []),
    )

    audio = load_audio(str(path))
    assert audio.backend == "ffmpeg"
    assert audio.channels == 2
    assert audio.frames == 3
    assert audio.fs == 44100
    assert np.allclose(audio.samples, [0.1, -0.1, 0.2, -0.2, 0.3, -0.3])
    assert any("soundfile decode failed" in w for w in audio.warnings)


def test_decode_ffmpeg_trims_partial_frame(monkeypatch):
    pcm = np.array([0.5, -0.5, 0.25, -0.25, 0.125], dtype=np.float32)
    monkeypatch.setattr(audio_mod.shutil, "which", lambda name: "/usr/bin/" + name)
    monkeypatch.setattr(audio_mod, "_ffprobe_info", lambda p: (8000, 2, "mp3"))
    monkeypatch.setattr(
        audio_mod.subprocess,
        "run",
        lambda cmd, **kwargs: SimpleNamespace(returncode=0, stdout=pcm.tobytes(), stderr=b""),
    )

    data, fs, desc, warnings = audio_mod._decode_ffmpeg("clip.mp3")
    assert fs == 8000
    assert data.shape == (2, 2)
    assert data.dtype == np.float64
    assert np.allclose(data, [[0.5, -0.5], [0.25, -0.25]])
    assert "format: mp3" in desc
    assert any("trimmed partial frame" in w for w in warnings)


def test_decode_ffmpeg_failure_raises(monkeypatch):
    monkeypatch.setattr(audio_mod.shutil, "which", lambda name: "/usr/bin/" + name)
    monkeypatch.setattr(audio_mod, "_ffprobe_info", lambda p: (8000, 1, "mp3"))
    monkeypatch.setattr(
        audio_mod.subprocess,
        "run",
        lambda cmd, **kwargs: SimpleNamespace(returncode=1, stdout=b"", stderr=b"bad input"),
    )

    with pytest.raises(ValueError, match="ffmpeg decode failed"):
        audio_mod._decode_ffmpeg("clip.mp3")
