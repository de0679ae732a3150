import subprocess

import numpy as np
import pytest
import soundfile as sf

from specimage import audio
from specimage.audio import decode, load_audio, samples_from_file
from specimage.errors import ConfigurationError, DecodeError


@pytest.fixture
def audio_file(tmp_path):
    path = tmp_path / "clip.wav"
    path.write_bytes(b"")  # contents are never read by the stubbed ffmpeg
    return path


def fake_ffmpeg(monkeypatch, stdout=b"", returncode=0, stderr=b""):
    calls = []

    def run(cmd, capture_output):
        calls.append(cmd)
        return subprocess.CompletedProcess(cmd, returncode, stdout=stdout, stderr=stderr)

    monkeypatch.setattr(audio.subprocess, "run", run)
    return calls


def test_missing_source(tmp_path):
    with pytest.raises(DecodeError, match="not found"):
        samples_from_file(tmp_path / "non_existent_file.mp3", 8000, 1)


def test_parses_little_endian_floats(monkeypatch, audio_file):
    expected = np.array([0.0, 0.5, -1.0, 0.25], dtype="<f4")
    calls = fake_ffmpeg(monkeypatch, stdout=expected.tobytes())

    samples = samples_from_file(audio_file, 8000, 2)

    assert samples.dtype == np.float32
    assert samples.tolist() == [0.0, 0.5, -1.0, 0.25]
    cmd = calls[0]
    assert cmd[0] == "ffmpeg"
    assert cmd[cmd.index("-ac") + 1] == "1"
    assert cmd[cmd.index("-ar") + 1] == "8000"
    assert cmd[cmd.index("-f") + 1] == "f32le"
    assert cmd[cmd.index("-threads") + 1] == "2"
    assert cmd[cmd.index("-i") + 1] == str(audio_file)
    assert cmd[-1] == "-"


def test_misaligned_output(monkeypatch, audio_file):
    fake_ffmpeg(monkeypatch, stdout=b"\x00" * 7)
    with pytest.raises(DecodeError, match="not a multiple of 4"):
        samples_from_file(audio_file)


def test_ffmpeg_failure_includes_stderr(monkeypatch, audio_file):
    fake_ffmpeg(monkeypatch, returncode=1, stderr=b"Invalid data found when processing input")
    with pytest.raises(DecodeError, match="Invalid data found"):
        samples_from_file(audio_file)


def test_ffmpeg_not_installed(monkeypatch, audio_file):
    def run(cmd, capture_output):
        raise FileNotFoundError(2, "No such file or directory", "ffmpeg")

    monkeypatch.setattr(audio.subprocess, "run", run)
    with pytest.raises(DecodeError, match="cannot run ffmpeg"):
        samples_from_file(audio_file)


def test_load_audio_downmixes_and_resamples(tmp_path):
    path = tmp_path / "stereo.wav"
    left = np.full(16000, 0.5, dtype=np.float32)
    right = np.full(16000, -0.1, dtype=np.float32)
    sf.write(path, np.stack([left, right], axis=1), 16000, subtype="FLOAT")

    same_rate = load_audio(path, 16000)
    assert same_rate.ndim == 1
    assert same_rate.dtype == np.float32
    assert len(same_rate) == 16000
    assert np.allclose(same_rate, 0.2)

    resampled = load_audio(path, 8000)
    assert len(resampled) == 8000


def test_load_audio_rejects_garbage(tmp_path):
    path = tmp_path / "noise.wav"
    path.write_bytes(b"definitely not audio")
    with pytest.raises(DecodeError):
        load_audio(path)


def test_load_audio_missing(tmp_path):
    with pytest.raises(DecodeError):
        load_audio(tmp_path / "missing.flac")


def test_decode_dispatch(monkeypatch, audio_file):
    fake_ffmpeg(monkeypatch, stdout=np.zeros(3, dtype="<f4").tobytes())
    assert len(decode(audio_file, 8000, 1, decoder="ffmpeg")) == 3


def test_decode_unknown_decoder(audio_file):
    with pytest.raises(ConfigurationError, match="Unknown decoder"):
        decode(audio_file, decoder="gstreamer")
