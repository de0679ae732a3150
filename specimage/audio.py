import logging
import subprocess
from pathlib import Path
from typing import Union

import librosa
import numpy as np
import soundfile as sf

from .config import DECODER, SAMPLE_RATE, THREADS
from .errors import ConfigurationError, DecodeError

log = logging.getLogger(__name__)

PathLike = Union[str, Path]

DECODERS = ("ffmpeg", "soundfile")


def samples_from_file(path: PathLike, sample_rate: int = SAMPLE_RATE, threads: int = THREADS) -> np.ndarray:
    """
    Decode any ffmpeg-readable file to mono float32 PCM.

    Args:
        path: audio source file
        sample_rate: target sample rate in Hz
        threads: ffmpeg thread count

    Returns:
        1D float32 array, values in [-1, 1]
    """
    path = Path(path)
    if not path.exists():
        raise DecodeError(f"audio source not found: {path}")

    cmd = [
        "ffmpeg",
        "-hide_banner",
        "-loglevel", "error",
        "-nostdin",
        "-i", str(path),
        "-ac", "1",
        "-ar", str(sample_rate),
        "-f", "f32le",
        "-threads", str(threads),
        "-",  # raw output via stdout
    ]
    log.debug(f"Running: {' '.join(cmd)}")

    try:
        result = subprocess.run(cmd, capture_output=True)
    except OSError as exc:
        raise DecodeError(f"cannot run ffmpeg: {exc}") from exc

    if result.returncode != 0:
        stderr = result.stderr.decode(errors="replace").strip()
        raise DecodeError(f"ffmpeg failed with exit status {result.returncode}: {stderr}")

    buff = result.stdout
    if len(buff) % 4 != 0:
        raise DecodeError(f"ffmpeg output is {len(buff)} bytes, not a multiple of 4")

    return np.frombuffer(buff, dtype="<f4").astype(np.float32)


def load_audio(path: PathLike, sample_rate: int = SAMPLE_RATE) -> np.ndarray:
    """Decode with libsndfile instead of ffmpeg; downmix and resample with librosa."""
    path = Path(path)
    if not path.exists():
        raise DecodeError(f"audio source not found: {path}")

    try:
        signal, sr = sf.read(path, dtype="float32")
    except RuntimeError as exc:  # sf.LibsndfileError
        raise DecodeError(f"cannot decode {path}: {exc}") from exc

    signal = np.asarray(signal)
    if signal.ndim > 1:
        # signal is (num_samples, num_channels); librosa wants (channels, samples)
        signal = librosa.to_mono(signal.T)

    if sr != sample_rate:
        signal = librosa.resample(signal, orig_sr=sr, target_sr=sample_rate)

    return signal.astype(np.float32)


def decode(path: PathLike, sample_rate: int = SAMPLE_RATE, threads: int = THREADS,
           decoder: str = DECODER) -> np.ndarray:
    """
    Decode audio with the selected decoder.

    Args:
        path: audio source file
        sample_rate: target sample rate in Hz
        threads: thread hint, only used by ffmpeg
        decoder: One of:
            - 'ffmpeg': external ffmpeg process (default, any container/codec)
            - 'soundfile': in-process libsndfile (wav, flac, ogg, mp3 with libsndfile >= 1.1)
    """
    if decoder == "ffmpeg":
        samples = samples_from_file(path, sample_rate, threads)
    elif decoder == "soundfile":
        samples = load_audio(path, sample_rate)
    else:
        raise ConfigurationError(f"Unknown decoder: {decoder}. Choose from {list(DECODERS)}")

    log.debug(f"Decoded {len(samples)} samples ({len(samples) / sample_rate:.2f}s) from {path}")
    return samples
