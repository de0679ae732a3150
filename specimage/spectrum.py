import logging
from typing import Optional

import numpy as np

from .config import SILENCE_EPS
from .errors import InsufficientDataError, InvalidSignalError, SilenceError
from .fft import FFTBackend, NumpyBackend

log = logging.getLogger(__name__)


def window_width(sample_rate: int, frame_divisor: int) -> int:
    return sample_rate // frame_divisor


def nyquist_bins(width: int) -> int:
    """Non-mirrored half of a real-input spectrum. A 1-sample window keeps its single bin."""
    return width // 2 or width


def extract_spectrum(samples, sample_rate: int, frame_divisor: int,
                     backend: Optional[FFTBackend] = None) -> np.ndarray:
    """
    Magnitude spectrum of consecutive, non-overlapping windows.

    Rectangular windowing: no Hann/Hamming taper is applied, and a trailing
    partial window is dropped rather than zero-padded.

    Args:
        samples: 1D mono PCM, float
        sample_rate: Sample rate in Hz
        frame_divisor: window width = sample_rate // frame_divisor
        backend: FFT implementation (numpy by default)

    Returns:
        float32 array of shape (n_windows, nyquist_bins), time-major
    """
    backend = backend or NumpyBackend()
    samples = np.asarray(samples, dtype=np.float32).ravel()

    width = window_width(sample_rate, frame_divisor)
    n_windows = len(samples) // width if width > 0 else 0
    if n_windows == 0:
        raise InsufficientDataError(
            f"insufficient audio data: {len(samples)} samples, one window needs {width}"
        )

    frames = samples[:n_windows * width].reshape(n_windows, width)

    # real part = sample, imaginary part = 0
    buff = np.zeros((n_windows, width), dtype=np.complex64)
    buff.real = frames

    spectrum = backend.transform(buff, width)
    bins = nyquist_bins(width)
    magnitudes = np.abs(spectrum[:, :bins]).astype(np.float32)

    log.debug(f"Extracted {n_windows} windows x {bins} bins "
              f"(width={width}, dropped {len(samples) - n_windows * width} samples)")
    return magnitudes


def normalize(spectrogram: np.ndarray, eps: float = SILENCE_EPS) -> np.ndarray:
    """
    Scale the whole matrix by its global maximum so values land in [0, 1].

    Raises SilenceError when the maximum is at or below `eps`, and
    InvalidSignalError when it is inf or NaN.
    """
    spectrogram = np.asarray(spectrogram, dtype=np.float32)
    peak = float(spectrogram.max()) if spectrogram.size else 0.0

    if not np.isfinite(peak):
        raise InvalidSignalError(f"non-finite spectrum: peak magnitude {peak}, input contains inf or NaN samples")
    if peak <= eps:
        raise SilenceError(f"insufficient signal energy: peak magnitude {peak:.3e} <= {eps:.3e}")

    normalized = spectrogram / np.float32(peak)
    # magnitudes are non-negative; clip only guards the post-condition against rounding
    np.clip(normalized, 0.0, 1.0, out=normalized)
    return normalized
