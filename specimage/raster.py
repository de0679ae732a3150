import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Dict, Optional, Sequence

import numpy as np

from .colors import map_colors
from .config import GAMMA, DEFAULT_PALETTE, RGB, SpectrogramConfig
from .fft import get_backend
from .spectrum import extract_spectrum, normalize

log = logging.getLogger(__name__)


class Timer:
    """Context manager for timing pipeline stages; results go to the debug log."""

    def __init__(self):
        self.timings: Dict[str, float] = {}

    @contextmanager
    def measure(self, label: str):
        start = time.perf_counter()
        yield
        elapsed = time.perf_counter() - start
        self.timings[label] = elapsed
        log.debug(f"{label}: {elapsed:.4f}s")

    @property
    def total(self) -> float:
        return sum(self.timings.values())


@dataclass(frozen=True)
class Raster:
    """Flat RGB pixel buffer, row-major, row 0 = earliest window, column 0 = lowest band."""
    width: int
    height: int
    pixels: bytes

    def as_array(self) -> np.ndarray:
        return np.frombuffer(self.pixels, dtype=np.uint8).reshape(self.height, self.width, 3)


def downsample_bands(spectrogram: np.ndarray, factor: int) -> np.ndarray:
    """
    Average each row over consecutive groups of `factor` bins.

    The last group is shorter when the bin count is not a multiple of `factor`.
    Returns an array of shape (n_windows, ceil(n_bins / factor)).
    """
    spectrogram = np.asarray(spectrogram, dtype=np.float32)
    n_bins = spectrogram.shape[1]

    starts = np.arange(0, n_bins, factor)
    counts = np.diff(np.append(starts, n_bins))
    sums = np.add.reduceat(spectrogram.astype(np.float64), starts, axis=1)
    return (sums / counts).astype(np.float32)


def rasterize(normalized: np.ndarray, downsample: int, gamma: float = GAMMA,
              palette: Sequence[RGB] = DEFAULT_PALETTE) -> Raster:
    """Turn a normalized (windows x bins) matrix into an RGB raster, one row per window."""
    bands = downsample_bands(normalized, downsample)
    height, width = bands.shape
    rgb = map_colors(bands, gamma=gamma, palette=palette)

    pixels = rgb.tobytes()
    assert len(pixels) == width * height * 3
    return Raster(width=width, height=height, pixels=pixels)


class Rasterizer:
    """
    Runs the whole engine for one sample sequence:
    extract spectrum -> normalize -> downsample and color map.
    """

    def __init__(self, config: Optional[SpectrogramConfig] = None):
        self.config = config or SpectrogramConfig()
        self.backend = get_backend(self.config.backend)
        self.timer = Timer()

    @property
    def timings(self) -> Dict[str, float]:
        return self.timer.timings

    def analyze(self, samples) -> np.ndarray:
        """Spectrum extraction and normalization only."""
        cfg = self.config
        with self.timer.measure("Extract spectrum"):
            spectrogram = extract_spectrum(samples, cfg.sample_rate, cfg.frame_divisor, backend=self.backend)

        with self.timer.measure("Normalize"):
            return normalize(spectrogram)

    def rasterize(self, normalized: np.ndarray) -> Raster:
        cfg = self.config
        with self.timer.measure("Rasterize"):
            return rasterize(normalized, cfg.downsample, gamma=cfg.gamma, palette=cfg.palette)

    def render(self, samples, return_normalized: bool = False):
        """
        Run the full pipeline on one sample sequence.

        Args:
            samples: mono PCM
            return_normalized: also return the normalized (windows x bins) matrix

        Returns:
            Raster, or (Raster, normalized matrix) when return_normalized is set
        """
        self.timer = Timer()
        normalized = self.analyze(samples)
        raster = self.rasterize(normalized)
        log.debug(f"Spectrogram {raster.width}x{raster.height} in {self.timer.total:.4f}s")
        if return_normalized:
            return raster, normalized
        return raster
