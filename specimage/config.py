# ---------- CONFIG ---------- #

import dataclasses
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Tuple, Union

import numpy as np
import yaml

from .errors import ConfigurationError
from .fft import BACKENDS

SAMPLE_RATE = 44100
FRAME_DIVISOR = 32   # window width = SAMPLE_RATE / FRAME_DIVISOR -> 1378 samples (~31 ms)
DOWNSAMPLE = 32      # frequency bins averaged into one pixel column
GAMMA = 0.2          # x ** 0.2 lifts the quiet bins, most energy sits near 0 after normalization
THREADS = 16         # forwarded to ffmpeg only
OUTPUT_PATH = "a.png"
FFT_BACKEND = "numpy"
DECODER = "ffmpeg"

SILENCE_EPS = float(np.finfo(np.float32).eps)

RGB = Tuple[int, int, int]

# deep navy -> indigo -> bright blue -> orange -> soft yellow
DEFAULT_PALETTE: Tuple[RGB, ...] = (
    (8, 12, 48),
    (58, 28, 120),
    (40, 120, 255),
    (255, 140, 40),
    (255, 240, 150),
)

PALETTES: Dict[str, Tuple[RGB, ...]] = {
    "ocean": DEFAULT_PALETTE,
    "amber": ((0, 0, 0), (255, 255, 0)),
    "gray": ((0, 0, 0), (255, 255, 255)),
}


def resolve_palette(palette: Union[str, Sequence[Sequence[int]]]) -> Tuple[RGB, ...]:
    """Accept a palette name or a list of RGB stops; return validated stops."""
    if isinstance(palette, str):
        if palette not in PALETTES:
            raise ConfigurationError(f"Unknown palette: {palette}. Choose from {list(PALETTES.keys())}")
        return PALETTES[palette]

    try:
        stops = tuple(tuple(int(c) for c in stop) for stop in palette)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"palette must be a list of RGB triples, got {palette!r}") from exc

    if len(stops) < 2:
        raise ConfigurationError("palette needs at least two color stops")
    for stop in stops:
        if len(stop) != 3 or any(c < 0 or c > 255 for c in stop):
            raise ConfigurationError(f"invalid palette stop {stop}, expected three values in 0..255")
    return stops


@dataclass(frozen=True)
class SpectrogramConfig:
    """
    Validated engine parameters, built once and never mutated.

    Attributes:
        sample_rate: PCM rate in Hz the decoder resamples to
        frame_divisor: window width is sample_rate // frame_divisor samples
        downsample: number of frequency bins averaged into one pixel column
        gamma: exponent applied before palette interpolation
        palette: RGB control stops, low energy first
        backend: name of the FFT backend (see specimage.fft.BACKENDS)
    """
    sample_rate: int = SAMPLE_RATE
    frame_divisor: int = FRAME_DIVISOR
    downsample: int = DOWNSAMPLE
    gamma: float = GAMMA
    palette: Tuple[RGB, ...] = field(default=DEFAULT_PALETTE)
    backend: str = FFT_BACKEND

    def __post_init__(self):
        for name in ("sample_rate", "frame_divisor", "downsample"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
                raise ConfigurationError(f"{name} must be an integer, got {value!r}")

        if self.sample_rate <= 0:
            raise ConfigurationError(f"sample_rate must be positive, got {self.sample_rate}")
        if self.frame_divisor <= 0:
            raise ConfigurationError(f"frame_divisor must be positive, got {self.frame_divisor}")
        if self.frame_divisor > self.sample_rate:
            raise ConfigurationError(
                f"frame_divisor ({self.frame_divisor}) cannot exceed sample_rate ({self.sample_rate})"
            )
        if self.downsample <= 0:
            raise ConfigurationError(f"downsample must be positive, got {self.downsample}")
        try:
            gamma = float(self.gamma)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"gamma must be a number, got {self.gamma!r}") from exc
        if not math.isfinite(gamma) or gamma <= 0:
            raise ConfigurationError(f"gamma must be a positive finite number, got {self.gamma}")
        if self.backend not in BACKENDS:
            raise ConfigurationError(f"Unknown FFT backend: {self.backend}. Choose from {list(BACKENDS)}")

        # frozen: bypass __setattr__ to store the normalized values
        object.__setattr__(self, "gamma", gamma)
        object.__setattr__(self, "palette", resolve_palette(self.palette))

    @property
    def window_width(self) -> int:
        return self.sample_rate // self.frame_divisor

    @property
    def nyquist_bins(self) -> int:
        return self.window_width // 2 or self.window_width

    def output_width(self, bins: Optional[int] = None) -> int:
        """Pixel columns produced for `bins` frequency bins (defaults to nyquist_bins)."""
        bins = self.nyquist_bins if bins is None else bins
        return -(-bins // self.downsample)

    def replace(self, **changes) -> "SpectrogramConfig":
        return dataclasses.replace(self, **changes)

    @classmethod
    def from_yaml(cls, path: Union[str, Path], **overrides: Any) -> "SpectrogramConfig":
        """
        Build a config from a YAML mapping, then apply keyword overrides.

        Overrides set to None are ignored so argparse defaults can be passed straight through.
        """
        try:
            with open(path, "r") as f:
                data = yaml.safe_load(f) or {}
        except OSError as exc:
            raise ConfigurationError(f"cannot read config {path}: {exc}") from exc
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"invalid YAML in {path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ConfigurationError(f"config {path} must contain a mapping, got {type(data).__name__}")

        data.update({k: v for k, v in overrides.items() if v is not None})
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SpectrogramConfig":
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(f"unknown config keys: {unknown}")
        return cls(**data)
