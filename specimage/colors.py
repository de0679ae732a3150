"""
Gamma correction and piecewise-linear palette interpolation.

map_color is the reference scalar version; map_colors does the same arithmetic on
whole numpy arrays and is what the rasterizer uses.
"""

import math
from typing import Sequence, Tuple

import numpy as np

from .config import DEFAULT_PALETTE, GAMMA, RGB, resolve_palette


def as_palette(stops) -> np.ndarray:
    """Validate palette stops (or a palette name) and return them as a (n, 3) float array."""
    return np.asarray(resolve_palette(stops), dtype=np.float64)


def map_color(value: float, gamma: float = GAMMA,
              palette: Sequence[RGB] = DEFAULT_PALETTE) -> Tuple[int, int, int]:
    """
    Map a normalized intensity to an RGB triple.

    0.0 maps exactly to palette[0] and 1.0 exactly to palette[-1]; in between the
    color moves linearly along each palette segment, so there are no jumps at the
    segment boundaries.
    """
    segments = len(palette) - 1
    v = min(max(float(value), 0.0), 1.0) ** gamma

    scaled = v * segments
    idx = min(int(math.floor(scaled)), segments - 1)
    frac = scaled - idx

    lo, hi = palette[idx], palette[idx + 1]
    return tuple(
        min(max(int(round(lo[c] + frac * (hi[c] - lo[c]))), 0), 255)
        for c in range(3)
    )


def map_colors(values, gamma: float = GAMMA, palette: Sequence[RGB] = DEFAULT_PALETTE) -> np.ndarray:
    """
    Vectorized map_color.

    Args:
        values: array of normalized intensities, any shape
        gamma: exponent applied after clamping to [0, 1]
        palette: RGB stops

    Returns:
        uint8 array of shape values.shape + (3,)
    """
    stops = as_palette(palette)
    segments = len(stops) - 1

    v = np.clip(np.asarray(values, dtype=np.float64), 0.0, 1.0) ** gamma
    scaled = v * segments
    idx = np.minimum(np.floor(scaled).astype(np.intp), segments - 1)
    frac = (scaled - idx)[..., np.newaxis]

    lo = stops[idx]
    hi = stops[idx + 1]
    # np.rint and round() both round half to even
    rgb = np.rint(lo + frac * (hi - lo))
    return np.clip(rgb, 0, 255).astype(np.uint8)
