"""
specimage - audio to spectrogram image.

Pipeline:
1. Decode audio to mono float32 PCM (ffmpeg or soundfile)
2. Slice into non-overlapping windows and take the FFT magnitude of each
3. Normalize by the global maximum
4. Average frequency bins into pixel columns, gamma + palette color mapping
5. Write the RGB raster with Pillow
"""

from specimage.config import SpectrogramConfig
from specimage.errors import (ConfigurationError, DecodeError, ImageError, InsufficientDataError,
                              InvalidSignalError, SilenceError, SpectrogramError)
from specimage.raster import Raster, Rasterizer
from specimage.renderer import SpectrogramRenderer

__all__ = [
    'SpectrogramConfig', 'Raster', 'Rasterizer', 'SpectrogramRenderer',
    'SpectrogramError', 'ConfigurationError', 'DecodeError', 'InsufficientDataError',
    'SilenceError', 'InvalidSignalError', 'ImageError',
]
