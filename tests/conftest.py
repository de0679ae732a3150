import numpy as np
import pytest

from specimage.config import SpectrogramConfig


def _make_sine(freq_hz, sample_rate, seconds, amplitude=0.5):
    t = np.arange(int(sample_rate * seconds)) / sample_rate
    return (amplitude * np.sin(2 * np.pi * freq_hz * t)).astype(np.float32)


@pytest.fixture
def make_sine():
    return _make_sine


@pytest.fixture
def tone_config():
    # 8 kHz, 1000-sample windows, 500 bins -> 125 columns
    return SpectrogramConfig(sample_rate=8000, frame_divisor=8, downsample=4)


@pytest.fixture
def tone():
    # 2 s at 8 kHz = 16000 samples -> 16 windows of 1000
    # 1 kHz lands exactly on bin 125 of every window
    return _make_sine(1000, 8000, 2.0)
