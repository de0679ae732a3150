"""
Forward FFT backends.

The spectrum extractor only talks to `FFTBackend.transform`, so the numeric library
can be swapped without touching the pipeline.
"""

from abc import ABC, abstractmethod

import numpy as np
import scipy.fft

from .errors import ConfigurationError


class FFTBackend(ABC):
    """
    Abstract forward complex FFT.

    Implementations take a complex buffer of shape (..., size) and return its
    discrete Fourier transform along the last axis, same shape.
    """

    @abstractmethod
    def transform(self, buffer: np.ndarray, size: int) -> np.ndarray:
        """
        Args:
            buffer: complex array, last axis holds one window of `size` samples
            size: transform length

        Returns:
            Complex spectrum with the same shape as `buffer`
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the name of this backend."""
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class NumpyBackend(FFTBackend):

    @property
    def name(self) -> str:
        return "numpy"

    def transform(self, buffer, size):
        return np.fft.fft(buffer, n=size, axis=-1)


class ScipyBackend(FFTBackend):
    """scipy.fft with overwrite_x, the input buffer may be reused for the output."""

    @property
    def name(self) -> str:
        return "scipy"

    def transform(self, buffer, size):
        return scipy.fft.fft(buffer, n=size, axis=-1, overwrite_x=True)


class TorchBackend(FFTBackend):
    """torch.fft on CPU. Needs the optional `torch` extra."""

    def __init__(self):
        try:
            import torch
        except ImportError as exc:
            raise ConfigurationError(
                "FFT backend 'torch' requires PyTorch: pip install 'specimage[torch]'"
            ) from exc
        self._torch = torch

    @property
    def name(self) -> str:
        return "torch"

    def transform(self, buffer, size):
        x = self._torch.from_numpy(np.ascontiguousarray(buffer))
        return self._torch.fft.fft(x, n=size, dim=-1).numpy()


_STRATEGIES = {
    'numpy': NumpyBackend,
    'scipy': ScipyBackend,
    'torch': TorchBackend,
}

BACKENDS = tuple(_STRATEGIES)


def get_backend(name: str = 'numpy') -> FFTBackend:
    """
    Instantiate an FFT backend by name.

    Args:
        name: One of:
            - 'numpy': numpy.fft (default)
            - 'scipy': scipy.fft, transforms in place where possible
            - 'torch': torch.fft, optional dependency
    """
    if name not in _STRATEGIES:
        raise ConfigurationError(f"Unknown FFT backend: {name}. Choose from {list(_STRATEGIES.keys())}")
    return _STRATEGIES[name]()
