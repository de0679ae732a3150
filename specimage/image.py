import logging
from pathlib import Path
from typing import Union

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.colors import LinearSegmentedColormap
from PIL import Image

from .config import SpectrogramConfig
from .errors import ImageError

log = logging.getLogger(__name__)

PathLike = Union[str, Path]


def save_rgb_image(path: PathLike, width: int, height: int, pixels) -> None:
    """
    Save a flat RGB buffer (row-major, 3 bytes per pixel) to disk.

    The format is picked by Pillow from the file extension.

    Args:
        path: destination file path
        width, height: image dimensions in pixels
        pixels: bytes-like or uint8 array, length must be width * height * 3
    """
    data = pixels.astype(np.uint8).tobytes() if isinstance(pixels, np.ndarray) else bytes(pixels)

    expected_len = width * height * 3
    if len(data) != expected_len:
        raise ImageError(
            f"pixel buffer length mismatch: expected {expected_len} bytes "
            f"({width}x{height}x3), got {len(data)}"
        )

    try:
        image = Image.frombytes("RGB", (width, height), data)
        image.save(path)
    except (OSError, ValueError) as exc:
        raise ImageError(f"failed to persist RGB image to {path}: {exc}") from exc

    log.debug(f"Saved {width}x{height} image to {path}")


def plot_spectrogram_and_save(normalized: np.ndarray, config: SpectrogramConfig, output_path: PathLike) -> None:
    """Preview figure with labelled axes: time in seconds, frequency in Hz, palette as colormap."""
    n_windows, n_bins = normalized.shape
    seconds_per_window = config.window_width / config.sample_rate
    hz_per_bin = config.sample_rate / config.window_width

    cmap = LinearSegmentedColormap.from_list(
        "specimage", [tuple(c / 255.0 for c in stop) for stop in config.palette]
    )

    plt.figure(figsize=(10, 4))
    plt.imshow(
        normalized.T ** config.gamma,  # frequency on the y axis
        origin='lower',
        aspect='auto',
        interpolation='nearest',
        cmap=cmap,
        vmin=0.0,
        vmax=1.0,
        extent=[0, n_windows * seconds_per_window, 0, n_bins * hz_per_bin],
    )
    plt.colorbar(label=f'Normalized magnitude ** {config.gamma:g}')
    plt.xlabel('Time (s)')
    plt.ylabel('Frequency (Hz)')
    plt.title('Spectrogram')
    try:
        plt.savefig(output_path)
    except OSError as exc:
        raise ImageError(f"failed to save plot to {output_path}: {exc}") from exc
    finally:
        plt.close()
