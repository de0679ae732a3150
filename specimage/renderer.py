"""
File-level glue: decode an audio file, run the engine, write the image.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from joblib import Parallel, delayed
from tqdm import tqdm

from .audio import decode
from .config import DECODER, THREADS, SpectrogramConfig
from .errors import ConfigurationError, SpectrogramError
from .image import plot_spectrogram_and_save, save_rgb_image
from .raster import Raster, Rasterizer

log = logging.getLogger(__name__)

PathLike = Union[str, Path]


class SpectrogramRenderer:
    """
    Audio file -> spectrogram PNG.

    Holds only configuration; every call to render_file is an independent run.
    """

    def __init__(self, config: Optional[SpectrogramConfig] = None, threads: int = THREADS,
                 decoder: str = DECODER):
        """
        Args:
            config: engine parameters (defaults: 44.1 kHz, divisor 32, downsample 32)
            threads: thread hint forwarded to the decoder
            decoder: 'ffmpeg' or 'soundfile'
        """
        self.config = config or SpectrogramConfig()
        self.threads = threads
        self.decoder = decoder

    def render_file(self, input_path: Optional[PathLike], output_path: PathLike,
                    plot_path: Optional[PathLike] = None) -> Raster:
        if not input_path:
            raise ConfigurationError("Need input path")

        rasterizer = Rasterizer(self.config)
        samples = decode(input_path, self.config.sample_rate, self.threads, decoder=self.decoder)

        raster, normalized = rasterizer.render(samples, return_normalized=True)
        save_rgb_image(output_path, raster.width, raster.height, raster.pixels)

        if plot_path is not None:
            plot_spectrogram_and_save(normalized, self.config, plot_path)

        for label, elapsed in rasterizer.timings.items():
            log.debug(f"  {label}: {elapsed:.4f}s")
        log.info(f"Wrote {raster.width}x{raster.height} spectrogram to {output_path}")
        return raster

    def _render_one(self, audio_path: Path, output_dir: Path) -> bool:
        try:
            self.render_file(audio_path, output_dir / f"{audio_path.stem}.png")
        except SpectrogramError as e:
            log.error(f"Error {audio_path.name}: {e}")
            return False
        return True

    def render_folder(self, folder: PathLike, output_dir: PathLike, pattern: str = "*.mp3",
                      n_jobs: int = 1) -> int:
        """
        Render every file in `folder` matching `pattern` to `<output_dir>/<stem>.png`.

        Files that fail are logged and skipped.

        Args:
            folder: directory searched recursively
            output_dir: created if missing
            pattern: glob pattern for audio files
            n_jobs: parallel files (joblib); 1 renders sequentially

        Returns:
            Number of images written
        """
        folder = Path(folder)
        output_dir = Path(output_dir)
        if not folder.is_dir():
            raise ConfigurationError(f"Folder not found: {folder}")

        audio_paths = sorted(folder.rglob(pattern))
        log.info(f"Found {len(audio_paths)} audio files")
        output_dir.mkdir(parents=True, exist_ok=True)

        if n_jobs == 1:
            results = [
                self._render_one(p, output_dir)
                for p in tqdm(audio_paths, desc="Rendering", unit="file")
            ]
        else:
            # results arrive as files finish, so the bar tracks completion
            jobs = Parallel(n_jobs=n_jobs, return_as="generator")(
                delayed(self._render_one)(p, output_dir) for p in audio_paths
            )
            results = list(tqdm(jobs, total=len(audio_paths), desc="Rendering", unit="file"))

        return sum(results)
