#!/usr/bin/env python3
"""
Render an audio file (or a folder of them) as a spectrogram image.

Usage:
    specimage -i song.mp3 -o song.png
    specimage -i song.flac -o song.png --sample-rate 22050 --downsample 16 --palette amber
    specimage -i ~/music --pattern "*.flac" -o ./spectrograms --n-jobs 4
"""

import argparse
import sys
from pathlib import Path

from .audio import DECODERS
from .config import DECODER, OUTPUT_PATH, PALETTES, THREADS, SpectrogramConfig
from .errors import SpectrogramError
from .fft import BACKENDS
from .logging_utils import log_detail, log_section, log_step, setup_logging
from .renderer import SpectrogramRenderer


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='specimage', description='Audio to spectrogram image')
    parser.add_argument('--input', '-i', type=str, required=True,
                        help='Audio file, or a folder to render every match of --pattern')
    parser.add_argument('--output', '-o', type=str, default=None,
                        help=f'Output image (default: {OUTPUT_PATH}) or directory for folders')
    parser.add_argument('--sample-rate', '-r', type=int, default=None,
                        help='Decode sample rate in Hz (default: 44100)')
    parser.add_argument('--frame-divisor', '-f', type=int, default=None,
                        help='Window width = sample_rate / divisor (default: 32)')
    parser.add_argument('--downsample', '-d', type=int, default=None,
                        help='Frequency bins per pixel column (default: 32)')
    parser.add_argument('--gamma', '-g', type=float, default=None,
                        help='Gamma exponent before color mapping (default: 0.2)')
    parser.add_argument('--palette', '-p', choices=list(PALETTES), default=None,
                        help='Color palette (default: ocean)')
    parser.add_argument('--backend', choices=list(BACKENDS), default=None,
                        help='FFT backend (default: numpy)')
    parser.add_argument('--config', '-c', type=str, default=None,
                        help='YAML file with engine settings; flags override it')
    parser.add_argument('--jobs', '-j', type=int, default=THREADS,
                        help='Thread hint passed to ffmpeg')
    parser.add_argument('--decoder', choices=list(DECODERS), default=DECODER)
    parser.add_argument('--pattern', type=str, default='*.mp3',
                        help='Glob pattern when --input is a folder')
    parser.add_argument('--n-jobs', type=int, default=1,
                        help='Files rendered in parallel when --input is a folder')
    parser.add_argument('--plot', type=str, default=None,
                        help='Also save a labelled matplotlib preview to this path')
    parser.add_argument('--debug', action='store_true', help='Log stage timings')
    return parser


def build_config(args: argparse.Namespace) -> SpectrogramConfig:
    overrides = {
        'sample_rate': args.sample_rate,
        'frame_divisor': args.frame_divisor,
        'downsample': args.downsample,
        'gamma': args.gamma,
        'palette': args.palette,
        'backend': args.backend,
    }
    if args.config:
        return SpectrogramConfig.from_yaml(args.config, **overrides)
    return SpectrogramConfig(**{k: v for k, v in overrides.items() if v is not None})


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    log = setup_logging(debug=args.debug)

    try:
        cfg = build_config(args)
        renderer = SpectrogramRenderer(cfg, threads=args.jobs, decoder=args.decoder)
        input_path = Path(args.input).expanduser()

        log_section(log, "🎵 specimage")
        log_step(log, 1, "Configuration")
        log_detail(log, "Input", input_path)
        log_detail(log, "Window", f"{cfg.window_width} samples, {cfg.nyquist_bins} bins")
        log_detail(log, "Image width", f"{cfg.output_width()} px")

        if input_path.is_dir():
            log_step(log, 2, f"Rendering folder (pattern {args.pattern})")
            output_dir = Path(args.output or 'spectrograms').expanduser()
            count = renderer.render_folder(input_path, output_dir, pattern=args.pattern, n_jobs=args.n_jobs)
            log.info(f"Rendered {count} files to {output_dir}")
        else:
            log_step(log, 2, "Rendering file")
            renderer.render_file(input_path, Path(args.output or OUTPUT_PATH).expanduser(),
                                 plot_path=args.plot)
    except SpectrogramError as e:
        log.error(f"{type(e).__name__}: {e}")
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
