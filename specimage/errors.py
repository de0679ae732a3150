"""
Exceptions raised by the spectrogram pipeline.

Every stage fails fast with one of these; none of them are recovered internally.
"""


class SpectrogramError(Exception):
    """Base class for all pipeline failures."""


class ConfigurationError(SpectrogramError, ValueError):
    """Invalid or missing parameters, detected before the pipeline runs."""


class DecodeError(SpectrogramError):
    """The audio decoder could not produce PCM samples."""


class InsufficientDataError(SpectrogramError):
    """Fewer samples than one full analysis window."""


class SilenceError(SpectrogramError):
    """Peak magnitude at or below epsilon, nothing to visualize."""


class ImageError(SpectrogramError):
    """Pixel buffer does not match the image dimensions, or writing failed."""


class InvalidSignalError(SpectrogramError):
    """Samples contain inf or NaN, so the spectrum cannot be normalized."""
