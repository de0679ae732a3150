import logging
import sys

from wcwidth import wcswidth

LOGGER_NAME = "specimage"


class PrettyFormatter(logging.Formatter):
    """Colored level names with an icon, one line per record."""

    COLORS = {
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
    }
    RESET = '\033[0m'
    BOLD = '\033[1m'

    ICONS = {
        'DEBUG': '🔍',
        'INFO': '✅',
        'WARNING': '⚠️ ',
        'ERROR': '❌',
        'CRITICAL': '🔥',
    }

    def format(self, record):
        color = self.COLORS.get(record.levelname, self.RESET)
        icon = self.ICONS.get(record.levelname, '')
        timestamp = self.formatTime(record, "%Y-%m-%d %H:%M:%S")

        return (
            f"{self.BOLD}[{timestamp}]{self.RESET} "
            f"{color}{icon} {record.levelname:<8}{self.RESET} │ "
            f"{record.getMessage()}"
        )


def setup_logging(debug: bool = False, stream=None) -> logging.Logger:
    """Attach a PrettyFormatter handler to the package logger. Safe to call more than once."""
    logger = logging.getLogger(LOGGER_NAME)
    level = logging.DEBUG if debug else logging.INFO
    logger.setLevel(level)

    for handler in list(logger.handlers):
        if getattr(handler, "_specimage", False):
            logger.removeHandler(handler)

    console_handler = logging.StreamHandler(stream or sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(PrettyFormatter())
    console_handler._specimage = True

    logger.addHandler(console_handler)
    return logger


def _center_display(s: str, target_cols: int) -> str:
    """Center using terminal display width (handles emoji/double-width chars)."""
    w = wcswidth(s)
    if w < 0:
        w = len(s)  # non-printable characters

    if w >= target_cols:
        return s

    pad = target_cols - w
    left = pad // 2
    right = pad - left
    return (" " * left) + s + (" " * right)


def format_section(title: str, width: int = 50) -> str:
    border = "═" * width
    centered = _center_display(title, width - 2)
    return (
        f"\033[1;34m╔{border}╗\033[0m\n"
        f"\033[1;34m║\033[0m {centered} \033[1;34m║\033[0m\n"
        f"\033[1;34m╚{border}╝\033[0m"
    )


def log_section(logger: logging.Logger, title: str):
    """Log a boxed section header."""
    logger.info("\n" + format_section(title))


def log_step(logger: logging.Logger, step_num: int, description: str):
    logger.info(f"\033[1;36m[Step {step_num}]\033[0m ➜  {description}")


def log_detail(logger: logging.Logger, key: str, value):
    logger.info(f"    \033[90m•\033[0m {key}: \033[1m{value}\033[0m")
