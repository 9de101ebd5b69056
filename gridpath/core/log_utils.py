# gridpath/core/log_utils.py
#!/usr/bin/env python3
"""Console logging for gridpath; module loggers live under ``gridpath.*``."""

import logging

_COLORS = {
    logging.DEBUG: "\033[96m",     # cyan
    logging.INFO: "\033[92m",      # green
    logging.WARNING: "\033[93m",   # yellow
    logging.ERROR: "\033[91m",     # red
    logging.CRITICAL: "\033[91m",
}
_RESET = "\033[0m"


class ColorFormatter(logging.Formatter):
    def __init__(self, use_color: bool = False):
        super().__init__("%(levelname)-7s %(name)s: %(message)s")
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        if not self.use_color:
            return text
        return f"{_COLORS.get(record.levelno, '')}{text}{_RESET}"


def setup_logging(level="WARNING", color_logs: bool = False) -> logging.Logger:
    """Install one console handler on the ``gridpath`` logger."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING
    logger = logging.getLogger("gridpath")
    for h in logger.handlers[:]:
        logger.removeHandler(h)
        h.close()
    handler = logging.StreamHandler()
    handler.setFormatter(ColorFormatter(use_color=color_logs))
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger
