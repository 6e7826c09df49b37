import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional


class ColorFormatter(logging.Formatter):
    """Custom formatter adding colors to levelnames on terminals"""

    COLORS = {
        'DEBUG': '\033[94m',    # Blue
        'INFO': '\033[92m',     # Green
        'WARNING': '\033[93m',  # Yellow
        'ERROR': '\033[91m',    # Red
        'CRITICAL': '\033[95m', # Magenta
        'RESET': '\033[0m'
    }

    def __init__(self, include_timestamp: bool = True, use_colors: Optional[bool] = None):
        self.include_timestamp = include_timestamp
        self.use_colors = use_colors
        if include_timestamp:
            fmt = '%(asctime)s - %(name)s - %(filename)s-%(funcName)s:%(lineno)d - %(levelname)s: %(message)s'
            datefmt = '%Y-%m-%d %H:%M:%S'
        else:
            fmt = '%(levelname)s: %(message)s'
            datefmt = None
        super().__init__(fmt=fmt, datefmt=datefmt)

    def _colors_enabled(self) -> bool:
        if self.use_colors is not None:
            return self.use_colors
        return sys.stderr.isatty()

    def format(self, record):
        orig_levelname = record.levelname
        orig_msg = record.msg

        if self._colors_enabled():
            color = self.COLORS.get(record.levelname, self.COLORS['RESET'])
            record.levelname = f"{color}{record.levelname}{self.COLORS['RESET']}"
            if isinstance(record.msg, str):
                record.msg = f"{color}{record.msg}{self.COLORS['RESET']}"

        formatted_message = super().format(record)

        # Restore so other handlers see the plain record
        record.levelname = orig_levelname
        record.msg = orig_msg

        return formatted_message


def get_logger(name: str, log_dir: Optional[str] = None, level: int = logging.INFO) -> logging.Logger:
    """
    Return a logger writing to the console and, optionally, to a dated file

    Args:
        name: Logger name
        log_dir: Directory for log files (optional)
        level: Base logging level

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(f"a11yscan.{name}")

    # Prevent adding handlers if they already exist
    if logger.handlers:
        return logger

    logger.setLevel(level)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(ColorFormatter(include_timestamp=False))
    logger.addHandler(console_handler)

    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        log_file = log_path / f"{datetime.now().strftime('%Y-%m-%d')}.log"
        file_handler = logging.FileHandler(str(log_file), encoding='utf-8')
        file_handler.setFormatter(ColorFormatter(include_timestamp=True, use_colors=False))
        file_handler.setLevel(logging.DEBUG)
        logger.addHandler(file_handler)

    # Prevent propagation to avoid duplicate logs
    logger.propagate = False

    return logger


def configure_root_logger(log_dir: Optional[str] = None, console_level: int = logging.INFO) -> None:
    """
    Configure the root logger with console and optional file handlers

    Args:
        log_dir: Directory for log files
        console_level: Logging level for console output
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    console_handler = logging.StreamHandler(sys.__stdout__)
    console_handler.setFormatter(ColorFormatter(include_timestamp=False))
    console_handler.setLevel(console_level)
    root_logger.addHandler(console_handler)

    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        log_file = log_path / f"root_{timestamp}.log"

        file_handler = logging.FileHandler(str(log_file), encoding='utf-8')
        file_handler.setFormatter(ColorFormatter(include_timestamp=True, use_colors=False))
        file_handler.setLevel(logging.DEBUG)
        root_logger.addHandler(file_handler)

        root_logger.info(f"Root logging initialized. Log file: {log_file}")
