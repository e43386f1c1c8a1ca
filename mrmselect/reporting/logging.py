import logging
import os
import platform
import socket
import time
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Any

import numpy as np
import pandas as pd
import scipy

import mrmselect

# Add a new logging level to the default logger, level 21 is just above INFO (20)
# This has to happen at load time to make the .progress() method available even if no logger is instantiated
PROGRESS_LEVELV_NUM = 21
logging.PROGRESS = PROGRESS_LEVELV_NUM
logging.addLevelName(PROGRESS_LEVELV_NUM, "PROGRESS")


def progress(self, message, *args, **kws):
    if self.isEnabledFor(PROGRESS_LEVELV_NUM):
        # Yes, logger takes its '*args' as 'args'.
        self._log(PROGRESS_LEVELV_NUM, message, args, **kws)


logging.Logger.progress = progress

# Type stub for extended Logger with progress method
if TYPE_CHECKING:

    class _ExtendedLogger(logging.Logger):
        def progress(self, message: str, *args: Any, **kws: Any) -> None: ...

    logger: _ExtendedLogger = logging.getLogger()  # type: ignore[assignment]
else:
    logger = logging.getLogger()

LOG_FILE_NAME = "log.txt"


class DefaultFormatter(logging.Formatter):
    template = "%(levelname)s: %(message)s"

    yellow = "\x1b[33;20m"
    red = "\x1b[31;20m"
    bold_red = "\x1b[31;1m"
    green = "\x1b[32;20m"
    reset = "\x1b[0m"

    def __init__(self, use_ansi: bool = True):
        """
        Default formatter adding elapsed time and optional ANSI colors.

        Parameters
        ----------

        use_ansi : bool, default True
            Whether to use ANSI escape codes to color the output.

        """
        super().__init__()
        self.start_time = time.time()

        colors = {
            logging.DEBUG: "",
            logging.INFO: "",
            logging.PROGRESS: self.green,
            logging.WARNING: self.yellow,
            logging.ERROR: self.red,
            logging.CRITICAL: self.bold_red,
        }

        self.formatter = {
            level: logging.Formatter(
                color + self.template + self.reset
                if use_ansi and color
                else self.template
            )
            for level, color in colors.items()
        }

    def format(self, record: logging.LogRecord):
        """Format the log record, prefixed with the time elapsed since the formatter was created."""
        elapsed = timedelta(seconds=record.created - self.start_time)
        formatter = self.formatter.get(record.levelno, self.formatter[logging.INFO])

        return f"{elapsed} {formatter.format(record)}"


def init_logging(
    log_folder: str | None = None,
    log_level: int = logging.INFO,
    overwrite: bool = True,
) -> None:
    """Initialize the default logger.
    Sets the formatter and the console and file handlers.

    Parameters
    ----------

    log_folder : str, default None
        Path to the folder where the log file will be saved. If None, the log file will not be saved.

    log_level : int, default logging.INFO
        Log level to use. Can be logging.DEBUG, logging.INFO, logging.WARNING, logging.ERROR or logging.CRITICAL.

    overwrite : bool, default True
        Whether to overwrite the log file if it already exists.
    """
    root_logger = logging.getLogger()
    root_logger.handlers = []
    root_logger.setLevel(log_level)

    ch = logging.StreamHandler()
    ch.setLevel(log_level)
    ch.setFormatter(DefaultFormatter(use_ansi=True))
    root_logger.addHandler(ch)

    if log_folder is not None:
        os.makedirs(log_folder, exist_ok=True)
        log_name = os.path.join(log_folder, LOG_FILE_NAME)
        if os.path.exists(log_name) and overwrite:
            os.remove(log_name)
        fh = logging.FileHandler(log_name, encoding="utf-8")
        fh.setLevel(log_level)
        fh.setFormatter(DefaultFormatter(use_ansi=False))
        root_logger.addHandler(fh)


def print_logo() -> None:
    """Print the mrmselect banner and version."""
    logger.progress("                               _           _   ")
    logger.progress("  _ __ ___  _ __ _ __ ___  ___| | ___  ___| |_ ")
    logger.progress(" | '_ ` _ \\| '__| '_ ` _ \\/ __| |/ _ \\/ __| __|")
    logger.progress(" | | | | | | |  | | | | | \\__ \\ |  __/ (__| |_ ")
    logger.progress(" |_| |_| |_|_|  |_| |_| |_|___/_|\\___|\\___|\\__|")
    logger.progress("")
    logger.progress(f"version: {mrmselect.__version__}")


def print_environment() -> None:
    """Log information about the python environment."""

    logger.info(f"hostname: {socket.gethostname()}")
    logger.progress(
        f"os: {platform.system()} {platform.release()} ({platform.machine()})"
    )
    logger.progress(
        f"python: {platform.python_version()} ({platform.python_implementation()})"
    )

    now = datetime.today().strftime("%Y-%m-%d %H:%M:%S")
    logger.info(f"date: {now}")

    logger.info("=================== Environment ===================")
    logger.info(f"{'numpy':<15} : {np.__version__}")
    logger.info(f"{'pandas':<15} : {pd.__version__}")
    logger.info(f"{'scipy':<15} : {scipy.__version__}")
    logger.info("===================================================")
