import sys
import logging
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = '%(asctime)s - %(levelname)-8s - [%(name)s] - %(message)s'


def setup_logging(console_level: int = logging.INFO, log_file: Optional[Union[str, Path]] = None) -> None:
    """
    Configures the root logger for the application.
    This sets up a console handler and optionally a file handler, clearing any
    previously configured handlers to prevent duplication.

    :param console_level: The logging level for the console output (e.g., logging.INFO).
    :param log_file: Optional path of a file receiving every record at DEBUG level.
    """
    root_logger = logging.getLogger()
    # Set root level to lowest to capture all messages for handler filtering
    root_logger.setLevel(logging.DEBUG)

    # Clear any existing handlers to prevent re-adding them on re-runs
    if root_logger.hasHandlers():
        root_logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT)

    # --- Console Handler ---
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # --- File Handler (optional, all levels) ---
    if log_file is not None:
        try:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file, encoding="utf-8")
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)
        except OSError as e:
            root_logger.error(f"Failed to initialize file logging handler: {e}. Logging to file will be disabled.")
