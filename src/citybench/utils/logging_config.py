import logging
import os
import sys
from pathlib import Path


def setup_logger(log_file: str, log_dir: str | None = None) -> logging.Logger:
    """
    Configure logging for the application.

    - Logs all levels (DEBUG and above) to a file.
    - Logs INFO and above to stdout, so progress lines show up in the terminal.

    Args:
        log_file (str): Name of the log file.
            A `.log` extension is recommended.
        log_dir (str): Directory for the log file. Falls back to
            the LOG_DIR env variable, then to `logs`.

    Returns:
        logging.Logger: Configured root logger instance.
    """

    log_dir = log_dir or os.getenv("LOG_DIR") or "logs"
    Path(log_dir).mkdir(parents=True, exist_ok=True)
    log_path = Path(log_dir) / log_file
    fmt = "%(asctime)s - %(levelname)s - %(message)s"
    formatter = logging.Formatter(fmt, datefmt="%Y-%m-%d %H:%M")

    # file_handler configuration
    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    file_handler.setFormatter(formatter)
    file_handler.setLevel(logging.DEBUG)

    # stream_handler configuration
    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)
    stream_handler.setLevel(logging.INFO)

    logging.basicConfig(
        level=logging.DEBUG, handlers=[file_handler, stream_handler], force=True
    )
    # alembic announces every revision at INFO
    logging.getLogger("alembic").setLevel(logging.WARNING)

    return logging.getLogger()
