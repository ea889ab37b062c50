import logging
import os
import sys
from pathlib import Path
from typing import Optional

from pythonjsonlogger import jsonlogger


def setup_logging(console_mode: bool = False, log_dir: Optional[Path] = None):
    """
    Configures the root logger to output structured JSON logs.
    Log level can be set via the LOG_LEVEL environment variable.

    Args:
        console_mode: If True, logs to file so records do not interleave with
                      the interactive console output.
                      If False, logs to stderr and leaves stdout for results.
        log_dir: Directory for the console-mode log file. Defaults to ./logs.
    """
    log_level_name = os.environ.get("LOG_LEVEL", "INFO").upper()
    log_level = getattr(logging, log_level_name, logging.INFO)

    log = logging.getLogger()
    log.setLevel(log_level)

    # httpx logs every request at INFO
    if log_level > logging.DEBUG:
        logging.getLogger("httpx").setLevel(logging.WARNING)

    # Avoid adding duplicate handlers
    if log.handlers:
        return

    if console_mode:
        log_dir = Path(log_dir) if log_dir else Path.cwd() / "logs"
        log_dir.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_dir / "queryconsole.log", mode="a")
    else:
        handler = logging.StreamHandler(sys.stderr)

    # Define the fields to include in the JSON output.
    formatter = jsonlogger.JsonFormatter(
        "%(asctime)s %(name)s %(levelname)s %(message)s"
    )

    handler.setFormatter(formatter)
    log.addHandler(handler)
