# gw2_market/logger.py
"""Root and worker logging setup."""
from __future__ import annotations

import logging
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

__all__ = ["setup_logger", "current_log_file", "configure_worker_logging"]

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def _formatter() -> logging.Formatter:
    return logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT)


def setup_logger(
    log_dir: str | Path,
    *,
    level: int = logging.INFO,
    filename_prefix: str = "gw2_market",
    console: bool = False,
    rotate: bool = False,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 3,
    force: bool = False,
) -> Path:
    """
    Send root logging to a timestamped file under ``log_dir``.

    The progress line owns the terminal, so console output is opt-in.
    Returns the path of the log file.
    """
    target = Path(log_dir).expanduser()
    if target.suffix and not target.is_dir():
        target = target.parent
    target.mkdir(parents=True, exist_ok=True)

    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_path = target / f"{filename_prefix}_{stamp}.log"

    root = logging.getLogger()
    if force:
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)

    if rotate:
        file_handler: logging.Handler = RotatingFileHandler(
            log_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
        )
    else:
        # Append mode: worker processes write to the same file
        file_handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
    file_handler.setLevel(level)
    file_handler.setFormatter(_formatter())
    root.addHandler(file_handler)

    if console:
        stream_handler = logging.StreamHandler()
        stream_handler.setLevel(level)
        stream_handler.setFormatter(_formatter())
        root.addHandler(stream_handler)

    # urllib3 logs every retry and connection at DEBUG
    logging.getLogger("urllib3").setLevel(max(level, logging.WARNING))

    root.info("Logging to: %s", log_path)
    return log_path


def current_log_file() -> Optional[str]:
    """Return the file the root logger writes to, if any."""
    for handler in logging.getLogger().handlers:
        if isinstance(handler, logging.FileHandler):
            return handler.baseFilename
    return None


def configure_worker_logging(log_file: Optional[str], worker_id: int) -> logging.Logger:
    """
    Attach the run's log file to a worker process.

    Spawned processes start with an unconfigured root logger; without this
    their records would be lost. Threads share the parent's handlers and
    pass ``log_file=None``.
    """
    worker_logger = logging.getLogger(f"gw2_market.worker.{worker_id}")
    root = logging.getLogger()
    if not log_file or current_log_file() is not None:
        return worker_logger

    try:
        handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
    except OSError as exc:
        worker_logger.warning("Worker %s: could not open log file %s: %s", worker_id, log_file, exc)
        return worker_logger

    handler.setFormatter(_formatter())
    root.addHandler(handler)
    root.setLevel(logging.INFO)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    return worker_logger
