"""Logging configuration with console and rotating file handlers"""
import glob
import logging
import os
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Iterable, Optional, Union

DEFAULT_LOG_FILE = "logs/logo-search.log"
QUIET_LOGGERS = ("uvicorn.access", "httpx", "httpcore")

Level = Union[int, str, None]


def resolve_level(level: Level, default: int = logging.INFO) -> int:
    """
    Accept a logging level as an int or a name ("debug", "WARNING").

    Examples:
        >>> resolve_level("warning")
        30
        >>> resolve_level("nonsense", default=logging.INFO)
        20
    """
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        value = logging.getLevelName(level.strip().upper())
        if isinstance(value, int):
            return value
    return default


def prune_session_logs(log_path: Path, keep: int) -> None:
    """Delete all but the newest keep - 1 session logs (and their rotated parts)."""
    pattern = str(log_path.parent / f"{log_path.stem}_*.log")
    sessions = sorted(glob.glob(pattern), reverse=True)
    for old_log in sessions[max(0, keep - 1):]:
        for path in [old_log, *glob.glob(f"{old_log}.*")]:
            try:
                Path(path).unlink()
            except OSError as e:
                print(f"Could not remove old log {path}: {e}", file=sys.stderr)


def setup_logging(
    log_file: Optional[str] = None,
    console_level: Level = None,
    file_level: Level = logging.DEBUG,
    sessions_kept: int = 5,
    max_bytes: int = 10 * 1024 * 1024,
    quiet_loggers: Iterable[str] = QUIET_LOGGERS,
) -> Path:
    """
    Configure logging for the logo search service.

    - Console: brief lines at LOG_LEVEL (INFO by default)
    - File: one timestamped log per process start, DEBUG by default,
      rotated at max_bytes; only the newest sessions_kept files survive

    Args:
        log_file: Base path of the session log (LOG_FILE, then logs/logo-search.log)
        console_level: Console level as int or name (LOG_LEVEL when omitted)
        file_level: File level as int or name
        sessions_kept: Number of session logs retained across restarts
        max_bytes: Rotation size of one session log
        quiet_loggers: Chatty libraries limited to WARNING

    Returns:
        Path of the session log file
    """
    log_path = Path(log_file or os.getenv("LOG_FILE") or DEFAULT_LOG_FILE)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    prune_session_logs(log_path, sessions_kept)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    session_log = log_path.parent / f"{log_path.stem}_{timestamp}.log"

    console = resolve_level(console_level if console_level is not None else os.getenv("LOG_LEVEL"))
    detailed = resolve_level(file_level, default=logging.DEBUG)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # Filtering happens in the handlers
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console)
    console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))

    file_handler = RotatingFileHandler(
        session_log,
        mode='a',
        maxBytes=max_bytes,
        backupCount=2,
        encoding='utf-8'
    )
    file_handler.setLevel(detailed)
    file_handler.setFormatter(logging.Formatter(
        '%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    ))

    root_logger.addHandler(console_handler)
    root_logger.addHandler(file_handler)

    for name in quiet_loggers:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).info(
        f"Logging configured: console={logging.getLevelName(console)}, "
        f"file={session_log} ({logging.getLevelName(detailed)})"
    )
    return session_log
