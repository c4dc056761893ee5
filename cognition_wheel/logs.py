"""Session log file plus mirrored console output."""

from __future__ import annotations

import logging
import sys
import tempfile
from datetime import datetime, timezone
from pathlib import Path

LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"
CONSOLE_FORMAT = "[LOG] %(message)s"

_log_path: Path | None = None
_handlers: list[logging.Handler] = []


def setup_logging(log_dir: str = "", level: int = logging.INFO) -> Path:
    """Attach a per-session file handler and a stderr handler to the root logger.

    Only the first call installs handlers; later calls return the same path.
    ``logging.FileHandler`` serialises writes with its own lock, so records
    from concurrent backend calls land as whole lines.
    """
    global _log_path
    if _log_path is not None:
        return _log_path

    directory = Path(log_dir or tempfile.gettempdir())
    directory.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H-%M-%S-%fZ")
    path = directory / f"wheel-{timestamp}.log"

    file_handler = logging.FileHandler(path, encoding="utf-8")
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))

    root = logging.getLogger()
    root.setLevel(level)
    for handler in (file_handler, console_handler):
        root.addHandler(handler)
        _handlers.append(handler)

    _log_path = path
    logging.getLogger(__name__).info(
        "=== Cognition Wheel session started, logging to %s ===", path
    )
    return path


def get_log_path() -> str:
    """Path of the session log, or an empty string before setup."""
    return str(_log_path) if _log_path is not None else ""


def shutdown_logging() -> None:
    """Detach and close the handlers installed by :func:`setup_logging`."""
    global _log_path
    root = logging.getLogger()
    while _handlers:
        handler = _handlers.pop()
        root.removeHandler(handler)
        handler.close()
    _log_path = None
