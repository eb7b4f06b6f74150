"""Logging setup for ChromaCard: a rotating log file, console output, and Qt message routing."""

from __future__ import annotations

import logging
import logging.handlers
import os
from pathlib import Path

__all__ = ["LOG_FORMAT", "get_log_path", "install_qt_message_handler", "resolve_level", "setup_logging"]

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DEFAULT_LOG_DIR = Path.home() / ".chromacard" / "logs"
_LOG_FILE_NAME = "chromacard.log"
_NOISY_LOGGERS: tuple[str, ...] = ("asyncio", "qasync")
_LOG_PATH: Path | None = None


def resolve_level(level: int | str) -> int:
    """Accept ``logging`` constants or their names (``"debug"``, ``"WARNING"``)."""

    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level '{level}'")
    return resolved


def setup_logging(
    level: int | str = logging.INFO,
    *,
    log_dir: Path | str | None = None,
    console: bool = True,
    max_bytes: int = 512_000,
    backup_count: int = 2,
    force: bool = False,
) -> Path:
    """Install file + console handlers on the root logger and return the log file path.

    Repeated calls are no-ops unless ``force`` is set, which lets the app
    switch to debug logging once settings have been read.
    """

    global _LOG_PATH
    if _LOG_PATH is not None and not force:
        return _LOG_PATH

    numeric_level = resolve_level(level)
    target_dir = Path(log_dir or os.environ.get("CHROMACARD_LOG_DIR") or _DEFAULT_LOG_DIR).expanduser()
    target_dir.mkdir(parents=True, exist_ok=True)
    log_path = target_dir / _LOG_FILE_NAME

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    handlers: list[logging.Handler] = [
        logging.handlers.RotatingFileHandler(log_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")
    ]
    if console:
        handlers.append(logging.StreamHandler())
    for handler in handlers:
        handler.setLevel(numeric_level)
        handler.setFormatter(formatter)

    logging.basicConfig(level=numeric_level, handlers=handlers, force=True)
    logging.captureWarnings(True)

    quiet_level = max(numeric_level, logging.WARNING)
    for logger_name in _NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(quiet_level)

    _LOG_PATH = log_path
    return log_path


def get_log_path() -> Path | None:
    """Return the currently configured log file if available."""

    return _LOG_PATH


def install_qt_message_handler() -> bool:
    """Redirect Qt warnings into the ``PySide6`` logger. Returns ``False`` without Qt."""

    try:
        from PySide6.QtCore import QtMsgType, qInstallMessageHandler
    except ImportError:  # pragma: no cover - PySide6 optional during tests
        return False

    level_map = {
        QtMsgType.QtDebugMsg: logging.DEBUG,
        QtMsgType.QtInfoMsg: logging.INFO,
        QtMsgType.QtWarningMsg: logging.WARNING,
        QtMsgType.QtCriticalMsg: logging.ERROR,
        QtMsgType.QtFatalMsg: logging.CRITICAL,
    }

    def _handler(mode, context, message):  # type: ignore[no-untyped-def]
        del context
        logging.getLogger("PySide6").log(level_map.get(mode, logging.INFO), message)

    qInstallMessageHandler(_handler)
    return True
