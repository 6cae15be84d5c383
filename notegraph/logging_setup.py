# notegraph/logging_setup.py

from __future__ import annotations

import logging
import sys
import uuid
from logging.handlers import RotatingFileHandler
from pathlib import Path

from notegraph.settings import APP_NAME, LOG_DIR

RUN_ID = uuid.uuid4().hex[:8]

LOG_FORMAT = f"%(asctime)s | %(levelname)s | %(name)s | %(message)s | run={RUN_ID}"
LOG_MAX_BYTES = 2 * 1024 * 1024
LOG_BACKUPS = 5


def setup_logging(
    *,
    log_dir: Path | None = None,
    console_level: int = logging.INFO,
) -> logging.Logger:
    """
    Attach a rotating file log and a stderr console to the `notegraph`
    logger. Modules log to notegraph.<module> children and never add
    handlers. Repeated calls only adjust the console level.
    """
    logger = logging.getLogger(APP_NAME)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    if logger.handlers:
        for handler in logger.handlers:
            if not isinstance(handler, RotatingFileHandler):
                handler.setLevel(console_level)
        return logger

    log_dir = Path(log_dir) if log_dir is not None else LOG_DIR
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / f"{APP_NAME}.log"

    fmt = logging.Formatter(LOG_FORMAT)

    fh = RotatingFileHandler(log_path, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUPS, encoding="utf-8")
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(fmt)

    # stdout carries command output
    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(fmt)

    logger.addHandler(fh)
    logger.addHandler(ch)

    logger.debug("Logging initialized. log_file=%s", log_path)
    return logger


def install_global_exception_hooks(log: logging.Logger) -> None:
    """Route uncaught exceptions and Qt warnings into `log`."""

    def _excepthook(exc_type, exc, tb):
        log.critical("Uncaught exception", exc_info=(exc_type, exc, tb))
        sys.__excepthook__(exc_type, exc, tb)

    sys.excepthook = _excepthook

    from PySide6.QtCore import QtMsgType, qInstallMessageHandler

    levels = {
        QtMsgType.QtDebugMsg: logging.DEBUG,
        QtMsgType.QtInfoMsg: logging.INFO,
        QtMsgType.QtWarningMsg: logging.WARNING,
        QtMsgType.QtCriticalMsg: logging.ERROR,
        QtMsgType.QtFatalMsg: logging.CRITICAL,
    }

    def _qt_message_handler(mode, context, message):
        where = f"{getattr(context, 'file', None)}:{getattr(context, 'line', None)}"
        log.log(levels.get(mode, logging.WARNING), "Qt: %s | where=%s", message, where)

    qInstallMessageHandler(_qt_message_handler)
