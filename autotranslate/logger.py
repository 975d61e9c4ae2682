import logging
import os
from pathlib import Path
from typing import Dict, Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_MODES = ('off', 'info', 'debug')

_log_mode = os.environ.get('AUTOTRANSLATE_LOG_MODE', 'info')
_log_file: Optional[Path] = None

# Loggers handed out by get_logger, reconfigured on every set_log_mode call
_managed_loggers: Dict[str, logging.Logger] = {}


def _get_log_mode() -> str:
    """Get the active log mode, falling back to 'info' for unknown values."""
    return _log_mode if _log_mode in LOG_MODES else 'info'


def _apply_log_mode(logger: logging.Logger):
    """Bring a logger's level and handlers in line with the active log mode."""
    log_mode = _get_log_mode()
    log_format = logging.Formatter(LOG_FORMAT)

    if log_mode == 'debug':
        level = logging.DEBUG
    elif log_mode == 'off':
        # Off mode: a level higher than CRITICAL disables everything
        level = logging.CRITICAL + 1
    else:
        level = logging.INFO

    logger.setLevel(level)

    file_handlers = [h for h in logger.handlers if isinstance(h, logging.FileHandler)]
    console_handlers = [
        h for h in logger.handlers
        if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
    ]

    # Drop file handlers that are disabled or point at a stale file
    for handler in list(file_handlers):
        if log_mode == 'off' or _log_file is None or Path(handler.baseFilename) != _log_file.resolve():
            handler.close()
            logger.removeHandler(handler)
            file_handlers.remove(handler)

    if log_mode != 'off' and _log_file is not None and not file_handlers:
        _log_file.parent.mkdir(parents=True, exist_ok=True)
        f_handler = logging.FileHandler(_log_file, encoding='utf-8')
        f_handler.setLevel(logging.DEBUG)
        f_handler.setFormatter(log_format)
        logger.addHandler(f_handler)

    if not console_handlers:
        c_handler = logging.StreamHandler()
        c_handler.setFormatter(log_format)
        logger.addHandler(c_handler)
        console_handlers = [c_handler]

    for handler in console_handlers:
        handler.setLevel(level)


def set_log_mode(mode: str, log_file: Optional[Path] = None):
    """
    Switch the log mode and update all existing loggers.

    Args:
        mode: One of 'off', 'info' or 'debug'
        log_file: Optional file that receives a copy of all log records
    """
    global _log_mode, _log_file

    if mode not in LOG_MODES:
        raise ValueError(f"Unknown log mode '{mode}', expected one of: {', '.join(LOG_MODES)}")

    _log_mode = mode
    _log_file = Path(log_file) if log_file else None

    for logger in _managed_loggers.values():
        _apply_log_mode(logger)


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)

    if name not in _managed_loggers:
        _managed_loggers[name] = logger

    _apply_log_mode(logger)
    return logger
