import logging
from pathlib import Path

LOG_DIR = Path(__file__).parent.parent / "logs"
LOG_FILE = LOG_DIR / "app.log"

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Cache for log mode to avoid repeated config reads
_log_mode_cache = None


def _get_log_mode():
    """Get log mode from configuration."""
    global _log_mode_cache
    if _log_mode_cache is not None:
        return _log_mode_cache

    try:
        from transync.config import load_config
        config = load_config()
        log_mode = config.get('log_mode', 'off')
        _log_mode_cache = log_mode
        return log_mode
    except Exception:
        # Config module may still be importing; stay quiet until it is ready
        return 'off'


def _level_for(log_mode: str) -> int:
    if log_mode == 'debug':
        return logging.DEBUG
    if log_mode == 'off':
        # Higher than CRITICAL disables the logger entirely
        return logging.CRITICAL + 1
    return logging.INFO


def _make_file_handler(log_format: logging.Formatter) -> logging.FileHandler:
    LOG_DIR.mkdir(exist_ok=True)
    f_handler = logging.FileHandler(LOG_FILE)
    f_handler.setLevel(logging.DEBUG)
    f_handler.setFormatter(log_format)
    return f_handler


def _apply_log_mode(logger: logging.Logger, log_mode: str) -> None:
    """Bring an already configured logger in line with the current log mode."""
    level = _level_for(log_mode)
    logger.setLevel(level)
    log_format = logging.Formatter(LOG_FORMAT)

    has_file_handler = any(isinstance(h, logging.FileHandler) for h in logger.handlers)

    if log_mode != 'off' and not has_file_handler:
        logger.addHandler(_make_file_handler(log_format))
    elif log_mode == 'off' and has_file_handler:
        handlers_to_remove = [h for h in logger.handlers if isinstance(h, logging.FileHandler)]
        for handler in handlers_to_remove:
            handler.close()
            logger.removeHandler(handler)

    console_handlers = [
        h for h in logger.handlers
        if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
    ]
    if log_mode != 'off' and not console_handlers:
        c_handler = logging.StreamHandler()
        c_handler.setFormatter(log_format)
        logger.addHandler(c_handler)
        console_handlers.append(c_handler)

    for handler in console_handlers:
        handler.setLevel(level)


def _clear_log_mode_cache():
    """Clear the log mode cache and update all existing loggers (call this when config is updated)."""
    global _log_mode_cache
    _log_mode_cache = None

    log_mode = _get_log_mode()

    # Only loggers that have handlers were created by get_logger
    for logger_name in list(logging.Logger.manager.loggerDict.keys()):
        logger = logging.getLogger(logger_name)
        if logger.handlers:
            _apply_log_mode(logger, log_mode)


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)

    log_mode = _get_log_mode()

    # Prevent duplicate handlers if logger already configured
    if logger.handlers:
        _apply_log_mode(logger, log_mode)
        return logger

    level = _level_for(log_mode)
    logger.setLevel(level)

    if log_mode != 'off':
        log_format = logging.Formatter(LOG_FORMAT)
        logger.addHandler(_make_file_handler(log_format))

        c_handler = logging.StreamHandler()
        c_handler.setLevel(level)
        c_handler.setFormatter(log_format)
        logger.addHandler(c_handler)
    else:
        # Keep a handler attached so later mode changes can find this logger
        logger.addHandler(logging.NullHandler())

    return logger
