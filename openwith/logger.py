"""
Common interface for propagating logable messages.
"""
import logging

DEFAULT_FORMAT = '%(name)s: %(message)s'

def set_console_handler(logger, format):
    """
    Attach a `logging.StreamHandler()` writing to `stderr` with the given
    `format` to `logger` and return the logger.
    """
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(format))
    logger.addHandler(handler)
    return logger

def get_logger(name, format=DEFAULT_FORMAT, level=logging.INFO):
    """
    Request a logger from Python's `logging`-module by using the given `name`.
    A logger which already has a handler is returned unchanged. Otherwise a
    console handler using `format` is added and the logger's level is set to
    `level`.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        logger = set_console_handler(logger, format)
        logger.setLevel(level)
    return logger

# Target of the module-level helpers below. A `logging`-compatible object is
# expected here. `None` means that logging is disabled, which is the default
# for an embedded hook: gate decisions must stay silent unless asked for.
LOGGER = None

def enable(name='openwith', level=logging.INFO):
    """
    Enable logging by setting a logger with the given `name` as `LOGGER`.
    Pass `logging.DEBUG` as `level` to see why events were not handled.
    """
    global LOGGER
    LOGGER = get_logger(name, level=level)
    LOGGER.setLevel(level)

def disable():
    """
    Disable logging. This is setting `LOGGER` to `None`.
    """
    global LOGGER
    LOGGER = None

def _log(level, message):
    if LOGGER is not None:
        LOGGER.log(level, message)

def debug(message):
    _log(logging.DEBUG, message)

def info(message):
    """
    Log a `message` with logging level `INFO` on the `LOGGER`.
    """
    _log(logging.INFO, message)

def warning(message):
    """
    Log a `message` with logging level `WARNING` on the `LOGGER`.
    """
    _log(logging.WARNING, message)

def error(message):
    _log(logging.ERROR, message)
