import logging
import sys
import traceback

from colorlog import ColoredFormatter

LOGGER_NAME = "verify_peering"


def setup_logger(debug_mode=False):
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if debug_mode else logging.INFO)

    if not logger.handlers:
        # Create console handler
        handler = logging.StreamHandler(sys.stdout)

        # Create colored formatter
        formatter = ColoredFormatter(
            "%(log_color)s[%(levelname)s] %(message)s",
            log_colors={
                "DEBUG":    "cyan",
                "INFO":     "green",
                "WARNING":  "yellow",
                "ERROR":    "red",
                "CRITICAL": "red,bg_white",
            }
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    for handler in logger.handlers:
        handler.setLevel(logging.DEBUG if debug_mode else logging.INFO)

    return logger


def print_stack_trace():
    """
    Log the current exception's stack trace if debug mode is enabled.
    """
    if DEBUG_MODE:
        logger.error(traceback.format_exc())


# Logger defaults to INFO unless reconfigured later.
DEBUG_MODE = False
logger = setup_logger(debug_mode=DEBUG_MODE)


def configure_logger(mode: str = "", debug: bool = False):
    """
    Re-configure the package logger from a config mode string or CLI flag.

    Args:
        mode: Value of the "mode" config field (e.g. "DEBUG", "INFO")
        debug: Force debug mode regardless of the config value
    """
    global logger, DEBUG_MODE
    DEBUG_MODE = debug or (mode or "").upper() == "DEBUG"
    logger = setup_logger(debug_mode=DEBUG_MODE)
    if DEBUG_MODE:
        logger.debug("Debug mode is active.")
    return logger
