# kilo/utils/logging_config.py
"""kilo.utils.logging_config
===========================

Logging configuration for the kilo editor. It defines the global logger
objects and a single setup function, `setup_logging`, which configures
application-wide handlers and log levels from the configuration dictionary.

A full-screen curses application cannot write diagnostics to the terminal it
is drawing on, so the rotating log file is the primary sink and console
output is off unless explicitly enabled.

Features:
    - Rotating file logging for general application events (editor.log).
    - Optional console logging to stderr with configurable log level.
    - Optional separate error log file (error.log) for ERROR and CRITICAL events.
    - Optional key event tracing (keytrace.log) enabled via the KILO_KEYTRACE
      environment variable.
    - Automatic creation of log directories, with fallback to the system temp
      directory on failure.
    - Safe reconfiguration: clears existing handlers when called multiple times.

Globals:
    logger: Main application logger ("kilo").
    KEY_LOGGER: Logger for decoded key-press trace events ("kilo.keyevents").
"""

import logging
import logging.handlers
import os
import sys
import tempfile
from typing import Any, Optional


# ======================== Global loggers ========================
logger = logging.getLogger("kilo")  # main application logger
KEY_LOGGER = logging.getLogger("kilo.keyevents")  # decoded key-press trace

KEYTRACE_ENV_VAR = "KILO_KEYTRACE"


def _ensure_log_dir(path: str, fallback_name: str) -> str:
    """Creates the parent directory of *path*, falling back to the temp dir."""
    log_dir = os.path.dirname(path)
    if log_dir and not os.path.exists(log_dir):
        try:
            os.makedirs(log_dir)
        except OSError as e_mkdir:
            print(f"Error creating log directory '{log_dir}': {e_mkdir}", file=sys.stderr)
            path = os.path.join(tempfile.gettempdir(), fallback_name)
            print(f"Logging to temporary file: '{path}'", file=sys.stderr)
    return path


# --- Logging Setup Function ---
def setup_logging(config: Optional[dict[str, Any]] = None) -> None:
    """Configures application-wide logging handlers and log levels.

    Up to four independent handlers are installed:

    1. File handler – rotating log file (``log_file``, default editor.log)
       capturing everything from ``file_level`` (default DEBUG) upward.
    2. Console handler – optional ``stderr`` output whose threshold is
       ``console_level`` (default WARNING).
    3. Error-file handler – optional rotating error.log that stores only
       ERROR and CRITICAL events.
    4. Key-event handler – optional rotating keytrace.log enabled when the
       environment variable ``KILO_KEYTRACE`` is ``1/true/yes``; attached to
       the ``kilo.keyevents`` logger.

    Args:
        config (dict | None): Application configuration blob. Only the
            ``["logging"]`` sub-section is consulted.

    Notes:
        The function never raises; I/O or permission errors are reported to
        stderr and logging continues with a best-effort configuration.
    """
    if config is None:
        config = {}
    logging_config = config.get("logging", {})

    log_filename = _ensure_log_dir(logging_config.get("log_file", "editor.log"), "kilo.log")
    log_file_level_str = str(logging_config.get("file_level", "DEBUG")).upper()
    log_file_level = getattr(logging, log_file_level_str, logging.DEBUG)

    file_formatter = logging.Formatter(
        "%(asctime)s - %(levelname)-8s - %(name)-15s - %(message)s (%(filename)s:%(lineno)d)"
    )
    file_handler = None
    try:
        file_handler = logging.handlers.RotatingFileHandler(
            log_filename, maxBytes=2 * 1024 * 1024, backupCount=5, encoding="utf-8"
        )
        file_handler.setFormatter(file_formatter)
        file_handler.setLevel(log_file_level)
    except Exception as e_fh:
        print(
            f"Error setting up file logger for '{log_filename}': {e_fh}. File logging may be impaired.",
            file=sys.stderr,
        )

    # Console Handler
    console_handler = None
    if logging_config.get("log_to_console", False):
        console_level_str = str(logging_config.get("console_level", "WARNING")).upper()
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter("%(levelname)-8s - %(name)-12s - %(message)s"))
        console_handler.setLevel(getattr(logging, console_level_str, logging.WARNING))

    # Optional Separate Error Log File
    error_file_handler = None
    if logging_config.get("separate_error_log", False):
        error_log_filename = _ensure_log_dir("error.log", "kilo-error.log")
        try:
            error_file_handler = logging.handlers.RotatingFileHandler(
                error_log_filename, maxBytes=1 * 1024 * 1024, backupCount=3, encoding="utf-8"
            )
            error_file_handler.setFormatter(file_formatter)
            error_file_handler.setLevel(logging.ERROR)
        except Exception as e_efh:
            print(
                f"Error setting up separate error log '{error_log_filename}': {e_efh}.",
                file=sys.stderr,
            )

    root_logger = logging.getLogger()
    root_logger.handlers = []  # Clear existing root handlers to avoid duplicates

    for handler in (file_handler, console_handler, error_file_handler):
        if handler:
            root_logger.addHandler(handler)

    root_logger.setLevel(log_file_level)

    # Key Event Logger
    KEY_LOGGER.propagate = False
    KEY_LOGGER.setLevel(logging.DEBUG)
    KEY_LOGGER.handlers = []

    if os.environ.get(KEYTRACE_ENV_VAR, "").lower() in {"1", "true", "yes"}:
        try:
            key_trace_filename = "keytrace.log"
            key_trace_handler = logging.handlers.RotatingFileHandler(
                key_trace_filename, maxBytes=1 * 1024 * 1024, backupCount=3, encoding="utf-8"
            )
            key_trace_handler.setFormatter(logging.Formatter("%(asctime)s - %(message)s"))
            KEY_LOGGER.addHandler(key_trace_handler)
            KEY_LOGGER.disabled = False
            logging.info("Key event tracing enabled, logging to '%s'.", key_trace_filename)
        except Exception as e_keytrace:
            logging.error(f"Failed to set up key trace logging: {e_keytrace}", exc_info=True)
            KEY_LOGGER.disabled = True
    else:
        KEY_LOGGER.addHandler(logging.NullHandler())
        KEY_LOGGER.disabled = True
        logging.debug("Key event tracing is disabled.")

    logging.info(
        "Logging setup complete. Root logger level: %s.",
        logging.getLevelName(root_logger.level),
    )
    if file_handler:
        logging.info(
            f"File logging to '{log_filename}' at level: {logging.getLevelName(file_handler.level)}."
        )
    if console_handler:
        logging.info(
            f"Console logging to stderr at level: {logging.getLevelName(console_handler.level)}."
        )
    if error_file_handler:
        logging.info("Error logging to 'error.log' at level: ERROR.")
