# ╔════════════════════════════════════════════════════════════════════════════╗
# ║                        EVENT SYNC LOGGING SETUP                            ║
# ║ Configures queued, rotating file logging and colored console output.       ║
# ║ Includes fallback mechanisms for log directory permissions.                ║
# ╚════════════════════════════════════════════════════════════════════════════╝

# Standard library imports
import atexit
import logging
import os
import platform
import sys
import tempfile
from logging.handlers import QueueHandler, QueueListener, TimedRotatingFileHandler
from queue import Queue

# Third-party imports
from colorlog import ColoredFormatter

# Local application imports
from utils.environ import DEBUG, get_str_env

# ╔════════════════════════════════════════════════════════════════════════════╗
# ║ LOGGING CONFIGURATION AND CONSTANTS                                        ║
# ╚════════════════════════════════════════════════════════════════════════════╝

LOGGER_NAME = "eventsync"

# Preferred log directory (often mounted in Docker)
LOG_DIR = get_str_env("EVENT_SYNC_LOG_DIR", "/data/logs")
LOG_FILE_NAME = "eventsync.log"

# Fallback directories if LOG_DIR is not writable
FALLBACK_DIRS = [
    os.path.join(os.path.dirname(os.path.abspath(__file__)), "logs"),
    tempfile.gettempdir(),
]

# Variables to store the actual log file path and directory used
active_log_file = None
log_dir_used = None

# ╔════════════════════════════════════════════════════════════════════════════╗
# ║ LOG DIRECTORY SETUP                                                        ║
# ╚════════════════════════════════════════════════════════════════════════════╝

# --- setup_log_directory ---
# Finds a writable log directory, trying LOG_DIR first and then FALLBACK_DIRS.
# Sets `active_log_file` and `log_dir_used` upon success.
# Returns: True if a writable log directory was found, False otherwise.
def setup_log_directory() -> bool:
    global active_log_file, log_dir_used
    for candidate in [LOG_DIR, *FALLBACK_DIRS]:
        try:
            os.makedirs(candidate, exist_ok=True)
        except OSError as e:
            # The logger is not ready yet
            print(f"Notice: Could not use log directory {candidate}: {e}")
            continue
        if os.access(candidate, os.W_OK):
            active_log_file = os.path.join(candidate, LOG_FILE_NAME)
            log_dir_used = candidate
            return True

    print("WARNING: Could not find any writable log directory. File logging disabled.")
    return False

# ╔════════════════════════════════════════════════════════════════════════════╗
# ║ LOGGER INITIALIZATION AND CONFIGURATION                                    ║
# ╚════════════════════════════════════════════════════════════════════════════╝

logger = logging.getLogger(LOGGER_NAME)

# --- configure_logging ---
# Attaches a queue handler to the "eventsync" logger and starts a listener that
# fans records out to a colored console handler and, when possible, a daily
# rotating file handler. Safe to call more than once.
# Args:
#     debug: Use DEBUG level instead of INFO.
#     file_logging: Set False to keep output on the console only.
# Returns: The configured logger.
def configure_logging(debug: bool = DEBUG, file_logging: bool = True) -> logging.Logger:
    if getattr(logger, "_initialized", False):
        return logger

    level = logging.DEBUG if debug else logging.INFO
    logger.setLevel(level)

    handlers = []
    console_formatter = ColoredFormatter(
        "%(log_color)s[%(asctime)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        log_colors={
            "DEBUG": "cyan",
            "INFO": "green",
            "WARNING": "yellow",
            "ERROR": "red",
            "CRITICAL": "bold_red",
        }
    )
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(console_formatter)
    console_handler.setLevel(level)
    handlers.append(console_handler)

    if file_logging and setup_log_directory():
        file_formatter = logging.Formatter(
            "[%(asctime)s] %(levelname)s in %(name)s [%(filename)s:%(lineno)d]: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )
        # Daily rotation, keeps 7 backups
        file_handler = TimedRotatingFileHandler(
            active_log_file,
            when="midnight",
            interval=1,
            backupCount=7,
            encoding="utf-8",
        )
        file_handler.setFormatter(file_formatter)
        file_handler.setLevel(level)
        handlers.append(file_handler)

    log_queue = Queue(-1)
    logger.addHandler(QueueHandler(log_queue))
    listener = QueueListener(log_queue, *handlers, respect_handler_level=True)
    listener.start()
    logger._listener = listener
    logger._initialized = True

    # --- cleanup ---
    # Stops the listener so queued records are flushed before exit.
    def cleanup():
        listener.stop()
        for handler in handlers:
            handler.close()

    atexit.register(cleanup)

    logger.info(f"--- Logging Initialized ({platform.system()} {platform.release()}) ---")
    logger.info(f"Log Level: {'DEBUG' if debug else 'INFO'}")
    if log_dir_used:
        logger.info(f"Log Directory: {log_dir_used}")
    else:
        logger.warning("File logging is disabled.")
    return logger
