import logging
import os
from datetime import datetime
import glob

from platformdirs import user_log_dir

LOG_DIR = user_log_dir("PlatePlus", "PlatePlus")
MAX_LOG_FILES = 10

_LOGGER_INSTANCE = None
_LOG_FILE_HANDLER = None
_CONSOLE_HANDLER = None
_LOG_FILE_PATH = None


def _level_from_config(config):
    log_level_str = str(getattr(config, 'log_level', 'INFO')).upper()
    if log_level_str == 'ALL':
        log_level_str = 'DEBUG'
    return log_level_str, getattr(logging, log_level_str, logging.INFO)


def setup_logging(config=None, log_dir=None):
    """
    Configure (or update) logging for plateplus.
    - Creates a single log file per run.
    - Calling again only updates the console level of the existing handlers.
    Args:
        config: object with a log_level attribute (INFO, DEBUG, ALL, ...). Optional.
        log_dir: directory for log files. Defaults to the user log directory.
    Returns:
        logging.Logger
    """
    global _LOGGER_INSTANCE, _LOG_FILE_HANDLER, _CONSOLE_HANDLER, _LOG_FILE_PATH
    logger = logging.getLogger('plateplus')
    logger.propagate = False
    log_level_str, log_level = _level_from_config(config)
    if _LOGGER_INSTANCE is not None:
        # Only update levels
        if _CONSOLE_HANDLER:
            _CONSOLE_HANDLER.setLevel(log_level)
        logger.info(f"Log level updated to: {log_level_str}")
        return logger

    # First call: create log file and handlers
    log_dir = log_dir or LOG_DIR
    os.makedirs(log_dir, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = os.path.join(log_dir, f"plateplus_{timestamp}.log")
    _LOG_FILE_PATH = log_file

    fh = logging.FileHandler(log_file)
    fh.setLevel(logging.DEBUG)
    ch = logging.StreamHandler()
    ch.setLevel(log_level)
    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    fh.setFormatter(formatter)
    ch.setFormatter(formatter)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    logger.addHandler(fh)
    logger.addHandler(ch)
    logger.setLevel(logging.DEBUG)
    logger.info(f"Logging started. Log file: {log_file}")
    clean_old_log_files(log_dir)
    _LOGGER_INSTANCE = logger
    _LOG_FILE_HANDLER = fh
    _CONSOLE_HANDLER = ch
    return logger


def get_log_file_path():
    return _LOG_FILE_PATH


def clean_old_log_files(log_dir=None):
    """
    Delete old log files beyond MAX_LOG_FILES.
    """
    log_dir = log_dir or LOG_DIR
    log_files = sorted(glob.glob(os.path.join(log_dir, "plateplus_*.log")))
    if len(log_files) > MAX_LOG_FILES:
        for old_file in log_files[:-MAX_LOG_FILES]:
            try:
                os.remove(old_file)
                logging.getLogger('plateplus').info(f"Deleted old log file: {old_file}")
            except OSError as e:
                logging.getLogger('plateplus').warning(f"Could not delete old log file {old_file}: {e}")
