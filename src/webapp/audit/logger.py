"""
Audit logging infrastructure for keeper ORM model changes.

Provides rotating file logger for tracking database changes.
"""
import logging
import os
import tempfile
from logging.handlers import RotatingFileHandler
from pathlib import Path

AUDIT_LOGGER_NAME = "model_audit"

_log = logging.getLogger(__name__)


def ensure_log_directory(logfile_path):
    """
    Ensure log directory exists and is writable.

    Args:
        logfile_path: Desired log file path

    Returns:
        str: Usable log file path (may fall back to temp directory)
    """
    log_dir = Path(logfile_path).parent

    try:
        log_dir.mkdir(parents=True, exist_ok=True)

        # Test write access
        test_file = log_dir / '.write_test'
        test_file.touch()
        test_file.unlink()

        return str(logfile_path)
    except OSError as e:
        fallback_path = os.path.join(tempfile.gettempdir(), 'keeper_audit.log')
        _log.warning(f"Could not use audit log directory {log_dir}: {e}; falling back to {fallback_path}")
        return fallback_path


def get_audit_logger(logfile_path):
    """
    Get or create audit logger with rotating file handler.

    Uses singleton pattern - returns existing logger if already configured.

    Args:
        logfile_path: Path to audit log file

    Returns:
        logging.Logger: Configured audit logger
    """
    logger = logging.getLogger(AUDIT_LOGGER_NAME)
    logger.setLevel(logging.INFO)
    # Audit records stay out of the application log
    logger.propagate = False

    # Singleton - only configure once
    if not logger.handlers:
        logfile_path = ensure_log_directory(logfile_path)

        # Rotating file handler: 10MB files, 5 backups
        handler = RotatingFileHandler(
            logfile_path,
            maxBytes=10_000_000,   # 10 MB
            backupCount=5,
            encoding='utf-8'
        )

        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(message)s",
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        handler.setFormatter(formatter)

        logger.addHandler(handler)

    return logger


def reset_audit_logger():
    """Close and drop the audit logger's handlers (for tests)."""
    logger = logging.getLogger(AUDIT_LOGGER_NAME)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
