import sys
import os
from pathlib import Path
from typing import Optional, Union
from loguru import logger

# Flag to track if logging has been configured
_logging_configured = False

DEFAULT_LOG_DIR = ".contextbundle/logs"

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").lower() in ("1", "true", "yes")


def setup_logging(
    level: Optional[str] = None,
    suppress_console: Optional[bool] = None,
    enable_file_logging: Optional[bool] = None,
    log_dir: Optional[Union[str, Path]] = None,
):
    """
    Configures the global logger.

    Grouping and pruning decisions are logged at DEBUG, budget failures at
    INFO. Console output goes to stderr so stdout stays clean for bundles and
    JSON. File logging is opt-in.

    Args:
        level: Console level. If None, CONTEXTBUNDLE_LOG_LEVEL or INFO.
        suppress_console: If True, no console sink. If None, check CONTEXTBUNDLE_MACHINE_MODE.
        enable_file_logging: If True, add a rotating file sink. If None, check CONTEXTBUNDLE_FILE_LOGGING.
        log_dir: Directory of the file sink. If None, CONTEXTBUNDLE_LOG_DIR or .contextbundle/logs.
    """
    global _logging_configured

    # Only configure once to avoid duplicate handlers
    if _logging_configured:
        return
    _logging_configured = True

    logger.remove()

    if level is None:
        level = os.getenv("CONTEXTBUNDLE_LOG_LEVEL", "INFO").upper()
    if suppress_console is None:
        suppress_console = _env_flag("CONTEXTBUNDLE_MACHINE_MODE")

    if not suppress_console:
        logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT, colorize=True)

    if enable_file_logging is None:
        enable_file_logging = _env_flag("CONTEXTBUNDLE_FILE_LOGGING")

    if enable_file_logging:
        log_dir = Path(log_dir or os.getenv("CONTEXTBUNDLE_LOG_DIR", DEFAULT_LOG_DIR))
        log_dir.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_dir / "contextbundle.log",
            level="DEBUG",
            rotation="10 MB",
            retention="1 day",
            compression="gz",
            catch=True,
            serialize=False
        )


def reset_logging():
    """Allow setup_logging() to reconfigure sinks (used by the CLI and tests)."""
    global _logging_configured
    _logging_configured = False


# Configure the logger on import (will check env var for machine mode)
setup_logging()
