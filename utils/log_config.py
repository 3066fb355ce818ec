"""
Logging Setup
Configures loguru sinks for deployment scripts
"""

import sys
from typing import Optional
from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function} - {message}"


def configure_logging(level: str = "INFO", log_file: Optional[str] = None):
    """
    Replace loguru's default handler with the deployment sinks

    Args:
        level: Minimum level written to stderr
        log_file: Optional path of a rotating DEBUG log file
    """
    logger.remove()
    # Tracebacks must not dump local variables such as signing keys
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level.upper(), diagnose=False)

    if log_file:
        logger.add(
            log_file,
            rotation="1 day",
            retention="7 days",
            format=FILE_FORMAT,
            level="DEBUG",
            diagnose=False
        )
