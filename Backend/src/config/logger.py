# -*- coding: utf-8 -*-
"""
Logging setup for the learning platform, built on loguru.
"""
import logging
import os
import sys

from loguru import logger

# Drop loguru's default handler
logger.remove()


class InterceptHandler(logging.Handler):
    """Routes standard library log records into loguru."""

    def emit(self, record):
        # Uvicorn INFO chatter (Will watch, Started server, ...)
        if record.name.startswith("uvicorn") and record.levelno == logging.INFO:
            return

        # HTTP client internals
        if record.name.startswith(("httpx", "httpcore")):
            return

        # SQL statements are controlled by DATABASE_ECHO
        if record.name.startswith("sqlalchemy.engine") and record.levelno < logging.WARNING:
            return

        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = sys._getframe(6), 6
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

log_level = os.getenv("LOG_LEVEL", "INFO").upper()
log_file = os.getenv("LOG_FILE")
debug_mode = os.getenv("DEBUG", "false").lower() == "true"

console_format = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

# System messages carry no file paths
system_format = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>SYSTEM</cyan> | "
    "<level>{message}</level>"
)

file_format = (
    "{time:YYYY-MM-DD HH:mm:ss} | "
    "{level: <8} | "
    "{name}:{function}:{line} - "
    "{message}"
)

logger.add(
    sys.stdout,
    format=console_format,
    level=log_level,
    colorize=True,
    backtrace=False,
    diagnose=False,
    filter=lambda record: (record["level"].name != "TRACE" or debug_mode)
    and record["extra"].get("system") is not True,
)

logger.add(
    sys.stdout,
    format=system_format,
    level=log_level,
    colorize=True,
    backtrace=False,
    diagnose=False,
    filter=lambda record: record["extra"].get("system") is True,
)

if log_file:
    logger.add(
        log_file,
        format=file_format,
        level="INFO",
        rotation="20 MB",
        retention="14 days",
        enqueue=True,
        filter=lambda record: record["extra"].get("system") is not True,
    )


def configure_logger(name: str = "learnhub"):
    """
    Return the shared loguru logger bound to a module name.

    Args:
        name: Module name, stored in ``extra["module"]``

    Returns:
        loguru.Logger: Configured logger
    """
    return logger.bind(module=name)


def get_system_logger():
    """
    Logger for system messages printed without file paths.

    Returns:
        loguru.Logger: Logger tagged as system
    """
    return logger.bind(system=True)
