# -*- coding: utf-8 -*-
"""
Uvicorn settings and routing of server logs into loguru.
"""

import logging

from src.config.logger import InterceptHandler
from src.config.settings import settings

_ROUTED_LOGGERS = {
    "uvicorn": logging.INFO,
    "uvicorn.error": logging.INFO,
    "uvicorn.access": logging.WARNING,  # access lines come from the request middleware
    "fastapi": logging.INFO,
    "sqlalchemy.engine": logging.WARNING,
    "sqlalchemy.pool": logging.WARNING,
}


def setup_uvicorn_logging() -> None:
    """Replace the handlers uvicorn installs with the loguru interceptor."""
    for name, level in _ROUTED_LOGGERS.items():
        logger_obj = logging.getLogger(name)
        logger_obj.handlers = [InterceptHandler()]
        logger_obj.propagate = False
        logger_obj.setLevel(level)


def get_uvicorn_config() -> dict:
    """Keyword arguments for ``uvicorn.run``."""
    return {
        "app": "src.main:app",
        "host": settings.app_host,
        "port": settings.app_port,
        "reload": settings.uvicorn_reload,
        "log_config": None,
        "access_log": False,
        "use_colors": True,
    }
