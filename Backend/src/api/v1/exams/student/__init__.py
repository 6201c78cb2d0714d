"""
Exam operations of the user taking the exam.
"""

from .active import router as active_router
from .history import router as history_router
from .status import router as status_router
from .submit import router as submit_router

__all__ = [
    "active_router",
    "history_router",
    "status_router",
    "submit_router",
]
