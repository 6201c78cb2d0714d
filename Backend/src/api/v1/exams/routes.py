# -*- coding: utf-8 -*-
"""
Router of the exam engine.

History routes are registered first so ``/history`` and ``/history/all``
are never taken for an exam ID.
"""

from fastapi import APIRouter

from .admin import history as admin_history
from .student import active as student_active
from .student import history as student_history
from .student import status as student_status
from .student import submit as student_submit

router = APIRouter()

router.include_router(admin_history.router, tags=["Exams - Admin - History"])
router.include_router(student_history.router, tags=["Exams - History"])
router.include_router(student_active.router, tags=["Exams - Active attempt"])
router.include_router(student_submit.router, tags=["Exams - Submit"])
router.include_router(student_status.router, tags=["Exams - Status"])
