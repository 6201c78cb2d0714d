# -*- coding: utf-8 -*-
"""
LearnHub/Backend/src/repository/base.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Base repository operations for generic CRUD functionality.

Reusable asynchronous helpers on the SQLAlchemy 2.0 async ORM. They are
stateless so they can be used directly from tests and fixtures.
"""

from __future__ import annotations

from typing import Any, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.logger import configure_logger
from src.domain.models import Base

T = TypeVar("T", bound=Base)

logger = configure_logger(__name__)

# ---------------------------------------------------------------------------
# Generic helpers
# ---------------------------------------------------------------------------


async def find_item(session: AsyncSession, model: Type[T], item_id: int) -> T | None:
    """Retrieve a single item by ID, or None."""
    stmt = select(model).where(getattr(model, "id") == item_id)
    result = await session.execute(stmt)
    return result.scalars().first()


async def create_item(session: AsyncSession, model: Type[T], **kwargs: Any) -> T:
    """Create a new item in the database."""
    instance = model(**kwargs)
    session.add(instance)
    await session.commit()
    await session.refresh(instance)
    logger.debug(f"Created {model.__name__} with ID {getattr(instance, 'id', None)}")
    return instance
