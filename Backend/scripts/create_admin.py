#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Create the system administrator and print an access token for it.

Login is handled outside this service, so the token is the way to call the
admin endpoints (e.g. ``/api/v1/exams/history/all``) from tooling.

Usage: python scripts/create_admin.py [email]
"""

import asyncio
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent.parent))

from sqlalchemy import select  # noqa: E402

from src.clients.database_client import AsyncSessionLocal  # noqa: E402
from src.config.logger import configure_logger  # noqa: E402
from src.domain.enums import Role  # noqa: E402
from src.domain.models import User  # noqa: E402
from src.repository.base import create_item  # noqa: E402
from src.security.security import create_access_token  # noqa: E402

logger = configure_logger(__name__)

DEFAULT_ADMIN_EMAIL = "admin@learnhub.local"


async def create_admin_user(email: str = DEFAULT_ADMIN_EMAIL) -> User:
    """Create the admin user unless it already exists."""
    async with AsyncSessionLocal() as session:
        result = await session.execute(select(User).where(User.email == email))
        admin_user = result.scalar_one_or_none()

        if admin_user is not None:
            print(f"✅ Admin {email} already exists (id {admin_user.id})")
            return admin_user

        admin_user = await create_item(
            session,
            User,
            email=email,
            name="System Administrator",
            role=Role.ADMIN,
            is_active=True,
        )
        print(f"✅ Admin {email} created (id {admin_user.id})")
        return admin_user


async def main(email: str) -> None:
    try:
        admin_user = await create_admin_user(email)
    except Exception as e:
        logger.error(f"Failed to create admin {email}: {e}")
        print(f"❌ Error: {e}")
        sys.exit(1)

    token = create_access_token({"sub": admin_user.id, "role": Role.ADMIN})
    print(f"   Access token: {token}")


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else DEFAULT_ADMIN_EMAIL))
