#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Database initialization.

1. Apply Alembic migrations
2. Create the system administrator
"""

import asyncio
import subprocess
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent.parent))

from src.config.logger import configure_logger  # noqa: E402

logger = configure_logger(__name__)


async def init_database():
    """Migrate the schema and make sure an admin exists."""
    try:
        print("🚀 Initializing the database...")

        print("🔄 Applying migrations...")
        result = subprocess.run(
            ["alembic", "-c", "alembic.ini", "upgrade", "head"],
            capture_output=True,
            text=True,
            cwd=Path(__file__).parent.parent,
        )
        if result.returncode != 0:
            print(f"❌ Migrations failed: {result.stderr}")
            print(f"stdout: {result.stdout}")
            sys.exit(1)
        print("✅ Migrations applied")

        print("👤 Creating the administrator...")
        from scripts.create_admin import create_admin_user

        await create_admin_user()

        print("🎉 Database initialized")

    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        print(f"❌ Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(init_database())
