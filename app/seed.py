"""
Create the default doctor account on an empty database.

Usage:
    python -m app.seed
"""

import asyncio

from app.core.logging import logger
from app.core.security import get_password_hash
from app.database import Database
from app.features.auth.models import User


DEFAULT_EMAIL = "doctor@example.com"
DEFAULT_PASSWORD = "password123"


async def seed_default_user() -> bool:
    """Insert the default doctor unless any user exists. Returns True if one was created."""
    if await User.count() > 0:
        logger.info("Database already seeded. Skipping seed operation.")
        return False

    user = User(
        email=DEFAULT_EMAIL,
        password_hash=get_password_hash(DEFAULT_PASSWORD),
        first_name="John",
        last_name="Smith",
        role="DOCTOR",
    )
    await user.insert()

    logger.info(f"Default user created: {DEFAULT_EMAIL} / {DEFAULT_PASSWORD}")
    return True


async def main():
    await Database.connect_db()
    try:
        await seed_default_user()
    finally:
        await Database.close_db()


if __name__ == "__main__":
    asyncio.run(main())
