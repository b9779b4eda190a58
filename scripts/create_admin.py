#!/usr/bin/env python
"""Create an administrator account."""

import asyncio
import sys
from pathlib import Path

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from media_portal.config import get_settings
from media_portal.database import Database
from media_portal.repositories.admin_repository import AdminRepository
from media_portal.security.password import get_password_service


async def create_admin(username: str, email: str, password: str) -> bool:
    """Create an admin unless the username or email is taken."""
    settings = get_settings()
    if len(password) < settings.password_min_length:
        print(f"Password must be at least {settings.password_min_length} characters")
        return False

    db = Database.from_settings(settings)
    try:
        async with db.session() as session:
            repo = AdminRepository(session)
            if await repo.get_by_login(username) or await repo.get_by_login(email):
                print(f"Admin {username} <{email}> already exists")
                return False

            await repo.create(
                username=username,
                email=email.lower(),
                password_hash=get_password_service().hash_password(password),
                is_active=True,
            )
    finally:
        await db.disconnect()

    print(f"Admin created: {username} <{email}>")
    return True


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Create an administrator account")
    parser.add_argument("--username", required=True, help="Login name")
    parser.add_argument("--email", required=True, help="Email address")
    parser.add_argument("--password", required=True, help="Password")
    args = parser.parse_args()

    ok = asyncio.run(create_admin(args.username, args.email, args.password))
    sys.exit(0 if ok else 1)
