import asyncio
import os
import sys

# Add project root to sys.path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import select

from socialconnect.db.session import async_session_maker
from socialconnect.models.user import User


async def promote_user(identifier: str) -> bool:
    """
    Give an existing account the admin role.
    identifier can be email or username.
    """
    async with async_session_maker() as session:
        if "@" in identifier:
            stmt = select(User).where(User.email == identifier.strip().lower())
        else:
            stmt = select(User).where(User.username == identifier)

        result = await session.execute(stmt)
        user = result.scalar_one_or_none()

        if not user:
            print(f"Error: User '{identifier}' not found.")
            return False

        user.role = "admin"
        await session.commit()
        print(f"Success: User '{user.username}' ({user.email}) is now an admin.")
        return True


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python scripts/make_admin.py <email_or_username>")
        sys.exit(1)

    ok = asyncio.run(promote_user(sys.argv[1]))
    sys.exit(0 if ok else 1)
