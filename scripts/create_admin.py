import asyncio
import os
import sys

# Add project root to sys.path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import select

from socialconnect.core.security import get_password_hash
from socialconnect.db.session import async_session_maker
from socialconnect.models.user import User


async def create_admin(email: str, username: str, password: str) -> bool:
    email = email.strip().lower()
    async with async_session_maker() as session:
        res = await session.execute(select(User).where((User.email == email) | (User.username == username)))
        if res.scalar_one_or_none():
            print(f"Error: User with email '{email}' or username '{username}' already exists.")
            return False

        user = User(
            email=email,
            username=username,
            password_hash=get_password_hash(password),
            first_name="Admin",
            role="admin",
        )
        session.add(user)
        await session.commit()
        print("Success: Admin created!")
        print(f"Email: {email}")
        print(f"Username: {username}")
        return True


if __name__ == "__main__":
    if len(sys.argv) < 4:
        print("Usage: python scripts/create_admin.py <email> <username> <password>")
        sys.exit(1)

    ok = asyncio.run(create_admin(sys.argv[1], sys.argv[2], sys.argv[3]))
    sys.exit(0 if ok else 1)
