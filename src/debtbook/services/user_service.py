"""User service — registration, credential checks, lookup.

Learn: The rest of the system only ever needs a user's id. This service
owns everything else about users: uniqueness of usernames, password
hashing, and resolving an id from a token back to a User row.
"""

import uuid
from typing import Optional

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from debtbook.auth.password import hash_password, needs_rehash, verify_password
from debtbook.db.models import User
from debtbook.errors import ValidationError

logger = structlog.get_logger()

MAX_USERNAME_LENGTH = 100


class UserService:
    """Business logic for user accounts."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, user_id: str | uuid.UUID) -> Optional[User]:
        """Resolve a user by id. Malformed ids resolve to nothing."""
        if not isinstance(user_id, uuid.UUID):
            try:
                user_id = uuid.UUID(str(user_id))
            except ValueError:
                return None
        return await self.db.get(User, user_id)

    async def get_by_username(self, username: str) -> Optional[User]:
        result = await self.db.execute(
            select(User).where(User.username == username)
        )
        return result.scalars().first()

    async def register(self, username: str, password: str) -> User:
        """Create a new account. Raises ValidationError on bad input or a taken name."""
        if not username or not password:
            raise ValidationError("Username and password are required")
        if len(username) > MAX_USERNAME_LENGTH:
            raise ValidationError(
                f"Username cannot exceed {MAX_USERNAME_LENGTH} characters"
            )

        if await self.get_by_username(username):
            raise ValidationError("User already exists")

        user = User(username=username, password_hash=hash_password(password))
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration of the same name.
            await self.db.rollback()
            raise ValidationError("User already exists")

        logger.info("user.registered", user_id=str(user.id))
        return user

    async def authenticate(self, username: str, password: str) -> Optional[User]:
        """Return the user if the credentials match, else None."""
        user = await self.get_by_username(username)
        if not user or not verify_password(password, user.password_hash):
            logger.info("auth.login_failed", username=username)
            return None

        if needs_rehash(user.password_hash):
            user.password_hash = hash_password(password)
            await self.db.commit()
            logger.info("auth.password_rehashed", user_id=str(user.id))
        return user
