"""
Credential store — ``User`` persistence over an async SQLAlchemy session.

E-mail uniqueness is enforced by the unique index on
``users.normalized_email``; concurrent registrations of the same address are
settled by the database, and the loser gets ``DuplicateEmailError``.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from auth.errors import DuplicateEmailError
from database.models import User, normalize_email, utcnow

logger = logging.getLogger(__name__)


def _to_uuid(value: str | uuid.UUID) -> Optional[uuid.UUID]:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


class UserStore:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def find_by_email(self, email: str) -> Optional[User]:
        result = await self.session.execute(
            select(User).where(User.normalized_email == normalize_email(email))
        )
        return result.scalar_one_or_none()

    async def find_by_id(self, user_id: str | uuid.UUID) -> Optional[User]:
        uid = _to_uuid(user_id)
        if uid is None:
            return None
        return await self.session.get(User, uid)

    async def create(
        self,
        email: str,
        password_hash: str,
        *,
        first_name: str,
        last_name: str,
        date_of_birth: date,
    ) -> User:
        """
        Insert a new user.  Raises ``DuplicateEmailError`` if the e-mail is taken,
        after rolling back the session's pending transaction.
        """
        now = utcnow()
        user = User(
            id=uuid.uuid4(),
            email=email.strip(),
            normalized_email=normalize_email(email),
            password_hash=password_hash,
            first_name=first_name,
            last_name=last_name,
            date_of_birth=date_of_birth,
            created_at=now,
            updated_at=now,
        )
        self.session.add(user)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            await self.session.rollback()
            raise DuplicateEmailError(email) from exc

        logger.debug("Created user %s", user.id)
        return user

    async def count(self) -> int:
        result = await self.session.execute(select(func.count()).select_from(User))
        return result.scalar_one()
