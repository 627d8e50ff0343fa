"""UserRepository: read-only lookups on the ORM-mapped users table."""

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.ac_gateway.user.db_models import UserModel


class UserRepository:
    async def get_by_id(self, db: AsyncSession, user_id: str) -> UserModel | None:
        try:
            user_uuid = uuid.UUID(str(user_id))
        except ValueError:
            return None
        result = await db.execute(select(UserModel).where(UserModel.id == user_uuid))
        return result.scalar_one_or_none()
