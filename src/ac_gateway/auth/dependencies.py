"""FastAPI dependency resolving the Bearer token to an active UserModel.

    @router.get("/protected")
    async def protected(user: Annotated[UserModel, Depends(get_current_user)]):
        ...

Failures surface through the AppError handler, so unauthenticated callers get
the same ApiResponse envelope as every other error (401, or 403 when disabled).
"""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from src.ac_common.database import get_db_session
from src.ac_common.errors import AccountDisabledError, InvalidCredentialsError
from src.ac_gateway.auth.jwt_handler import subject_from_token
from src.ac_gateway.user.db_models import UserModel
from src.ac_gateway.user.persistence import UserRepository

bearer_scheme = HTTPBearer(auto_error=False)

_users = UserRepository()


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> UserModel:
    if credentials is None:
        raise InvalidCredentialsError()

    user = await _users.get_by_id(db, subject_from_token(credentials.credentials))
    if user is None:
        raise InvalidCredentialsError()
    if not user.is_active:
        raise AccountDisabledError()
    return user
