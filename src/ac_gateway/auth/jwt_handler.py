"""Access-token verification (HS256, shared JWT_SECRET).

Tokens are minted by the identity service; this backend only checks them.
"""

from typing import Any

from jose import JWTError, jwt

from config.settings import settings
from src.ac_common.errors import InvalidCredentialsError

ACCESS_TOKEN_TYPE = "access"


def decode_access_token(token: str) -> dict[str, Any]:
    """Verify signature, expiry and token type; return the claims.

    Raises:
        InvalidCredentialsError: for any token that fails verification.
    """
    try:
        claims: dict[str, Any] = jwt.decode(
            token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM]
        )
    except JWTError:
        raise InvalidCredentialsError() from None

    if claims.get("type") != ACCESS_TOKEN_TYPE:
        raise InvalidCredentialsError()
    return claims


def subject_from_token(token: str) -> str:
    """User id carried in ``sub``; a token without one is invalid."""
    subject = decode_access_token(token).get("sub")
    if not isinstance(subject, str) or not subject:
        raise InvalidCredentialsError()
    return subject
