from typing import Annotated, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from pydantic import ValidationError

from libs.auth.models import AuthUser
from libs.common.config import get_settings

settings = get_settings()

# auto_error=False so a missing header is reported as 401, not 403
security = HTTPBearer(auto_error=False)


def decode_token(token: str) -> AuthUser:
    """
    Verify a bearer JWT and build the user it describes.
    """
    payload = jwt.decode(
        token,
        settings.JWT_SECRET,
        algorithms=[settings.JWT_ALGORITHM],
        options={"verify_aud": False},
    )
    return AuthUser(**payload)


def _credentials_exception() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    token: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
) -> AuthUser:
    """
    Require a valid bearer token and return the authenticated user.
    """
    if token is None:
        raise _credentials_exception()

    try:
        return decode_token(token.credentials)
    except (JWTError, ValidationError):
        raise _credentials_exception()


async def get_optional_user(
    token: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
) -> Optional[AuthUser]:
    """
    Return the user when a token is sent, None for anonymous callers.

    A token that is present but invalid is still rejected.
    """
    if token is None:
        return None

    try:
        return decode_token(token.credentials)
    except (JWTError, ValidationError):
        raise _credentials_exception()


async def require_admin(
    current_user: Annotated[AuthUser, Depends(get_current_user)],
) -> AuthUser:
    """
    Ensure the user carries the admin role claim.
    """
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required",
        )
    return current_user
