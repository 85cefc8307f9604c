"""
Authentication dependencies for FastAPI
Validates the bearer JWT and resolves the caller identity
"""

from typing import Optional
import jwt
from fastapi import Header, HTTPException, status

from review_service.core.config import config
from review_service.core.logger import logger
from review_service.models.user import User


class AuthError(Exception):
    """Custom authentication error"""
    def __init__(self, message: str, status_code: int = 401):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


def decode_jwt(token: str) -> dict:
    """
    Decode and validate JWT token

    Raises:
        AuthError: If token is invalid or expired
    """
    try:
        return jwt.decode(
            token,
            config.jwt_secret,
            algorithms=[config.jwt_algorithm]
        )
    except jwt.ExpiredSignatureError:
        raise AuthError("Token has expired", status.HTTP_401_UNAUTHORIZED)
    except jwt.InvalidTokenError as e:
        logger.warning(f"Invalid token: {str(e)}")
        raise AuthError("Invalid token", status.HTTP_401_UNAUTHORIZED)


async def get_current_user(
    authorization: Optional[str] = Header(None)
) -> User:
    """
    Dependency to extract and validate current user from JWT token.
    Raises 401 if authentication fails.
    """
    if not authorization:
        logger.warning("Authentication required: No token provided")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization header format. Expected 'Bearer <token>'",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = authorization.split(" ", 1)[1]

    try:
        payload = decode_jwt(token)
    except AuthError as e:
        logger.warning(f"Authentication failed: {e.message}")
        raise HTTPException(
            status_code=e.status_code,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        )

    # Compatible with the auth service token structure
    user_id = payload.get("id") or payload.get("user_id") or payload.get("sub")
    if not user_id:
        logger.warning("Invalid token: Missing user ID")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token: Missing user identifier",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = User(id=str(user_id))
    logger.debug(f"Authentication successful for user: {user.id}")

    return user
