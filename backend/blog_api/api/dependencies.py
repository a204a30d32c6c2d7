import logging
from fastapi import Depends, HTTPException, Request, status
from jose import ExpiredSignatureError, JWTError
from sqlalchemy.orm import Session
from blog_api.core.database import get_db
from blog_api.core.security import decode_access_token
from blog_api.models.user import User

logger = logging.getLogger(__name__)

# Largest value an INTEGER primary key column holds
MAX_ID = 2**31 - 1


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def parse_id(raw_id: str, label: str) -> int:
    """
    Validate the format of a record id taken from the URL.

    Ids are positive integers. Anything else is rejected with 400 before the
    database is queried.
    """
    raw_id = raw_id.strip()
    if not (raw_id.isascii() and raw_id.isdigit()) or not 1 <= int(raw_id) <= MAX_ID:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {label} ID"
        )
    return int(raw_id)


async def get_current_user(
    request: Request,
    db: Session = Depends(get_db)
) -> User:
    """
    Get current authenticated user from the bearer token.

    Used by route handlers that require authentication. Reads the
    "Authorization: Bearer <token>" header, verifies the token, loads the user
    it names and attaches it to request.state. Every failure is a 401 with a
    message describing which check failed; an expired token gets its own
    message so the client knows to log in again.
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        raise _unauthorized("Authorization header missing")

    # Expect exactly "Bearer <token>"; the scheme is matched case-insensitively
    scheme, _, token = auth_header.partition(" ")
    token = token.strip()
    if not token or scheme.lower() != "bearer":
        raise _unauthorized("Invalid authorization scheme or token")

    try:
        payload = decode_access_token(token)
    except ExpiredSignatureError:
        raise _unauthorized("Token expired. Please login again.")
    except JWTError:
        raise _unauthorized("Authentication failed")

    # Tokens signed with our key but missing an integer id claim are not ours
    user_id = payload.get("id")
    if not isinstance(user_id, int):
        raise _unauthorized("Authentication failed")

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        # User removed after the token was issued
        logger.warning(f"Token presented for unknown user id {user_id}")
        raise _unauthorized("Invalid token: user not found")

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is inactive"
        )

    # Read by the access log middleware once the response is ready
    request.state.user = user
    request.state.user_id = user.id
    return user
