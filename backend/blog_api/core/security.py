from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import jwt
from passlib.context import CryptContext
from blog_api.core.config import settings

# bcrypt generates and embeds a salt per hash
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a hash using constant-time comparison"""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password using bcrypt"""
    return pwd_context.hash(password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT access token with expiration"""
    # Copy so the caller's claims dict is left untouched
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(
            timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    # jose converts the datetime to a numeric timestamp and checks it on decode
    to_encode.update({"exp": expire})

    encoded_jwt = jwt.encode(
        to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    return encoded_jwt


def create_user_token(user, expires_delta: Optional[timedelta] = None) -> str:
    """Issue a token carrying the user's identity claims (id, name, email)"""
    return create_access_token(
        data={"id": user.id, "name": user.name, "email": user.email},
        expires_delta=expires_delta,
    )


def decode_access_token(token: str) -> dict:
    """
    Decode and verify a JWT token.

    Raises jose.ExpiredSignatureError when the token is past its exp claim and
    jose.JWTError for any other invalid, tampered or foreign token. Callers
    tell the two apart to report expiry separately.
    """
    return jwt.decode(token, settings.SECRET_KEY,
                      algorithms=[settings.ALGORITHM])
