import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from sqlalchemy.orm import Session
from blog_api.core.database import get_db
from blog_api.core.security import create_user_token
from blog_api.models.user import User
from blog_api.api.dependencies import get_current_user
from blog_api.schemas import PublicProfile
from blog_api.services.user_service import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

INVALID_CREDENTIALS_MESSAGE = "Invalid Credentials"


class RegisterRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    bio: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class AuthResponse(BaseModel):
    message: str
    token: str
    user: PublicProfile


class MeResponse(BaseModel):
    message: str
    user: PublicProfile


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    """Register a new user and sign them in"""
    if not (payload.name and payload.email and payload.password):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Name, email and password are required"
        )

    user = user_service.register(
        db,
        name=payload.name,
        email=payload.email,
        password=payload.password,
        bio=payload.bio
    )
    return {
        "message": "User registered successfully",
        "token": create_user_token(user),
        "user": user,
    }


@router.post("/login", response_model=AuthResponse)
async def login(payload: LoginRequest, db: Session = Depends(get_db)):
    """Login and get a bearer token"""
    if not (payload.email and payload.password):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Both fields are required"
        )

    # Same message for unknown email and wrong password
    user = user_service.authenticate(db, payload.email, payload.password)
    if user is None:
        logger.info("Rejected login attempt")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=INVALID_CREDENTIALS_MESSAGE
        )

    # Checked before the login is recorded so a refused login leaves no trace
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is inactive"
        )

    user = user_service.record_login(db, user)
    logger.info(f"New login for user {user.id}")
    return {
        "message": "Login successful",
        "token": create_user_token(user),
        "user": user,
    }


@router.get("/me", response_model=MeResponse)
async def get_current_user_info(current_user: User = Depends(get_current_user)):
    """Get current user information"""
    return {
        "message": "User profile retrieved successfully",
        "user": current_user,
    }
