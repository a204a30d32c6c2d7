from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from sqlalchemy.orm import Session
from blog_api.core.database import get_db
from blog_api.api.dependencies import get_current_user, parse_id
from blog_api.models.user import User
from blog_api.schemas import CamelModel, PostOut, PublicProfile
from blog_api.services.user_service import user_service

router = APIRouter(prefix="/users", tags=["users"])


class ProfileUpdate(CamelModel):
    name: Optional[str] = None
    email: Optional[str] = None
    bio: Optional[str] = None
    profile_pic: Optional[str] = None


class OwnProfileResponse(CamelModel):
    message: str
    profile: PublicProfile
    posts: List[PostOut]
    posts_count: int


class UserProfileResponse(CamelModel):
    message: str
    user: PublicProfile
    posts: List[PostOut]
    posts_count: int


class UserPostsResponse(CamelModel):
    message: str
    posts: List[PostOut]
    posts_count: int


class ProfileUpdateResponse(BaseModel):
    message: str
    profile: PublicProfile


# Fixed paths are declared before /{user_id} so they are matched first

@router.get("/profile", response_model=OwnProfileResponse)
async def get_own_profile(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Current user's profile and posts"""
    posts = user_service.list_posts(db, current_user.id)
    return {
        "message": "Profile retrieved successfully",
        "profile": current_user,
        "posts": posts,
        "posts_count": len(posts),
    }


@router.put("/profile", response_model=ProfileUpdateResponse)
async def update_own_profile(
    payload: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Edit the current user's profile"""
    if not payload.name or not payload.email:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Name and email fields are required!"
        )

    user = user_service.update_profile(
        db,
        current_user,
        name=payload.name,
        email=payload.email,
        bio=payload.bio,
        profile_pic=payload.profile_pic
    )
    return {"message": "Profile updated successfully!", "profile": user}


@router.get("/posts/me", response_model=UserPostsResponse)
async def get_own_posts(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Only the current user's posts"""
    posts = user_service.list_posts(db, current_user.id)
    return {
        "message": "User posts retrieved successfully",
        "posts": posts,
        "posts_count": len(posts),
    }


@router.get("/{user_id}", response_model=UserProfileResponse)
async def get_user_profile(user_id: str, db: Session = Depends(get_db)):
    """Public profile of any user, with their posts"""
    user = user_service.get_by_id(db, parse_id(user_id, "user"))
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    posts = user_service.list_posts(db, user.id)
    return {
        "message": "User profile retrieved successfully",
        "user": user,
        "posts": posts,
        "posts_count": len(posts),
    }
