from typing import List, Optional, Union
from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel
from sqlalchemy.orm import Session
from blog_api.core.database import get_db
from blog_api.api.dependencies import get_current_user, parse_id
from blog_api.models.user import User
from blog_api.schemas import MessageResponse, Pagination, PostOut
from blog_api.services.post_service import post_service

router = APIRouter(prefix="/posts", tags=["posts"])

MIN_MEANINGFUL_CONTENT = 5


class PostWrite(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None
    # Comma-separated string or list
    tags: Union[str, List[str], None] = None
    image: Optional[str] = None


class PostListResponse(BaseModel):
    message: str
    posts: List[PostOut]
    pagination: Pagination


class PostResponse(BaseModel):
    message: str
    post: PostOut


def _require_title_and_content(payload: PostWrite) -> None:
    if not payload.title or not payload.content:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Title and content are required"
        )


@router.get("", response_model=PostListResponse)
async def list_posts(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: str = "",
    db: Session = Depends(get_db)
):
    """List posts newest first, one page at a time"""
    # search is filtered client-side over the returned page
    posts, pagination = post_service.list_posts(db, page=page, limit=limit)
    return {
        "message": "Posts retrieved successfully",
        "posts": posts,
        "pagination": pagination,
    }


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(post_id: str, db: Session = Depends(get_db)):
    """Get a single post"""
    post = post_service.get_post(db, parse_id(post_id, "post"))
    return {"message": "Post retrieved successfully", "post": post}


@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    payload: PostWrite,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Create a post authored by the current user"""
    _require_title_and_content(payload)
    if len(payload.content.strip()) < MIN_MEANINGFUL_CONTENT:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Content must contain at least {MIN_MEANINGFUL_CONTENT} meaningful characters"
        )

    post = post_service.create_post(
        db,
        author=current_user,
        title=payload.title,
        content=payload.content,
        tags=payload.tags,
        image=payload.image
    )
    return {"message": "Post created successfully", "post": post}


@router.put("/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: str,
    payload: PostWrite,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Edit a post. Only its author may do this"""
    post = post_service.get_owned_post(db, parse_id(post_id, "post"), current_user, "edit")
    _require_title_and_content(payload)

    post = post_service.update_post(
        db,
        post,
        title=payload.title,
        content=payload.content,
        tags=payload.tags,
        image=payload.image
    )
    return {"message": "Post updated successfully", "post": post}


@router.delete("/{post_id}", response_model=MessageResponse)
async def delete_post(
    post_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete a post. Only its author may do this"""
    post = post_service.get_owned_post(db, parse_id(post_id, "post"), current_user, "delete")
    post_service.delete_post(db, post)
    return {"message": "Post deleted successfully"}
