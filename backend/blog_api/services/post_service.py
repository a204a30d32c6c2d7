import logging
import math
from typing import List, Optional, Tuple, Union
from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from blog_api.models.post import Post
from blog_api.models.user import User
from blog_api.schemas import Pagination, PostDocument, normalize_tags

logger = logging.getLogger(__name__)

POST_NOT_FOUND_MESSAGE = "Post not found"


def build_pagination(page: int, limit: int, total: int) -> Pagination:
    """Pagination summary for a page of `limit` items out of `total`"""
    total_pages = math.ceil(total / limit) if limit else 0
    return Pagination(
        current_page=page,
        total_pages=total_pages,
        total_posts=total,
        has_next_page=page * limit < total,
        has_prev_page=page > 1,
    )


class PostService:
    @staticmethod
    def list_posts(db: Session, page: int = 1, limit: int = 10) -> Tuple[List[Post], Pagination]:
        """One page of posts, newest first, with its pagination summary"""
        # Count first so the offset can be checked against it
        total = db.query(Post).count()
        offset = (page - 1) * limit

        # A page past the end is empty; skipping the query also keeps huge
        # page numbers from reaching the driver as out-of-range integers
        if offset >= total:
            return [], build_pagination(page, limit, total)

        # Ties on created_at (same clock tick) fall back to id, newest first
        posts = db.query(Post).order_by(
            Post.created_at.desc(), Post.id.desc()
        ).offset(offset).limit(limit).all()
        return posts, build_pagination(page, limit, total)

    @staticmethod
    def get_post(db: Session, post_id: int) -> Post:
        post = db.query(Post).filter(Post.id == post_id).first()
        if not post:
            raise HTTPException(status_code=404, detail=POST_NOT_FOUND_MESSAGE)
        return post

    @staticmethod
    def get_owned_post(db: Session, post_id: int, user: User, action: str) -> Post:
        """
        Fetch a post the caller is about to modify.

        404 when it does not exist, 403 when the caller is not its author.
        """
        post = PostService.get_post(db, post_id)
        if post.author_id != user.id:
            logger.warning(f"User {user.id} tried to {action} post {post.id} owned by {post.author_id}")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Forbidden: You can only {action} your own posts"
            )
        return post

    @staticmethod
    def create_post(
        db: Session,
        author: User,
        title: str,
        content: str,
        tags: Union[str, List[str], None] = None,
        image: Optional[str] = None
    ) -> Post:
        """Create a post owned by `author`, copying the author's name onto it"""
        document = PostDocument(
            title=title,
            content=content,
            tags=normalize_tags(tags),
            image=image or "",
        )
        # author_name is denormalized so lists need no join on users
        post = Post(
            **document.model_dump(),
            author_id=author.id,
            author_name=author.name,
        )
        db.add(post)
        db.commit()
        db.refresh(post)
        logger.info(f"User {author.id} created post {post.id}")
        return post

    @staticmethod
    def update_post(
        db: Session,
        post: Post,
        title: str,
        content: str,
        tags: Union[str, List[str], None] = None,
        image: Optional[str] = None
    ) -> Post:
        """
        Replace a post's editable fields.

        Empty or missing tags keep the stored tags and a missing image keeps
        the stored image. The merged record is validated again before saving.
        """
        new_tags = normalize_tags(tags)
        # Counters are not editable here but are checked with the rest of the record
        document = PostDocument(
            title=title,
            content=content,
            tags=new_tags or list(post.tags or []),
            image=image if image is not None else post.image,
            likes=post.likes,
            views=post.views,
        )
        post.title = document.title
        post.content = document.content
        post.tags = document.tags
        post.image = document.image
        db.commit()
        db.refresh(post)
        logger.info(f"Post {post.id} updated")
        return post

    @staticmethod
    def delete_post(db: Session, post: Post) -> None:
        post_id = post.id
        db.delete(post)
        db.commit()
        logger.info(f"Post {post_id} deleted")


post_service = PostService()
