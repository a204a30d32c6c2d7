from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text, JSON, CheckConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from blog_api.core.database import Base


class Post(Base):
    """
    Post model representing a user-authored blog entry.

    author_name is a copy of the author's display name taken at creation time,
    so listing posts never needs a join. It is not rewritten when the author
    renames.
    """
    __tablename__ = "posts"
    __table_args__ = (
        CheckConstraint("likes >= 0", name="ck_posts_likes_non_negative"),
        CheckConstraint("views >= 0", name="ck_posts_views_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(100), nullable=False)
    content = Column(Text, nullable=False)
    # Set once from the authenticated user, never from the request body
    author_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    author_name = Column(String, nullable=False)
    tags = Column(JSON, nullable=False, default=list)
    image = Column(String, nullable=False, default="")
    likes = Column(Integer, nullable=False, default=0)
    views = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    author = relationship("User", back_populates="posts")
