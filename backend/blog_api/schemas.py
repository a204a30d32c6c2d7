"""
Shared pydantic models.

Response projections render camelCase JSON (profilePic, authorName, ...) and
accept either camelCase or snake_case on input. The *Document models are the
write-side validation layer: services build one from the merged field values
before every insert or update, so a record that fails them is never written.
"""
import re
from datetime import datetime
from typing import List, Optional, Union
from pydantic import BaseModel, ConfigDict, EmailStr, field_serializer, field_validator
from pydantic.alias_generators import to_camel

MAX_TAGS = 10
MAX_TAG_LENGTH = 30
IMAGE_URL_PATTERN = re.compile(r"^(https?://[^\s$.?#].[^\s]*)$", re.IGNORECASE)


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class PublicProfile(CamelModel):
    """User fields that are safe to expose. Never includes the password hash."""
    id: int
    name: str
    email: str
    bio: str = ""
    profile_pic: str = ""
    created_at: Optional[datetime] = None
    last_login: Optional[datetime] = None

    @field_serializer('created_at', 'last_login')
    def serialize_timestamps(self, value: Optional[datetime], _info):
        return value.isoformat() if value else None


class PostOut(CamelModel):
    id: int
    title: str
    content: str
    author_id: int
    author_name: str
    tags: List[str] = []
    image: str = ""
    likes: int = 0
    views: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_serializer('created_at', 'updated_at')
    def serialize_timestamps(self, value: Optional[datetime], _info):
        return value.isoformat() if value else None


class Pagination(CamelModel):
    current_page: int
    total_pages: int
    total_posts: int
    has_next_page: bool
    has_prev_page: bool


class MessageResponse(BaseModel):
    message: str


def normalize_tags(tags: Union[str, List[str], None]) -> List[str]:
    """
    Normalize tags given as a comma-separated string or a list.

    Entries are trimmed, blanks dropped, and only the first MAX_TAGS kept.
    """
    if not tags:
        return []
    if isinstance(tags, str):
        tags = tags.split(",")
    cleaned = [tag.strip() for tag in tags if isinstance(tag, str) and tag.strip()]
    return cleaned[:MAX_TAGS]


def _trimmed(value):
    return value.strip() if isinstance(value, str) else value


class UserDocument(BaseModel):
    """Validation for a user record as it will be stored."""
    name: str
    email: EmailStr
    bio: str = ""
    profile_pic: str = ""

    @field_validator('name', mode='before')
    @classmethod
    def check_name(cls, value):
        value = _trimmed(value)
        if not value:
            raise ValueError("Name is required")
        if len(value) < 4:
            raise ValueError("Name must be at least 4 characters")
        if len(value) > 25:
            raise ValueError("Name cannot exceed 25 characters")
        return value

    @field_validator('email', mode='before')
    @classmethod
    def lowercase_email(cls, value):
        value = _trimmed(value)
        if not value:
            raise ValueError("Email is required")
        return value.lower() if isinstance(value, str) else value

    @field_validator('bio')
    @classmethod
    def check_bio(cls, value):
        if len(value) > 150:
            raise ValueError("Bio cannot exceed 150 characters")
        return value

    @field_validator('profile_pic', mode='before')
    @classmethod
    def default_profile_pic(cls, value):
        return _trimmed(value) or ""


class NewUserDocument(UserDocument):
    password: str

    @field_validator('password')
    @classmethod
    def check_password(cls, value):
        if len(value) < 6:
            raise ValueError("Password must be at least 6 characters")
        return value


class PostDocument(BaseModel):
    """Validation for a post record as it will be stored."""
    title: str
    content: str
    tags: List[str] = []
    image: str = ""
    likes: int = 0
    views: int = 0

    @field_validator('title', mode='before')
    @classmethod
    def check_title(cls, value):
        value = _trimmed(value)
        if not value:
            raise ValueError("Title must be provided")
        if len(value) < 5:
            raise ValueError("Title should be greater than 5 valid characters")
        if len(value) > 100:
            raise ValueError("Title should not exceed 100 characters")
        return value

    @field_validator('content', mode='before')
    @classmethod
    def check_content(cls, value):
        value = _trimmed(value)
        if not value:
            raise ValueError("Content cannot be empty")
        if len(value) < 10:
            raise ValueError("Minimum content should be 10 characters")
        if len(value) > 1000:
            raise ValueError("Cannot upload content of more than 1000 characters")
        return value

    @field_validator('tags')
    @classmethod
    def check_tags(cls, value):
        if len(value) > MAX_TAGS:
            raise ValueError(f"A post cannot have more than {MAX_TAGS} tags")
        if any(len(tag) > MAX_TAG_LENGTH for tag in value):
            raise ValueError(f"Tags cannot exceed {MAX_TAG_LENGTH} characters")
        return value

    @field_validator('image', mode='before')
    @classmethod
    def check_image(cls, value):
        value = _trimmed(value) or ""
        if value and not IMAGE_URL_PATTERN.match(value):
            raise ValueError("Image must be a valid URL")
        return value

    @field_validator('likes')
    @classmethod
    def check_likes(cls, value):
        if value < 0:
            raise ValueError("Likes cannot be negative")
        return value

    @field_validator('views')
    @classmethod
    def check_views(cls, value):
        if value < 0:
            raise ValueError("Views cannot be negative")
        return value
