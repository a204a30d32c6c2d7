import logging
from datetime import datetime, timezone
from typing import List, Optional
from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from blog_api.core.security import get_password_hash, verify_password
from blog_api.models.post import Post
from blog_api.models.user import User
from blog_api.schemas import NewUserDocument, UserDocument

logger = logging.getLogger(__name__)


class UserService:
    @staticmethod
    def get_by_email(db: Session, email: str) -> Optional[User]:
        """Look up a user by email, case-insensitively"""
        return db.query(User).filter(User.email == email.strip().lower()).first()

    @staticmethod
    def get_by_id(db: Session, user_id: int) -> Optional[User]:
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def register(
        db: Session,
        name: str,
        email: str,
        password: str,
        bio: Optional[str] = None
    ) -> User:
        """
        Create a user account.

        Field rules are checked first (pydantic ValidationError, rendered as
        400). An address that is already registered is a 400 as well, whether
        it is caught by the lookup or by the unique index when two
        registrations race.
        """
        document = NewUserDocument(name=name, email=email, password=password, bio=bio or "")

        # Cheap lookup first; the unique index below still catches races
        if UserService.get_by_email(db, document.email):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="User already exists"
            )

        user = User(
            name=document.name,
            email=document.email,
            hashed_password=get_password_hash(document.password),
            bio=document.bio,
        )
        try:
            db.add(user)
            db.commit()
            db.refresh(user)
        except IntegrityError:
            db.rollback()
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Email already registered"
            )
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Database error during registration")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Something went wrong during registration"
            )

        logger.info(f"Registered user {user.id}")
        return user

    @staticmethod
    def authenticate(db: Session, email: str, password: str) -> Optional[User]:
        """
        Return the user when email and password match, otherwise None.

        Callers must not reveal which of the two was wrong.
        """
        user = UserService.get_by_email(db, email)
        # verify_password is constant-time, so a wrong password does not leak timing
        if not user or not verify_password(password, user.hashed_password):
            return None
        return user

    @staticmethod
    def record_login(db: Session, user: User) -> User:
        """Stamp last_login once a login has been accepted"""
        user.last_login = datetime.now(timezone.utc)
        db.commit()
        # Reload server-managed columns (updated_at) after the commit
        db.refresh(user)
        return user

    @staticmethod
    def update_profile(
        db: Session,
        user: User,
        name: str,
        email: str,
        bio: Optional[str] = None,
        profile_pic: Optional[str] = None
    ) -> User:
        """Replace name and email; bio and profile_pic only change when given"""
        document = UserDocument(
            name=name,
            email=email,
            bio=bio if bio is not None else user.bio,
            profile_pic=profile_pic if profile_pic is not None else user.profile_pic,
        )

        # The address may only move to this user if nobody else holds it
        email_owner = db.query(User).filter(
            User.email == document.email,
            User.id != user.id
        ).first()
        if email_owner:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Email already in use by another user"
            )

        user.name = document.name
        user.email = document.email
        user.bio = document.bio
        user.profile_pic = document.profile_pic
        try:
            db.commit()
            db.refresh(user)
        except IntegrityError:
            db.rollback()
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Email already in use by another user"
            )

        logger.info(f"Updated profile for user {user.id}")
        return user

    @staticmethod
    def list_posts(db: Session, user_id: int) -> List[Post]:
        """All posts written by a user, newest first"""
        return db.query(Post).filter(
            Post.author_id == user_id
        ).order_by(Post.created_at.desc(), Post.id.desc()).all()


user_service = UserService()
