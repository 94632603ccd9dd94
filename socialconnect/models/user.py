"""User (account) model."""
import uuid
from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Integer, String, Text, Uuid
from sqlalchemy.orm import relationship

from socialconnect.db.session import Base

ROLES = ("user", "admin")
PROFILE_VISIBILITIES = ("public", "private", "followers_only")


class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("role IN ('user', 'admin')", name="ck_users_role"),
        CheckConstraint(
            "profile_visibility IN ('public', 'private', 'followers_only')",
            name="ck_users_profile_visibility",
        ),
        CheckConstraint("followers_count >= 0", name="ck_users_followers_count"),
        CheckConstraint("following_count >= 0", name="ck_users_following_count"),
        CheckConstraint("posts_count >= 0", name="ck_users_posts_count"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    username = Column(String(30), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    bio = Column(String(160), nullable=True)
    avatar_url = Column(Text, nullable=True)
    website = Column(Text, nullable=True)
    location = Column(String(100), nullable=True)
    role = Column(String(20), nullable=False, default="user")
    profile_visibility = Column(String(20), nullable=False, default="public")
    is_active = Column(Boolean, nullable=False, default=True)
    followers_count = Column(Integer, nullable=False, default=0)
    following_count = Column(Integer, nullable=False, default=0)
    posts_count = Column(Integer, nullable=False, default=0)
    last_login = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    posts = relationship("Post", back_populates="author")
    comments = relationship("Comment", back_populates="user")
    likes = relationship("Like", back_populates="user")
    following = relationship("Follow", foreign_keys="Follow.follower_id", back_populates="follower")
    followers_rel = relationship("Follow", foreign_keys="Follow.following_id", back_populates="following")
    notifications = relationship(
        "Notification",
        foreign_keys="Notification.user_id",
        back_populates="user",
    )

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
