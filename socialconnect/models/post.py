"""Post model."""
import uuid
from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import relationship

from socialconnect.db.session import Base

POST_MAX_LENGTH = 280
CATEGORIES = ("general", "announcement", "question")


class Post(Base):
    __tablename__ = "posts"
    __table_args__ = (
        CheckConstraint(f"length(content) <= {POST_MAX_LENGTH}", name="ck_posts_content_length"),
        CheckConstraint("category IN ('general', 'announcement', 'question')", name="ck_posts_category"),
        CheckConstraint("like_count >= 0", name="ck_posts_like_count"),
        CheckConstraint("comment_count >= 0", name="ck_posts_comment_count"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    author_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    image_url = Column(Text, nullable=True)
    category = Column(String(50), nullable=False, default="general")
    is_active = Column(Boolean, nullable=False, default=True)
    like_count = Column(Integer, nullable=False, default=0)
    comment_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    author = relationship("User", back_populates="posts")
    comments = relationship("Comment", back_populates="post", cascade="all, delete-orphan")
    likes = relationship("Like", back_populates="post", cascade="all, delete-orphan")
    notifications = relationship("Notification", back_populates="post", cascade="all, delete-orphan")
