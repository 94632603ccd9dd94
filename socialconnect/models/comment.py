"""Comment model."""
import uuid
from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, ForeignKey, Text, Uuid
from sqlalchemy.orm import relationship

from socialconnect.db.session import Base

COMMENT_MAX_LENGTH = 500


class Comment(Base):
    __tablename__ = "comments"
    __table_args__ = (
        CheckConstraint(f"length(content) <= {COMMENT_MAX_LENGTH}", name="ck_comments_content_length"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    post_id = Column(Uuid, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="comments")
    post = relationship("Post", back_populates="comments")
    notifications = relationship("Notification", back_populates="comment", cascade="all, delete-orphan")
