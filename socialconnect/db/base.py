"""SQLAlchemy declarative base and model imports for Alembic."""
from socialconnect.db.session import Base  # noqa: F401
from socialconnect.models.user import User  # noqa: F401
from socialconnect.models.post import Post  # noqa: F401
from socialconnect.models.comment import Comment  # noqa: F401
from socialconnect.models.engagement import Follow, Like  # noqa: F401
from socialconnect.models.notification import Notification  # noqa: F401

__all__ = ["Base", "User", "Post", "Comment", "Follow", "Like", "Notification"]
