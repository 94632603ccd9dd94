from socialconnect.models.user import User
from socialconnect.models.post import Post
from socialconnect.models.comment import Comment
from socialconnect.models.engagement import Follow, Like
from socialconnect.models.notification import Notification

__all__ = ["User", "Post", "Comment", "Follow", "Like", "Notification"]
