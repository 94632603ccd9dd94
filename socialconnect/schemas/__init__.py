from socialconnect.schemas.user import (
    UserCreate,
    UserUpdate,
    UserResponse,
    UserPublic,
    Token,
    LoginRequest,
)
from socialconnect.schemas.post import PostCreate, PostUpdate, PostResponse
from socialconnect.schemas.comment import CommentCreate, CommentResponse
from socialconnect.schemas.notification import NotificationResponse
from socialconnect.schemas.pagination import Pagination, PageParams
