from .auth_service import AuthService
from .project_service import ProjectService
from .review_service import ReviewService
from .user_service import UserService

__all__ = [
    "AuthService",
    "ProjectService",
    "ReviewService",
    "UserService",
]
