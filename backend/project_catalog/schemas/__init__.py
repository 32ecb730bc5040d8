from .project import Project, ProjectBase, ProjectCreate, ProjectUpdate
from .user import UserIdentity, UserAccount, UserPublic, UserPrivate, UserProfile
from .auth import UserRegister, UserLogin, Token, AuthResponse
from .review import Review, ReviewCreate, ReviewWithReviewer

__all__ = [
    "Project",
    "ProjectBase",
    "ProjectCreate",
    "ProjectUpdate",
    "UserIdentity",
    "UserAccount",
    "UserPublic",
    "UserPrivate",
    "UserProfile",
    "UserRegister",
    "UserLogin",
    "Token",
    "AuthResponse",
    "Review",
    "ReviewCreate",
    "ReviewWithReviewer",
]
