from .base import BaseRepository
from .user_repository import UserRepository
from .project_repository import ProjectRepository, ProjectSummary
from .project_file_repository import ProjectFileRepository
from .review_repository import ReviewRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "ProjectRepository",
    "ProjectSummary",
    "ProjectFileRepository",
    "ReviewRepository",
]
