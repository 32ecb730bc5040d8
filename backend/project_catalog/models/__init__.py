from .user import User
from .project import Project
from .project_file import ProjectFile
from .review import Review

__all__ = [
    "User",
    "Project",
    "ProjectFile",
    "Review",
]
