from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime


class ProjectBase(BaseModel):
    title: str = ""
    description: str = ""
    section: Optional[str] = None
    group_number: Optional[str] = None
    full_name: Optional[str] = None
    matricule: Optional[str] = None


class ProjectCreate(ProjectBase):
    pass


class ProjectUpdate(ProjectBase):
    """Full replacement: omitted optional fields are cleared"""
    pass


class Project(ProjectBase):
    id: int
    author_id: int
    author_name: Optional[str] = None
    file_path: Optional[str] = None
    avg_rating: float = 0.0
    review_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
