from pydantic import BaseModel, ConfigDict
from typing import Optional, List
from datetime import datetime
from .project import Project


class UserIdentity(BaseModel):
    id: int
    username: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class UserAccount(UserIdentity):
    created_at: Optional[datetime] = None


class UserPublic(BaseModel):
    id: int
    username: str
    full_name: Optional[str] = None
    profile_picture: Optional[str] = None
    bio: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class UserPrivate(UserPublic):
    email: str


class UserProfile(BaseModel):
    user: UserPublic
    projects: List[Project]
