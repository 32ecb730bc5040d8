from pydantic import BaseModel, ConfigDict, StrictInt, model_validator
from typing import Optional
from datetime import datetime


class ReviewCreate(BaseModel):
    # Booleans and numeric strings are rejected rather than coerced
    rating: Optional[StrictInt] = None
    comment: Optional[str] = None


class Review(BaseModel):
    id: int
    project_id: int
    reviewer_id: int
    rating: int
    comment: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ReviewWithReviewer(Review):
    username: Optional[str] = None
    profile_picture: Optional[str] = None

    @model_validator(mode='before')
    @classmethod
    def flatten_reviewer(cls, data):
        """Copy username and avatar from the joined reviewer onto the review"""
        if hasattr(data, 'reviewer'):
            return {
                'id': data.id,
                'project_id': data.project_id,
                'reviewer_id': data.reviewer_id,
                'rating': data.rating,
                'comment': data.comment,
                'created_at': data.created_at,
                'updated_at': data.updated_at,
                'username': data.reviewer.username if data.reviewer else None,
                'profile_picture': data.reviewer.profile_picture if data.reviewer else None,
            }
        return data
