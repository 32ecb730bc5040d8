from typing import List, Optional
from sqlalchemy.orm import Session, joinedload
from ..models.review import Review
from .base import BaseRepository

class ReviewRepository(BaseRepository[Review]):
    """Repository for Review model"""
    
    def __init__(self, db: Session):
        super().__init__(Review, db)
    
    def get_by_project_and_reviewer(self, project_id: int, reviewer_id: int) -> Optional[Review]:
        """Get the review a user left on a project"""
        return self.db.query(Review).filter(
            Review.project_id == project_id,
            Review.reviewer_id == reviewer_id
        ).first()
    
    def get_by_project_id(self, project_id: int) -> List[Review]:
        """Get all reviews for a project with their reviewers, newest first"""
        return self.db.query(Review).options(
            joinedload(Review.reviewer)
        ).filter(
            Review.project_id == project_id
        ).order_by(Review.created_at.desc(), Review.id.desc()).all()
    
    def delete_by_project_id(self, project_id: int) -> int:
        """Delete all reviews of a project"""
        return self.db.query(Review).filter(
            Review.project_id == project_id
        ).delete(synchronize_session=False)
