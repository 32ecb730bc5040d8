from typing import List, Optional
from sqlalchemy import or_
from sqlalchemy.orm import Session
from ..models.user import User
from .base import BaseRepository

LIKE_ESCAPE = "\\"


def _contains_pattern(text: str) -> str:
    """Build a LIKE pattern that matches text literally anywhere"""
    escaped = (
        text.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


class UserRepository(BaseRepository[User]):
    """Repository for User model"""
    
    def __init__(self, db: Session):
        super().__init__(User, db)
    
    def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email"""
        return self.db.query(User).filter(User.email == email).first()
    
    def get_by_username(self, username: str) -> Optional[User]:
        """Get user by username"""
        return self.db.query(User).filter(User.username == username).first()
    
    def get_by_email_or_username(self, email: str, username: str) -> Optional[User]:
        """Get any user holding this email or this username"""
        return self.db.query(User).filter(
            or_(User.email == email, User.username == username)
        ).first()
    
    def username_taken(self, username: str, exclude_id: Optional[int] = None) -> bool:
        """Check if another user already has this username"""
        query = self.db.query(User.id).filter(User.username == username)
        if exclude_id:
            query = query.filter(User.id != exclude_id)
        return query.first() is not None
    
    def search(self, text: str, limit: int = 20) -> List[User]:
        """Case-insensitive substring match on username or full name"""
        pattern = _contains_pattern(text)
        return self.db.query(User).filter(
            or_(
                User.username.ilike(pattern, escape=LIKE_ESCAPE),
                User.full_name.ilike(pattern, escape=LIKE_ESCAPE),
            )
        ).order_by(User.id).limit(limit).all()
