from typing import List, Optional, Tuple
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from ..repositories import UserRepository, ProjectRepository, ProjectSummary
from ..models import User
from ..exceptions import NotFoundError, ConflictError
from ..storage import AttachmentStore, AttachmentKind, IncomingFile
from .auth_service import validate_username
import logging

logger = logging.getLogger(__name__)

MIN_SEARCH_LENGTH = 2
MAX_SEARCH_RESULTS = 20


class UserService:
    """Service for user profiles and search"""

    def __init__(self, db: Session, attachment_store: AttachmentStore):
        self.user_repo = UserRepository(db)
        self.project_repo = ProjectRepository(db)
        self.attachment_store = attachment_store
        self.db = db

    def search_users(self, query: Optional[str]) -> List[User]:
        """Find users by username or full name; short queries match nobody"""
        query = (query or "").strip()
        if len(query) < MIN_SEARCH_LENGTH:
            return []
        return self.user_repo.search(query, limit=MAX_SEARCH_RESULTS)

    def get_user(self, user_id: int) -> User:
        """Get a user by id"""
        user = self.user_repo.get(user_id)
        if not user:
            raise NotFoundError("User", str(user_id))
        return user

    def get_public_profile(self, user_id: int) -> Tuple[User, List[ProjectSummary]]:
        """Get a user with the projects they authored"""
        user = self.get_user(user_id)
        return user, self.project_repo.list_summaries(author_id=user_id)

    def update_profile(
        self,
        user_id: int,
        username: Optional[str] = None,
        full_name: Optional[str] = None,
        bio: Optional[str] = None,
        avatar: Optional[IncomingFile] = None
    ) -> Tuple[User, Optional[str]]:
        """
        Update the caller's profile. Empty values keep the current ones.

        Returns the updated user and the avatar reference it replaced, if
        any, so the caller can remove the old bytes.
        """
        logger.info(f"Updating profile for user {user_id}")
        user = self.get_user(user_id)

        if username and username != user.username:
            validate_username(username)
            if self.user_repo.username_taken(username, exclude_id=user_id):
                logger.warning(f"Profile update failed: username taken - {username}")
                raise ConflictError("Username already taken")

        new_reference = None
        if avatar:
            # An unconfigured remote store returns None and the old avatar stays
            new_reference = self.attachment_store.store(avatar, str(user_id), AttachmentKind.AVATAR)
        replaced_reference = user.profile_picture if new_reference else None

        try:
            self.user_repo.update(
                user_id,
                username=username or user.username,
                full_name=full_name or user.full_name,
                bio=bio or user.bio,
                profile_picture=new_reference or user.profile_picture,
            )
            self.user_repo.commit()
        except IntegrityError as e:
            logger.warning(f"Profile update lost a uniqueness race for user {user_id}: {e.orig}")
            self.user_repo.rollback()
            self.attachment_store.remove(new_reference)
            raise ConflictError("Username already taken")
        except Exception as e:
            logger.error(f"Error updating profile: {e}")
            self.user_repo.rollback()
            self.attachment_store.remove(new_reference)
            raise

        logger.info(f"Profile updated successfully for user {user_id}")
        return self.user_repo.refresh(user), replaced_reference
