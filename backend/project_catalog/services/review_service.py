from typing import List, Optional, Tuple
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from ..repositories import ProjectRepository, ReviewRepository
from ..models import Review
from ..schemas import ReviewCreate
from ..exceptions import NotFoundError, ValidationError
import logging

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


class ReviewService:
    """Service for project reviews: one review per (project, reviewer)"""

    def __init__(self, db: Session):
        self.review_repo = ReviewRepository(db)
        self.project_repo = ProjectRepository(db)
        self.db = db

    def _require_project(self, project_id: int) -> None:
        if not self.project_repo.exists(project_id):
            raise NotFoundError("Project", str(project_id))

    def _overwrite(self, review: Review, review_data: ReviewCreate) -> Review:
        review.rating = review_data.rating
        review.comment = review_data.comment or None
        self.db.flush()
        return review

    def upsert_review(self, project_id: int, reviewer_id: int, review_data: ReviewCreate) -> Tuple[Review, bool]:
        """
        Create or overwrite the reviewer's review of a project.

        Returns the review and True when a new row was inserted, False when an
        existing one was overwritten in place (same id).
        """
        if review_data.rating is None or not MIN_RATING <= review_data.rating <= MAX_RATING:
            raise ValidationError(f"Rating must be between {MIN_RATING} and {MAX_RATING}")
        self._require_project(project_id)

        logger.info(f"User {reviewer_id} reviewing project {project_id} with rating {review_data.rating}")

        try:
            existing = self.review_repo.get_by_project_and_reviewer(project_id, reviewer_id)
            if existing:
                review = self._overwrite(existing, review_data)
                created = False
            else:
                review = self.review_repo.create(
                    project_id=project_id,
                    reviewer_id=reviewer_id,
                    rating=review_data.rating,
                    comment=review_data.comment or None
                )
                created = True
            self.review_repo.commit()
        except IntegrityError:
            # A concurrent request inserted the pair first; overwrite that row instead
            self.review_repo.rollback()
            existing = self.review_repo.get_by_project_and_reviewer(project_id, reviewer_id)
            if not existing:
                raise
            review = self._overwrite(existing, review_data)
            created = False
            self.review_repo.commit()
        except Exception as e:
            logger.error(f"Error saving review: {e}")
            self.review_repo.rollback()
            raise

        self.review_repo.refresh(review)
        logger.info(f"Review {'created' if created else 'updated'} successfully: {review.id}")
        return review, created

    def list_reviews(self, project_id: int) -> List[Review]:
        """List a project's reviews with reviewer details, newest first"""
        self._require_project(project_id)
        return self.review_repo.get_by_project_id(project_id)

    def get_my_review(self, project_id: int, reviewer_id: int) -> Optional[Review]:
        """The caller's review of a project, or None if they have not reviewed it"""
        return self.review_repo.get_by_project_and_reviewer(project_id, reviewer_id)
