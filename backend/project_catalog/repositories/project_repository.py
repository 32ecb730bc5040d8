from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional
from sqlalchemy import func, select
from sqlalchemy.orm import Session
from ..models import Project, ProjectFile, Review, User
from .base import BaseRepository


@dataclass
class ProjectSummary:
    """A project row joined with its author, latest file and review aggregates"""
    id: int
    title: str
    description: str
    author_id: int
    section: Optional[str]
    group_number: Optional[str]
    full_name: Optional[str]
    matricule: Optional[str]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]
    author_name: Optional[str]
    file_path: Optional[str]
    avg_rating: float
    review_count: int


class ProjectRepository(BaseRepository[Project]):
    """Repository for Project model"""

    def __init__(self, db: Session):
        super().__init__(Project, db)

    def _summary_query(self):
        # Aggregate in a subquery so joining files cannot inflate the counts
        review_stats = (
            self.db.query(
                Review.project_id.label("project_id"),
                func.avg(Review.rating).label("avg_rating"),
                func.count(Review.id).label("review_count"),
            )
            .group_by(Review.project_id)
            .subquery()
        )
        latest_file = (
            select(ProjectFile.file_path)
            .where(ProjectFile.project_id == Project.id)
            .order_by(ProjectFile.uploaded_at.desc(), ProjectFile.id.desc())
            .limit(1)
            .correlate(Project)
            .scalar_subquery()
        )
        return (
            self.db.query(
                Project,
                User.username.label("author_name"),
                latest_file.label("file_path"),
                func.coalesce(review_stats.c.avg_rating, 0).label("avg_rating"),
                func.coalesce(review_stats.c.review_count, 0).label("review_count"),
            )
            .join(User, User.id == Project.author_id)
            .outerjoin(review_stats, review_stats.c.project_id == Project.id)
        )

    @staticmethod
    def _to_summary(row) -> ProjectSummary:
        project, author_name, file_path, avg_rating, review_count = row
        return ProjectSummary(
            id=project.id,
            title=project.title,
            description=project.description,
            author_id=project.author_id,
            section=project.section,
            group_number=project.group_number,
            full_name=project.full_name,
            matricule=project.matricule,
            created_at=project.created_at,
            updated_at=project.updated_at,
            author_name=author_name,
            file_path=file_path,
            # AVG is NUMERIC on PostgreSQL and REAL on SQLite
            avg_rating=float(avg_rating or 0),
            review_count=int(review_count or 0),
        )

    def list_summaries(
        self,
        section: Optional[str] = None,
        group: Optional[str] = None,
        author_id: Optional[int] = None,
    ) -> List[ProjectSummary]:
        """List projects with aggregates, newest first; filters are AND-ed"""
        query = self._summary_query()
        if section:
            query = query.filter(Project.section == section)
        if group:
            query = query.filter(Project.group_number == group)
        if author_id is not None:
            query = query.filter(Project.author_id == author_id)
        rows = query.order_by(Project.created_at.desc(), Project.id.desc()).all()
        return [self._to_summary(row) for row in rows]

    def get_summary(self, project_id: int) -> Optional[ProjectSummary]:
        """Get one project with aggregates"""
        row = self._summary_query().filter(Project.id == project_id).first()
        return self._to_summary(row) if row else None
