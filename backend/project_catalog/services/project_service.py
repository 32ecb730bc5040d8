from typing import List, Optional
from sqlalchemy.orm import Session
from ..repositories import ProjectRepository, ProjectFileRepository, ReviewRepository, ProjectSummary
from ..schemas import ProjectBase, ProjectCreate, ProjectUpdate
from ..exceptions import NotFoundError, ValidationError, AuthorizationError
from ..storage import AttachmentStore, AttachmentKind, IncomingFile
import logging

logger = logging.getLogger(__name__)

MIN_TITLE_LENGTH = 3
MIN_DESCRIPTION_LENGTH = 10


class ProjectService:
    """Service for project operations"""

    def __init__(self, db: Session, attachment_store: AttachmentStore):
        self.project_repo = ProjectRepository(db)
        self.file_repo = ProjectFileRepository(db)
        self.review_repo = ReviewRepository(db)
        self.attachment_store = attachment_store
        self.db = db

    @staticmethod
    def _validate(project_data: ProjectBase) -> None:
        if not project_data.title or not project_data.description:
            raise ValidationError("Title and description are required")
        if len(project_data.title.strip()) < MIN_TITLE_LENGTH:
            raise ValidationError(f"Title must be at least {MIN_TITLE_LENGTH} characters")
        if len(project_data.description.strip()) < MIN_DESCRIPTION_LENGTH:
            raise ValidationError(f"Description must be at least {MIN_DESCRIPTION_LENGTH} characters")

    @staticmethod
    def _fields(project_data: ProjectBase) -> dict:
        return {
            "title": project_data.title,
            "description": project_data.description,
            "section": project_data.section or None,
            "group_number": project_data.group_number or None,
            "full_name": project_data.full_name or None,
            "matricule": project_data.matricule or None,
        }

    def list_projects(self, section: Optional[str] = None, group: Optional[str] = None) -> List[ProjectSummary]:
        """List all projects, optionally filtered by section and group"""
        logger.debug(f"Listing projects (section={section}, group={group})")
        return self.project_repo.list_summaries(section=section, group=group)

    def get_project(self, project_id: int) -> ProjectSummary:
        """Get a specific project with its review aggregates"""
        project = self.project_repo.get_summary(project_id)
        if not project:
            raise NotFoundError("Project", str(project_id))
        return project

    def create_project(
        self,
        author_id: int,
        project_data: ProjectCreate,
        file: Optional[IncomingFile] = None
    ) -> ProjectSummary:
        """Create a project, then attach its file if one was uploaded"""
        self._validate(project_data)
        logger.info(f"Creating project '{project_data.title}' for user {author_id}")

        try:
            project = self.project_repo.create(author_id=author_id, **self._fields(project_data))
            self.project_repo.commit()
            logger.info(f"Project created successfully: {project.id}")
        except Exception as e:
            logger.error(f"Error creating project: {e}")
            self.project_repo.rollback()
            raise

        if file:
            self._attach_file(project.id, author_id, file)

        return self.get_project(project.id)

    def _attach_file(self, project_id: int, author_id: int, file: IncomingFile) -> Optional[str]:
        # The project row is already committed; a storage failure leaves it without a file
        try:
            reference = self.attachment_store.store(file, str(author_id), AttachmentKind.PROJECT_FILE)
        except Exception as e:
            logger.error(f"Storing file for project {project_id} failed, keeping project without attachment: {e}")
            return None

        if not reference:
            logger.warning(f"File for project {project_id} was not stored, project has no attachment")
            return None

        try:
            self.file_repo.create(project_id=project_id, file_path=reference)
            self.file_repo.commit()
        except Exception as e:
            logger.error(f"Linking file to project {project_id} failed, keeping project without attachment: {e}")
            self.file_repo.rollback()
            self.attachment_store.remove(reference)
            return None
        return reference

    def _get_owned(self, project_id: int, requester_id: int, action: str):
        project = self.project_repo.get(project_id)
        if not project:
            raise NotFoundError("Project", str(project_id))
        if project.author_id != requester_id:
            logger.warning(f"User {requester_id} tried to {action} project {project_id} owned by {project.author_id}")
            raise AuthorizationError(f"You can only {action} your own projects")
        return project

    def update_project(self, project_id: int, requester_id: int, project_data: ProjectUpdate) -> ProjectSummary:
        """Replace all editable fields of a project owned by the requester"""
        logger.info(f"Updating project {project_id} for user {requester_id}")

        try:
            self._get_owned(project_id, requester_id, "edit")
            self._validate(project_data)
            self.project_repo.update(project_id, **self._fields(project_data))
            self.project_repo.commit()
            logger.info(f"Project updated successfully: {project_id}")
        except Exception as e:
            logger.error(f"Error updating project: {e}")
            self.project_repo.rollback()
            raise

        return self.get_project(project_id)

    def delete_project(self, project_id: int, requester_id: int) -> List[str]:
        """
        Delete a project with its reviews and attachment rows.

        Dependents go first so foreign keys hold at every step, all in one
        transaction. Returns the attachment references that are now stale;
        removing the stored bytes is left to the caller.
        """
        logger.info(f"Deleting project {project_id} for user {requester_id}")

        try:
            self._get_owned(project_id, requester_id, "delete")
            stale_references = self.file_repo.get_paths_by_project_id(project_id)

            reviews_deleted = self.review_repo.delete_by_project_id(project_id)
            files_deleted = self.file_repo.delete_by_project_id(project_id)
            self.project_repo.delete(project_id)
            self.project_repo.commit()
            logger.info(
                f"Project deleted successfully: {project_id} "
                f"({reviews_deleted} reviews, {files_deleted} files)"
            )
        except Exception as e:
            logger.error(f"Error deleting project: {e}")
            self.project_repo.rollback()
            raise

        return stale_references
