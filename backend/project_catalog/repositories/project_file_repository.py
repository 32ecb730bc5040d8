from typing import List
from sqlalchemy.orm import Session
from ..models.project_file import ProjectFile
from .base import BaseRepository


class ProjectFileRepository(BaseRepository[ProjectFile]):
    """Repository for ProjectFile model"""
    
    def __init__(self, db: Session):
        super().__init__(ProjectFile, db)
    
    def get_paths_by_project_id(self, project_id: int) -> List[str]:
        """Get every stored reference for a project, latest first"""
        rows = self.db.query(ProjectFile.file_path).filter(
            ProjectFile.project_id == project_id
        ).order_by(ProjectFile.uploaded_at.desc(), ProjectFile.id.desc()).all()
        return [row.file_path for row in rows]
    
    def delete_by_project_id(self, project_id: int) -> int:
        """Delete all attachment rows of a project"""
        return self.db.query(ProjectFile).filter(
            ProjectFile.project_id == project_id
        ).delete(synchronize_session=False)
