from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, UploadFile, status
from typing import List, Optional
from ...core.security import TokenClaims, get_current_identity
from ...schemas import Project as ProjectSchema, ProjectCreate, ProjectUpdate
from ...services import ProjectService
from ...storage import AttachmentKind, AttachmentStore, read_upload
from ..dependencies import get_project_service, get_attachment_store

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get("", response_model=List[ProjectSchema])
def list_projects(
    section: Optional[str] = None,
    group: Optional[str] = None,
    project_service: ProjectService = Depends(get_project_service)
):
    """List all projects, newest first, optionally filtered by section and group"""
    return project_service.list_projects(section=section or None, group=group or None)


@router.post("", response_model=ProjectSchema, status_code=status.HTTP_201_CREATED)
def create_project(
    title: str = Form(""),
    description: str = Form(""),
    section: Optional[str] = Form(None),
    group_number: Optional[str] = Form(None),
    full_name: Optional[str] = Form(None),
    matricule: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    identity: TokenClaims = Depends(get_current_identity),
    project_service: ProjectService = Depends(get_project_service)
):
    """Create a project from a multipart form with an optional file"""
    project_data = ProjectCreate(
        title=title,
        description=description,
        section=section,
        group_number=group_number,
        full_name=full_name,
        matricule=matricule,
    )
    incoming = read_upload(file, AttachmentKind.PROJECT_FILE)
    return project_service.create_project(identity.user_id, project_data, incoming)


@router.get("/{project_id}", response_model=ProjectSchema)
def get_project(
    project_id: int,
    project_service: ProjectService = Depends(get_project_service)
):
    """Get a specific project with its rating aggregates"""
    return project_service.get_project(project_id)


@router.put("/{project_id}", response_model=ProjectSchema)
def update_project(
    project_id: int,
    project_data: ProjectUpdate,
    identity: TokenClaims = Depends(get_current_identity),
    project_service: ProjectService = Depends(get_project_service)
):
    """Replace a project's fields (author only)"""
    return project_service.update_project(project_id, identity.user_id, project_data)


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_project(
    project_id: int,
    background_tasks: BackgroundTasks,
    identity: TokenClaims = Depends(get_current_identity),
    project_service: ProjectService = Depends(get_project_service),
    attachment_store: AttachmentStore = Depends(get_attachment_store)
):
    """Delete a project (cascades to reviews and attachments)"""
    stale_references = project_service.delete_project(project_id, identity.user_id)
    for reference in stale_references:
        background_tasks.add_task(attachment_store.remove, reference)
    return None
