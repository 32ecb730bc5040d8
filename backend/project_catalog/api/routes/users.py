from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, UploadFile
from typing import List, Optional
from ...core.security import TokenClaims, get_current_identity
from ...schemas import UserPublic, UserPrivate, UserProfile, Project as ProjectSchema
from ...services import UserService
from ...storage import AttachmentKind, AttachmentStore, read_upload
from ..dependencies import get_user_service, get_attachment_store

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/search", response_model=List[UserPublic])
def search_users(
    q: Optional[str] = None,
    user_service: UserService = Depends(get_user_service)
):
    """Search users by username or full name"""
    return user_service.search_users(q)


@router.get("/me", response_model=UserPrivate)
def get_my_profile(
    identity: TokenClaims = Depends(get_current_identity),
    user_service: UserService = Depends(get_user_service)
):
    """Get the caller's private profile"""
    return user_service.get_user(identity.user_id)


@router.put("/me", response_model=UserPrivate)
def update_my_profile(
    background_tasks: BackgroundTasks,
    username: Optional[str] = Form(None),
    full_name: Optional[str] = Form(None),
    bio: Optional[str] = Form(None),
    profile_picture: Optional[UploadFile] = File(None),
    identity: TokenClaims = Depends(get_current_identity),
    user_service: UserService = Depends(get_user_service),
    attachment_store: AttachmentStore = Depends(get_attachment_store)
):
    """Update the caller's profile from a multipart form with an optional avatar"""
    avatar = read_upload(profile_picture, AttachmentKind.AVATAR)
    user, replaced_reference = user_service.update_profile(
        identity.user_id,
        username=username,
        full_name=full_name,
        bio=bio,
        avatar=avatar,
    )
    if replaced_reference:
        background_tasks.add_task(attachment_store.remove, replaced_reference)
    return user


@router.get("/{user_id}", response_model=UserProfile)
def get_user_profile(
    user_id: int,
    user_service: UserService = Depends(get_user_service)
):
    """Get a user's public profile with the projects they authored"""
    user, projects = user_service.get_public_profile(user_id)
    return UserProfile(
        user=UserPublic.model_validate(user),
        projects=[ProjectSchema.model_validate(project) for project in projects],
    )
