"""
Dependency Injection Container for API Routes

Services are built per request around the request's database session. Durable
attachment stores are created once per process from configuration; in-memory
buffers live for a single request.
Tests swap either one through app.dependency_overrides.
"""
from functools import lru_cache
from typing import Iterator
from fastapi import Depends
from sqlalchemy.orm import Session
from ..core.database import get_db
from ..services import AuthService, ProjectService, ReviewService, UserService
from ..storage import AttachmentStore, AttachmentStoreFactory, MemoryStore


@lru_cache(maxsize=1)
def _get_attachment_store() -> AttachmentStore:
    """
    Internal function to create the attachment store (cached for the process)

    Returns:
        AttachmentStore instance
    """
    return AttachmentStoreFactory.create_store()


def get_attachment_store() -> Iterator[AttachmentStore]:
    """
    Get the AttachmentStore for this request

    Durable backends are shared by the whole process. The in-memory backend
    gets a fresh buffer per request that is cleared when the request ends.

    Yields:
        AttachmentStore instance
    """
    store = _get_attachment_store()
    if not store.request_scoped:
        yield store
        return

    scoped = MemoryStore()
    try:
        yield scoped
    finally:
        scoped.clear()


def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    """
    Get AuthService instance

    Args:
        db: Database session (injected by FastAPI)

    Returns:
        AuthService instance
    """
    return AuthService(db)


def get_project_service(
    db: Session = Depends(get_db),
    attachment_store: AttachmentStore = Depends(get_attachment_store)
) -> ProjectService:
    """
    Get ProjectService instance with dependencies

    Args:
        db: Database session (injected by FastAPI)
        attachment_store: Attachment store (injected by dependency)

    Returns:
        ProjectService instance
    """
    return ProjectService(db, attachment_store)


def get_review_service(db: Session = Depends(get_db)) -> ReviewService:
    """Get ReviewService instance"""
    return ReviewService(db)


def get_user_service(
    db: Session = Depends(get_db),
    attachment_store: AttachmentStore = Depends(get_attachment_store)
) -> UserService:
    """Get UserService instance with dependencies"""
    return UserService(db, attachment_store)
