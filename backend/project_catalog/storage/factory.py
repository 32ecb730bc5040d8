from typing import Optional
from .base import AttachmentStore
from .local import LocalDiskStore
from .memory import MemoryStore
from .gcs import GCSStore
from ..config import settings
import logging

logger = logging.getLogger(__name__)


class AttachmentStoreFactory:
    """Factory for creating attachment stores"""
    
    @staticmethod
    def create_store(backend: Optional[str] = None) -> AttachmentStore:
        """
        Create the attachment store selected by configuration
        
        Args:
            backend: Optional backend override ("local", "memory", "gcs"). If None, uses settings.
        
        Returns:
            AttachmentStore instance
        
        Raises:
            ValueError: If the backend is unknown
        """
        backend = (backend or settings.attachment_backend).lower()
        
        if backend == "local":
            store = LocalDiskStore(settings.upload_dir, url_prefix=settings.upload_url_prefix)
        elif backend == "memory":
            store = MemoryStore()
        elif backend == "gcs":
            store = GCSStore(
                bucket_name=settings.gcs_bucket_name,
                project_id=settings.gcs_project_id,
                folder=settings.gcs_folder,
            )
        else:
            raise ValueError(f"Unknown attachment backend: {backend}. Supported backends: local, memory, gcs")
        
        logger.info(f"Using attachment backend: {store.name}")
        return store
