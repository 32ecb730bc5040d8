from .base import AttachmentStore, AttachmentKind, AttachmentPolicy, IncomingFile, get_policy
from .uploads import read_upload, validate_attachment
from .local import LocalDiskStore
from .memory import MemoryStore
from .gcs import GCSStore
from .factory import AttachmentStoreFactory

__all__ = [
    "AttachmentStore",
    "AttachmentKind",
    "AttachmentPolicy",
    "IncomingFile",
    "get_policy",
    "read_upload",
    "validate_attachment",
    "LocalDiskStore",
    "MemoryStore",
    "GCSStore",
    "AttachmentStoreFactory",
]
