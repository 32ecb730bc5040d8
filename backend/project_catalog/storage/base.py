from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import PurePosixPath
from typing import FrozenSet, Optional
from ..config import settings
import logging

logger = logging.getLogger(__name__)

MB = 1024 * 1024

IMAGE_TYPES = frozenset({"jpeg", "jpg", "png", "gif", "webp"})


class AttachmentKind(str, Enum):
    PROJECT_FILE = "project_file"
    AVATAR = "avatar"


@dataclass(frozen=True)
class AttachmentPolicy:
    """Size ceiling, allowed types and naming for one kind of upload"""
    max_bytes: int
    allowed_types: Optional[FrozenSet[str]]
    folder: str
    prefix: str


def get_policy(kind: AttachmentKind) -> AttachmentPolicy:
    if kind == AttachmentKind.AVATAR:
        return AttachmentPolicy(
            max_bytes=settings.max_avatar_mb * MB,
            allowed_types=IMAGE_TYPES,
            folder="avatars",
            prefix="avatar",
        )
    return AttachmentPolicy(
        max_bytes=settings.max_project_file_mb * MB,
        allowed_types=None,
        folder="",
        prefix="project",
    )


@dataclass
class IncomingFile:
    """Bytes of one uploaded file, already bounded by its policy"""
    data: bytes
    filename: str
    content_type: str

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def extension(self) -> str:
        """Lower-cased suffix including the dot, or an empty string"""
        return PurePosixPath(self.filename or "").suffix.lower()


class AttachmentStore(ABC):
    """
    Where uploaded bytes live.

    Subclasses implement _upload and _delete. Callers use store, which
    returns a reference (path, key or URL) or None when the backend skipped
    the upload, and remove, which never raises.
    """

    name = "base"
    # Request-scoped stores hold bytes only until the request that wrote them ends
    request_scoped = False

    @abstractmethod
    def _upload(self, file: IncomingFile, owner_key: str, policy: AttachmentPolicy) -> Optional[str]:
        """Persist the bytes and return a reference, or None if skipped"""
        pass

    @abstractmethod
    def _delete(self, reference: str) -> None:
        """Delete the bytes behind a reference; may raise"""
        pass

    def store(self, file: IncomingFile, owner_key: str, kind: AttachmentKind) -> Optional[str]:
        """Store an uploaded file for an owner"""
        policy = get_policy(kind)
        reference = self._upload(file, owner_key, policy)
        if reference:
            logger.info(f"Stored {kind.value} for owner {owner_key} ({file.size} bytes) via {self.name}: {reference}")
        return reference

    def remove(self, reference: Optional[str]) -> bool:
        """Best-effort deletion; failures are logged and reported as False"""
        if not reference:
            return False
        try:
            self._delete(reference)
            logger.info(f"Removed attachment via {self.name}: {reference}")
            return True
        except Exception as e:
            logger.error(f"Failed to remove attachment {reference} via {self.name}: {e}")
            return False
