from pathlib import Path
from typing import Optional
from uuid import uuid4
from .base import AttachmentStore, AttachmentPolicy, IncomingFile
import logging

logger = logging.getLogger(__name__)


class LocalDiskStore(AttachmentStore):
    """Writes uploads under a directory and returns URL-style relative paths"""

    name = "local"

    def __init__(self, root: Path, url_prefix: str = "/uploads"):
        self.root = Path(root)
        self.url_prefix = "/" + url_prefix.strip("/")
        self.root.mkdir(parents=True, exist_ok=True)

    def _upload(self, file: IncomingFile, owner_key: str, policy: AttachmentPolicy) -> Optional[str]:
        directory = self.root / policy.folder if policy.folder else self.root
        directory.mkdir(parents=True, exist_ok=True)

        unique_filename = f"{policy.prefix}-{uuid4().hex}{file.extension}"
        with (directory / unique_filename).open("wb") as buffer:
            buffer.write(file.data)

        relative = f"{policy.folder}/{unique_filename}" if policy.folder else unique_filename
        return f"{self.url_prefix}/{relative}"

    def path_for(self, reference: str) -> Path:
        """Map a reference back to a file under the root"""
        prefix = self.url_prefix + "/"
        if not reference.startswith(prefix):
            raise ValueError(f"Not a local upload reference: {reference}")
        root = self.root.resolve()
        path = (root / reference[len(prefix):]).resolve()
        if root not in path.parents:
            raise ValueError(f"Reference escapes upload directory: {reference}")
        return path

    def _delete(self, reference: str) -> None:
        path = self.path_for(reference)
        if path.exists():
            path.unlink()
        else:
            logger.warning(f"Upload already gone: {path}")
