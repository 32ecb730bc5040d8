import threading
from typing import Dict, Optional
from uuid import uuid4
from .base import AttachmentStore, AttachmentPolicy, IncomingFile
import logging

logger = logging.getLogger(__name__)


class MemoryStore(AttachmentStore):
    """
    Keeps uploads in memory for the duration of one request.

    Only suitable when the bytes are relayed onward before the request ends
    (or in tests). The API layer gives every request its own instance and
    clears it afterwards, so references returned here stop resolving once
    the response is done.
    """

    name = "memory"
    scheme = "memory://"
    request_scoped = True

    def __init__(self):
        self._files: Dict[str, IncomingFile] = {}
        self._lock = threading.Lock()

    def _upload(self, file: IncomingFile, owner_key: str, policy: AttachmentPolicy) -> Optional[str]:
        folder = policy.folder or "files"
        reference = f"{self.scheme}{folder}/{policy.prefix}-{owner_key}-{uuid4().hex}{file.extension}"
        with self._lock:
            self._files[reference] = file
        return reference

    def _delete(self, reference: str) -> None:
        with self._lock:
            if self._files.pop(reference, None) is None:
                raise KeyError(f"Unknown memory reference: {reference}")

    def get(self, reference: str) -> Optional[IncomingFile]:
        with self._lock:
            return self._files.get(reference)

    def clear(self) -> int:
        """Drop every buffered file and return how many there were"""
        with self._lock:
            released = len(self._files)
            self._files.clear()
        if released:
            logger.debug(f"Released {released} in-memory upload(s)")
        return released

    def __len__(self) -> int:
        with self._lock:
            return len(self._files)
