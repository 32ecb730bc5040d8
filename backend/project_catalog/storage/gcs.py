from typing import Optional
from urllib.parse import unquote
from uuid import uuid4
from google.cloud import storage
from ..core.telemetry import get_tracer
from .base import AttachmentStore, AttachmentPolicy, IncomingFile
import logging

logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)

PUBLIC_HOST = "https://storage.googleapis.com"


class GCSStore(AttachmentStore):
    """
    Uploads to a Google Cloud Storage bucket and returns the public URL.

    Without a bucket name the store is unconfigured: uploads are skipped with
    a warning and return None so callers keep whatever reference they had.
    """

    name = "gcs"

    def __init__(self, bucket_name: Optional[str], project_id: Optional[str] = None, folder: str = "tic-projects"):
        self.bucket_name = bucket_name
        self.project_id = project_id
        self.folder = folder.strip("/")
        self._client = None

    @property
    def configured(self) -> bool:
        return bool(self.bucket_name)

    def _get_bucket(self):
        if self._client is None:
            self._client = storage.Client(project=self.project_id)
            logger.info(f"Initialized Google Cloud Storage client for bucket {self.bucket_name}")
        return self._client.bucket(self.bucket_name)

    def blob_name_for(self, reference: str) -> str:
        """Extract the blob name from a public URL or gs:// path"""
        for prefix in (f"{PUBLIC_HOST}/{self.bucket_name}/", f"gs://{self.bucket_name}/"):
            if reference.startswith(prefix):
                return unquote(reference[len(prefix):])
        raise ValueError(f"Not an object in bucket {self.bucket_name}: {reference}")

    def _upload(self, file: IncomingFile, owner_key: str, policy: AttachmentPolicy) -> Optional[str]:
        if not self.configured:
            logger.warning("Cloud storage not configured. Skipping upload.")
            return None

        folder = policy.folder or "projects"
        blob_name = f"{self.folder}/{folder}/{policy.prefix}-{owner_key}-{uuid4().hex}{file.extension}"
        with tracer.start_as_current_span("gcs.upload") as span:
            span.set_attribute("gcs.blob", blob_name)
            span.set_attribute("gcs.size", file.size)
            blob = self._get_bucket().blob(blob_name)
            blob.upload_from_string(file.data, content_type=file.content_type)
        return blob.public_url

    def _delete(self, reference: str) -> None:
        if not self.configured:
            logger.debug(f"Cloud storage not configured, not deleting {reference}")
            return
        blob_name = self.blob_name_for(reference)
        self._get_bucket().blob(blob_name).delete()
