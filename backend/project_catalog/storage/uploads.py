from typing import Optional
from fastapi import UploadFile
from ..exceptions import ValidationError
from .base import AttachmentKind, IncomingFile, MB, get_policy

CHUNK_SIZE = 64 * 1024


def validate_attachment(file: IncomingFile, kind: AttachmentKind) -> None:
    """Check an in-memory file against its kind's size and type rules"""
    policy = get_policy(kind)
    if file.size > policy.max_bytes:
        raise ValidationError(f"File too large (max {policy.max_bytes // MB}MB)")

    if policy.allowed_types is not None:
        extension = file.extension.lstrip(".")
        major, _, subtype = (file.content_type or "").lower().partition("/")
        if (
            extension not in policy.allowed_types
            or major != "image"
            or subtype not in policy.allowed_types
        ):
            raise ValidationError("Only image files are allowed (jpeg, jpg, png, gif, webp)")


def read_upload(upload: Optional[UploadFile], kind: AttachmentKind) -> Optional[IncomingFile]:
    """
    Read a multipart upload without buffering more than the ceiling allows.

    Stops reading as soon as the size ceiling is crossed, so an oversized body
    is rejected after at most one extra chunk. Returns None when no file was
    sent (a missing field or an empty filename).
    """
    if upload is None or not upload.filename:
        return None

    policy = get_policy(kind)
    chunks = []
    total = 0
    while True:
        chunk = upload.file.read(CHUNK_SIZE)
        if not chunk:
            break
        total += len(chunk)
        if total > policy.max_bytes:
            raise ValidationError(f"File too large (max {policy.max_bytes // MB}MB)")
        chunks.append(chunk)

    file = IncomingFile(
        data=b"".join(chunks),
        filename=upload.filename,
        content_type=upload.content_type or "application/octet-stream",
    )
    validate_attachment(file, kind)
    return file
