from fastapi import status
from .base import CatalogException


class ConflictError(CatalogException):
    """Exception raised when a uniqueness constraint would be violated"""
    
    def __init__(self, detail: str = "Resource already exists"):
        super().__init__(
            detail=detail,
            status_code=status.HTTP_409_CONFLICT
        )
