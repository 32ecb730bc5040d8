from fastapi import status
from .base import CatalogException


class BackendUnavailableError(CatalogException):
    """Exception raised when the persistence backend cannot be reached"""
    
    def __init__(self, detail: str = "Database temporarily unavailable"):
        super().__init__(
            detail=detail,
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            headers={"Retry-After": "5"}
        )
