from .base import CatalogException
from .not_found import NotFoundError
from .validation import ValidationError
from .conflict import ConflictError
from .auth import AuthenticationError, AuthorizationError
from .backend import BackendUnavailableError

__all__ = [
    "CatalogException",
    "NotFoundError",
    "ValidationError",
    "ConflictError",
    "AuthenticationError",
    "AuthorizationError",
    "BackendUnavailableError",
]
