from .database import Base, Database, get_db, init_db, shutdown_db
from .security import (
    TokenClaims,
    verify_password,
    get_password_hash,
    create_access_token,
    issue_token,
    decode_access_token,
    get_current_identity,
    authenticate_user,
)
from .logging_config import setup_logging

__all__ = [
    "Base",
    "Database",
    "get_db",
    "init_db",
    "shutdown_db",
    "TokenClaims",
    "verify_password",
    "get_password_hash",
    "create_access_token",
    "issue_token",
    "decode_access_token",
    "get_current_identity",
    "authenticate_user",
    "setup_logging",
]
