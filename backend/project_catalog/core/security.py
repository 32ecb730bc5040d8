from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
import bcrypt
from sqlalchemy import or_
from sqlalchemy.orm import Session
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from ..config import settings
from ..models import User
from ..exceptions import AuthenticationError
import logging

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


@dataclass(frozen=True)
class TokenClaims:
    """Identity asserted by a verified access token"""
    user_id: int
    username: str
    email: str


def _password_bytes(password: str) -> bytes:
    return password.encode('utf-8')[:BCRYPT_MAX_BYTES]


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a hash"""
    try:
        if isinstance(hashed_password, str):
            hashed_password_bytes = hashed_password.encode('utf-8')
        else:
            hashed_password_bytes = hashed_password
        return bcrypt.checkpw(_password_bytes(plain_password), hashed_password_bytes)
    except ValueError as e:
        logger.error(f"Password verification failed: {e}")
        return False


def get_password_hash(password: str, rounds: Optional[int] = None) -> str:
    """Hash a password using bcrypt"""
    salt = bcrypt.gensalt(rounds=rounds or settings.bcrypt_rounds)
    hashed = bcrypt.hashpw(_password_bytes(password), salt)
    return hashed.decode('utf-8')


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT access token"""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(hours=settings.jwt_expiration_hours)
    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)
    logger.debug(f"Created access token for user: {data.get('sub')}")
    return encoded_jwt


def issue_token(user: User) -> str:
    """Sign a token binding the user's id, username and email"""
    return create_access_token({
        "sub": str(user.id),
        "username": user.username,
        "email": user.email,
    })


def decode_access_token(token: Optional[str]) -> TokenClaims:
    """Verify signature and expiry and return the embedded identity"""
    if not token:
        raise AuthenticationError("Missing token")
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
        return TokenClaims(
            user_id=int(payload["sub"]),
            username=payload["username"],
            email=payload["email"],
        )
    except JWTError as e:
        logger.warning(f"JWT decode error: {e}")
        raise AuthenticationError("Invalid token")
    except (KeyError, TypeError, ValueError) as e:
        logger.warning(f"Invalid token payload: {e}")
        raise AuthenticationError("Invalid token")


def get_user_by_identifier(db: Session, identifier: str) -> Optional[User]:
    """Get user by email or username"""
    return db.query(User).filter(
        or_(User.email == identifier, User.username == identifier)
    ).first()


def authenticate_user(db: Session, identifier: str, password: str) -> Optional[User]:
    """Authenticate a user by email or username"""
    user = get_user_by_identifier(db, identifier)
    if not user:
        logger.warning(f"Authentication failed: user not found - {identifier}")
        return None
    if not verify_password(password, user.hashed_password):
        logger.warning(f"Authentication failed: invalid password for {identifier}")
        return None
    logger.info(f"User authenticated successfully: {user.username}")
    return user


def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
) -> TokenClaims:
    """Get the caller's identity from the bearer token"""
    token = credentials.credentials if credentials else None
    return decode_access_token(token)
