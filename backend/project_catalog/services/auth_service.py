import re
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from ..repositories import UserRepository
from ..core.security import (
    TokenClaims,
    get_password_hash,
    authenticate_user,
    issue_token,
)
from ..models import User
from ..schemas import UserRegister, UserLogin, AuthResponse, UserIdentity
from ..exceptions import ValidationError, ConflictError, AuthenticationError, NotFoundError
import logging

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 6


def validate_username(username: str) -> None:
    if len(username) < MIN_USERNAME_LENGTH:
        raise ValidationError(f"Username must be at least {MIN_USERNAME_LENGTH} characters")


class AuthService:
    """Service for registration, login and token identity"""

    def __init__(self, db: Session):
        self.user_repo = UserRepository(db)
        self.db = db

    def _auth_response(self, user: User) -> AuthResponse:
        return AuthResponse(
            access_token=issue_token(user),
            token_type="bearer",
            user=UserIdentity.model_validate(user),
        )

    def register(self, user_data: UserRegister) -> AuthResponse:
        """Register a new user and return a token for them"""
        if not user_data.username or not user_data.email or not user_data.password:
            raise ValidationError("Username, email, and password are required")
        validate_username(user_data.username)
        if len(user_data.password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        if not EMAIL_PATTERN.match(user_data.email):
            raise ValidationError("Invalid email format")

        logger.info(f"Attempting to register user: {user_data.username}")

        try:
            # Fast path for a friendly error; the UNIQUE constraints are the real guard
            existing_user = self.user_repo.get_by_email_or_username(user_data.email, user_data.username)
            if existing_user:
                logger.warning(f"Registration failed: username or email already exists - {user_data.username}")
                raise ConflictError("Username or email already exists")

            new_user = self.user_repo.create(
                username=user_data.username,
                email=user_data.email,
                hashed_password=get_password_hash(user_data.password)
            )
            self.user_repo.commit()
        except IntegrityError as e:
            logger.warning(f"Registration lost a uniqueness race for {user_data.username}: {e.orig}")
            self.user_repo.rollback()
            raise ConflictError("Username or email already exists")
        except Exception as e:
            logger.error(f"Error registering user: {e}")
            self.user_repo.rollback()
            raise

        logger.info(f"User registered successfully: {new_user.username} (id={new_user.id})")
        return self._auth_response(new_user)

    def login(self, user_data: UserLogin) -> AuthResponse:
        """Login with email or username and return a JWT token"""
        if not user_data.identifier or not user_data.password:
            raise ValidationError("Email and password are required")

        logger.info(f"Attempting login for: {user_data.identifier}")

        user = authenticate_user(self.db, user_data.identifier, user_data.password)
        if not user:
            logger.warning(f"Login failed for: {user_data.identifier}")
            raise AuthenticationError("Invalid credentials")

        logger.info(f"User logged in successfully: {user.username}")
        return self._auth_response(user)

    def get_account(self, identity: TokenClaims) -> User:
        """Load the user a verified token refers to"""
        user = self.user_repo.get(identity.user_id)
        if not user:
            raise NotFoundError("User", str(identity.user_id))
        return user
