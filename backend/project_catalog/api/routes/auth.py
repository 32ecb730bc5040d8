from fastapi import APIRouter, Depends, status
from ...core.security import TokenClaims, get_current_identity
from ...schemas import UserRegister, UserLogin, AuthResponse, UserAccount
from ...services import AuthService
from ..dependencies import get_auth_service

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    user_data: UserRegister,
    auth_service: AuthService = Depends(get_auth_service)
):
    """Register a new user and return a token for them"""
    return auth_service.register(user_data)


@router.post("/login", response_model=AuthResponse)
def login(
    user_data: UserLogin,
    auth_service: AuthService = Depends(get_auth_service)
):
    """Login with email or username and return a JWT token"""
    return auth_service.login(user_data)


@router.get("/me", response_model=UserAccount)
def me(
    identity: TokenClaims = Depends(get_current_identity),
    auth_service: AuthService = Depends(get_auth_service)
):
    """Get the authenticated user's account"""
    return auth_service.get_account(identity)
