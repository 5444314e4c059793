from fastapi import APIRouter, Depends, HTTPException, status

from app.core.deps import get_current_active_user, get_user_service
from app.core.security import create_access_token, create_refresh_token, verify_token
from app.models.user import UserRole
from app.schemas.auth import Token, LoginRequest, RefreshTokenRequest
from app.schemas.user import User, UserCreate
from app.services.user import UserService

router = APIRouter()


def _issue_tokens(user: User) -> Token:
    return Token(
        access_token=create_access_token(subject=str(user.id), role=user.role.value),
        refresh_token=create_refresh_token(subject=str(user.id)),
        token_type="bearer",
    )


@router.post("/login", response_model=Token)
def login(
    login_data: LoginRequest,
    user_service: UserService = Depends(get_user_service),
):
    """Login endpoint - authenticate by username or email and return JWT tokens"""
    user = user_service.authenticate_user(login_data.username, login_data.password)

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Inactive user"
        )

    return _issue_tokens(user)


@router.post("/refresh", response_model=Token)
def refresh_token(
    refresh_data: RefreshTokenRequest,
    user_service: UserService = Depends(get_user_service),
):
    """Refresh token endpoint - get new access token using refresh token"""
    user_id = verify_token(refresh_data.refresh_token, token_type="refresh")

    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid refresh token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = user_service.get_user(int(user_id))
    if not user or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found or inactive",
        )

    return _issue_tokens(user)


@router.post("/register", response_model=User, status_code=status.HTTP_201_CREATED)
def register(
    user_data: UserCreate,
    user_service: UserService = Depends(get_user_service),
):
    """Register new user. Self-registered accounts always get the user role."""
    return user_service.create_user(user_data.model_copy(update={"role": UserRole.USER}))


@router.get("/me", response_model=User)
def read_users_me(
    current_user: User = Depends(get_current_active_user),
):
    """Get current user information"""
    return current_user
