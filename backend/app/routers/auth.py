"""
Authentication router.

Email/password registration and login issuing access + refresh tokens.
Tokens are stateless: logout is acknowledged but nothing is revoked.
"""

from fastapi import APIRouter, Depends, status

from servicedesk.logging import get_logger
from servicedesk.models import User
from servicedesk.security import TokenPair
from servicedesk.services import AccountService

from ..auth.dependencies import get_account_service, get_current_user
from ..schemas import (
    ApiResponse,
    AuthData,
    ChangePasswordRequest,
    LoginRequest,
    RefreshTokenRequest,
    RegisterRequest,
    TokenData,
    UserResponse,
    envelope,
)

logger = get_logger("auth")

router = APIRouter(prefix="/auth", tags=["auth"])


def _auth_data(user: User, pair: TokenPair) -> AuthData:
    return AuthData(
        user=UserResponse.model_validate(user),
        access_token=pair.access_token,
        refresh_token=pair.refresh_token,
    )


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse[AuthData],
    response_model_exclude_unset=True,
)
def register(payload: RegisterRequest, accounts: AccountService = Depends(get_account_service)):
    user, pair = accounts.register(
        name=payload.name,
        email=payload.email,
        password=payload.password,
        role=payload.role,
        department=payload.department,
        phone=payload.phone,
    )
    return envelope(_auth_data(user, pair), message="User registered successfully")


@router.post("/login", response_model=ApiResponse[AuthData], response_model_exclude_unset=True)
def login(payload: LoginRequest, accounts: AccountService = Depends(get_account_service)):
    user, pair = accounts.login(payload.email, payload.password)
    return envelope(_auth_data(user, pair), message="Login successful")


@router.post("/refresh-token", response_model=ApiResponse[TokenData], response_model_exclude_unset=True)
def refresh_token(payload: RefreshTokenRequest, accounts: AccountService = Depends(get_account_service)):
    access_token = accounts.refresh(payload.refresh_token)
    return envelope(TokenData(access_token=access_token), message="Token refreshed successfully")


@router.post("/logout", response_model=ApiResponse[None], response_model_exclude_unset=True)
def logout(current_user: User = Depends(get_current_user)):
    """Stateless logout; the client discards its tokens."""
    logger.info("logout", user_id=current_user.id)
    return envelope(message="Logout successful")


@router.get("/me", response_model=ApiResponse[UserResponse], response_model_exclude_unset=True)
def get_me(current_user: User = Depends(get_current_user)):
    return envelope(UserResponse.model_validate(current_user))


@router.put("/password", response_model=ApiResponse[None], response_model_exclude_unset=True)
def change_password(
    payload: ChangePasswordRequest,
    current_user: User = Depends(get_current_user),
    accounts: AccountService = Depends(get_account_service),
):
    accounts.change_password(current_user, payload.current_password, payload.new_password)
    return envelope(message="Password updated successfully")
