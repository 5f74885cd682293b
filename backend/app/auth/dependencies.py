"""
Authentication and authorization dependencies for FastAPI routes.

Bearer token in the Authorization header -> current user -> role check
against the operation table in servicedesk.security.policy.
"""

from collections.abc import Callable

from fastapi import Depends, Path, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from servicedesk.config import Settings
from servicedesk.constants import is_valid_id
from servicedesk.db import get_db
from servicedesk.exceptions import AuthenticationError, ValidationError
from servicedesk.models import User
from servicedesk.security import Operation, PasswordHasher, TokenService, authorize
from servicedesk.services import AccountService, IssueService

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login", auto_error=False)


def get_app_settings(request: Request) -> Settings:
    """Settings the running app was built with."""
    return request.app.state.settings


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_account_service(
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenService = Depends(get_token_service),
) -> AccountService:
    return AccountService(db, hasher, tokens)


def get_issue_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> IssueService:
    return IssueService(db, restrict_comments_to_participants=settings.restrict_comments_to_participants)


def get_current_user(
    token: str | None = Depends(oauth2_scheme),
    accounts: AccountService = Depends(get_account_service),
) -> User:
    """
    Resolve the authenticated user from the bearer token.

    Raises:
        AuthenticationError: Missing token, bad/expired token or unknown user.
    """
    if not token:
        raise AuthenticationError("Not authenticated")
    return accounts.authenticate_token(token)


def require(operation: Operation) -> Callable[..., User]:
    """
    Dependency factory: authenticated user whose role may perform operation.

    Usage:
        @router.delete("/{issue_id}")
        def delete_issue(current_user: User = Depends(require(Operation.ISSUE_DELETE))):
            ...
    """

    def dependency(current_user: User = Depends(get_current_user)) -> User:
        authorize(current_user.role, operation)
        return current_user

    return dependency


def valid_issue_id(issue_id: str = Path(...)) -> str:
    if not is_valid_id(issue_id):
        raise ValidationError("Invalid ID format")
    return issue_id


def valid_user_id(user_id: str = Path(...)) -> str:
    if not is_valid_id(user_id):
        raise ValidationError("Invalid ID format")
    return user_id
