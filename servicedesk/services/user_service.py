"""
Account service: authentication and user management.

Registration, login and token refresh for everyone; listing, updating and
deleting accounts for admins.
"""

import re
from typing import Any

from servicedesk.constants import (
    DEPARTMENT_MAX_LENGTH,
    EMAIL_MAX_LENGTH,
    NAME_MAX_LENGTH,
    PASSWORD_MIN_LENGTH,
    PHONE_PATTERN,
    is_valid_id,
)
from servicedesk.enums import Role, UserStatus
from servicedesk.exceptions import (
    AuthenticationError,
    AuthorizationError,
    InvalidToken,
    NotFoundError,
    ValidationError,
)
from servicedesk.logging import get_logger
from servicedesk.models import User
from servicedesk.repositories import UserRepository
from servicedesk.repositories.user_repository import normalize_email
from servicedesk.security import PasswordHasher, TokenPair, TokenService

from .issue_service import clean_text, coerce_enum

logger = get_logger("service.accounts")

USER_UPDATE_FIELDS = frozenset({"name", "email", "role", "department", "phone", "status"})

_PHONE_RE = re.compile(PHONE_PATTERN)


def _clean_phone(value: Any) -> str | None:
    phone = clean_text("phone", value, 15, required=False)
    if phone is not None and not _PHONE_RE.match(phone):
        raise ValidationError(
            "Phone number must be 10-15 digits",
            errors=[{"field": "phone", "msg": "invalid format"}],
        )
    return phone


def _clean_email(value: Any) -> str:
    return normalize_email(clean_text("email", value, EMAIL_MAX_LENGTH))


def _check_password(password: Any, field: str = "password") -> str:
    if not isinstance(password, str) or len(password) < PASSWORD_MIN_LENGTH:
        raise ValidationError(
            f"Password must be at least {PASSWORD_MIN_LENGTH} characters",
            errors=[{"field": field, "msg": f"min length {PASSWORD_MIN_LENGTH}"}],
        )
    return password


class AccountService:
    """
    User accounts and credentials.

    Usage:
        service = AccountService(session, hasher, tokens)
        user, pair = service.login("alice@example.com", "s3cret!")
    """

    def __init__(self, session, hasher: PasswordHasher, tokens: TokenService):
        self.session = session
        self.users = UserRepository(session)
        self.hasher = hasher
        self.tokens = tokens

    def _load(self, user_id: str) -> User:
        if not is_valid_id(user_id):
            raise ValidationError("Invalid ID format")
        user = self.users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    # -------------------------------------------------------------------------
    # Authentication
    # -------------------------------------------------------------------------

    def register(
        self,
        name: str,
        email: str,
        password: str,
        role: Role | str | None = None,
        department: str | None = None,
        phone: str | None = None,
    ) -> tuple[User, TokenPair]:
        """
        Create an account and sign the new user in.

        Raises:
            ValidationError: Duplicate email (case-insensitive) or bad field.
        """
        email = _clean_email(email)
        if self.users.email_taken(email):
            logger.warning("registration_rejected", reason="duplicate_email")
            raise ValidationError(
                "User with this email already exists",
                errors=[{"field": "email", "msg": "already registered"}],
            )

        user = self.users.create(
            name=clean_text("name", name, NAME_MAX_LENGTH),
            email=email,
            password_hash=self.hasher.hash(_check_password(password)),
            role=coerce_enum("role", Role, role) if role is not None else Role.EMPLOYEE,
            department=clean_text("department", department, DEPARTMENT_MAX_LENGTH, required=False),
            phone=_clean_phone(phone),
            status=UserStatus.ACTIVE,
        )

        logger.info("user_registered", user_id=user.id, role=user.role.value)
        return user, self.tokens.issue_pair(user.id)

    def login(self, email: str, password: str) -> tuple[User, TokenPair]:
        """
        Verify credentials and issue a token pair.

        Raises:
            AuthenticationError: Unknown email or wrong password.
            AuthorizationError: Correct credentials on a deactivated account.
        """
        user = self.users.get_by_email(email or "")
        if user is None or not self.hasher.verify(password, user.password_hash):
            logger.warning("login_failed", reason="bad_credentials")
            raise AuthenticationError("Invalid email or password")

        if not user.is_active:
            logger.warning("login_failed", reason="inactive", user_id=user.id)
            raise AuthorizationError("Account is inactive. Please contact administrator.")

        logger.info("login_succeeded", user_id=user.id)
        return user, self.tokens.issue_pair(user.id)

    def refresh(self, refresh_token: str) -> str:
        """Exchange a refresh token for a new access token."""
        if not refresh_token:
            raise ValidationError("Refresh token is required")
        try:
            return self.tokens.refresh(refresh_token)
        except InvalidToken as exc:
            logger.warning("token_refresh_failed")
            raise InvalidToken("Invalid or expired refresh token") from exc

    def authenticate_token(self, access_token: str) -> User:
        """
        Resolve a bearer token to an existing user.

        Raises:
            InvalidToken: Bad token.
            AuthenticationError: The token's user no longer exists.
        """
        user_id = self.tokens.verify_access_token(access_token)
        user = self.users.get_by_id(user_id)
        if user is None:
            raise AuthenticationError("User not found")
        return user

    def change_password(self, user: User, current_password: str, new_password: str) -> None:
        if not self.hasher.verify(current_password, user.password_hash):
            logger.warning("password_change_rejected", user_id=user.id)
            raise AuthenticationError("Current password is incorrect")

        self.users.update(
            user,
            password_hash=self.hasher.hash(_check_password(new_password, field="newPassword")),
        )
        logger.info("password_changed", user_id=user.id)

    # -------------------------------------------------------------------------
    # User management
    # -------------------------------------------------------------------------

    def list_users(
        self,
        role: Role | None = None,
        status: UserStatus | None = None,
        search: str | None = None,
    ) -> list[User]:
        return self.users.list_users(role=role, status=status, search=(search or "").strip() or None)

    def list_by_role(self, role: Role | str) -> list[User]:
        """Users with a role; an unknown role name is a ValidationError."""
        return self.users.list_users(role=coerce_enum("role", Role, role))

    def get_user(self, user_id: str, requester: User) -> User:
        """
        Get a user record. Non-admins may only read their own.

        Raises:
            AuthorizationError: Non-admin reading someone else.
            NotFoundError: No such user.
        """
        if requester.role != Role.ADMIN and requester.id != user_id:
            raise AuthorizationError("You can only view your own profile")
        return self._load(user_id)

    def update_user(self, user_id: str, fields: dict[str, Any]) -> User:
        """
        Apply an admin update to a user.

        Password changes never go through here.
        """
        user = self._load(user_id)

        unknown = sorted(set(fields) - USER_UPDATE_FIELDS)
        if unknown:
            raise ValidationError(f"Cannot update: {', '.join(unknown)}")

        changes: dict[str, Any] = {}
        if "name" in fields:
            changes["name"] = clean_text("name", fields["name"], NAME_MAX_LENGTH)
        if "email" in fields:
            email = _clean_email(fields["email"])
            if self.users.email_taken(email, exclude_user_id=user.id):
                raise ValidationError(
                    "Email already in use",
                    errors=[{"field": "email", "msg": "already registered"}],
                )
            changes["email"] = email
        if "role" in fields:
            changes["role"] = coerce_enum("role", Role, fields["role"])
        if "status" in fields:
            changes["status"] = coerce_enum("status", UserStatus, fields["status"])
        if "department" in fields:
            changes["department"] = clean_text(
                "department", fields["department"], DEPARTMENT_MAX_LENGTH, required=False
            )
        if "phone" in fields:
            changes["phone"] = _clean_phone(fields["phone"])

        if changes:
            self.users.update(user, **changes)
            logger.info("user_updated", user_id=user.id, fields=sorted(changes))
        return user

    def delete_user(self, user_id: str, requester: User) -> None:
        """
        Hard-delete a user.

        Issues and comments keep their raw reference to the deleted id.

        Raises:
            ValidationError: An admin deleting their own account.
            NotFoundError: No such user.
        """
        user = self._load(user_id)
        if user.id == requester.id:
            raise ValidationError("You cannot delete your own account")

        self.users.delete(user)
        logger.info("user_deleted", user_id=user_id, deleted_by=requester.id)
