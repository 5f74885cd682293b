"""
Pydantic schemas for request and response validation.

Wire format is camelCase (reportedBy, resolutionNotes, createdAt, ...);
schemas accept snake_case too so they can be filled from ORM objects.
"""

from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from servicedesk.constants import (
    COMMENT_MAX_LENGTH,
    DEPARTMENT_MAX_LENGTH,
    DESCRIPTION_MAX_LENGTH,
    LOCATION_MAX_LENGTH,
    NAME_MAX_LENGTH,
    PASSWORD_MIN_LENGTH,
    PHONE_PATTERN,
    RESOLUTION_NOTES_MAX_LENGTH,
    TITLE_MAX_LENGTH,
)
from servicedesk.enums import IssueCategory, IssuePriority, IssueStatus, Role, UserStatus

T = TypeVar("T")


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class ApiResponse(CamelModel, Generic[T]):
    """Success envelope: {"success": true, "message"?, "data", "count"?}."""

    success: bool = True
    message: str | None = None
    data: T | None = None
    count: int | None = None


def envelope(data: Any = None, message: str | None = None, count: int | None = None) -> dict:
    """Build a success body with only the keys that apply (routes use exclude_unset)."""
    body: dict[str, Any] = {"success": True}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = data
    if count is not None:
        body["count"] = count
    return body


# =============================================================================
# Users / Auth
# =============================================================================


class UserSummary(CamelModel):
    """Embedded user reference on issues and comments."""

    id: str
    name: str
    email: str
    department: str | None = None


class UserResponse(CamelModel):
    id: str
    name: str
    email: str
    role: Role
    department: str | None = None
    phone: str | None = None
    status: UserStatus
    created_at: datetime | None = None
    updated_at: datetime | None = None


class RegisterRequest(CamelModel):
    name: str = Field(min_length=1, max_length=NAME_MAX_LENGTH)
    email: EmailStr
    password: str = Field(min_length=PASSWORD_MIN_LENGTH)
    role: Role | None = None
    department: str | None = Field(default=None, max_length=DEPARTMENT_MAX_LENGTH)
    phone: str | None = Field(default=None, pattern=PHONE_PATTERN)


class LoginRequest(CamelModel):
    email: str
    password: str


class RefreshTokenRequest(CamelModel):
    refresh_token: str | None = None


class ChangePasswordRequest(CamelModel):
    current_password: str
    new_password: str = Field(min_length=PASSWORD_MIN_LENGTH)


class AuthData(CamelModel):
    user: UserResponse
    access_token: str
    refresh_token: str


class TokenData(CamelModel):
    access_token: str


class UserUpdateRequest(CamelModel):
    """Admin edit of a user; unknown fields (password included) are rejected."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=NAME_MAX_LENGTH)
    email: EmailStr | None = None
    role: Role | None = None
    department: str | None = Field(default=None, max_length=DEPARTMENT_MAX_LENGTH)
    phone: str | None = Field(default=None, pattern=PHONE_PATTERN)
    status: UserStatus | None = None


# =============================================================================
# Issues
# =============================================================================


class CommentResponse(CamelModel):
    id: str
    user: UserSummary | None = Field(
        default=None,
        validation_alias=AliasChoices("user", "author"),
        serialization_alias="user",
    )
    text: str
    created_at: datetime | None = None


class IssueResponse(CamelModel):
    id: str
    title: str
    description: str
    category: IssueCategory
    priority: IssuePriority
    status: IssueStatus
    reported_by: UserSummary | None = Field(
        default=None,
        validation_alias=AliasChoices("reportedBy", "reporter"),
        serialization_alias="reportedBy",
    )
    assigned_to: UserSummary | None = Field(
        default=None,
        validation_alias=AliasChoices("assignedTo", "assignee"),
        serialization_alias="assignedTo",
    )
    location: str
    resolution_notes: str | None = None
    comments: list[CommentResponse] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None


class IssueCreateRequest(CamelModel):
    """New issue. Status and reporter are set by the server and ignored here."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(max_length=TITLE_MAX_LENGTH)
    description: str = Field(max_length=DESCRIPTION_MAX_LENGTH)
    category: IssueCategory
    priority: IssuePriority | None = None
    location: str = Field(max_length=LOCATION_MAX_LENGTH)


class IssueUpdateRequest(CamelModel):
    """
    Partial issue update.

    Which of these a caller may actually change depends on their role;
    assignment has its own endpoint and is not accepted here.
    """

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    title: str | None = Field(default=None, max_length=TITLE_MAX_LENGTH)
    description: str | None = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    category: IssueCategory | None = None
    priority: IssuePriority | None = None
    location: str | None = Field(default=None, max_length=LOCATION_MAX_LENGTH)
    status: IssueStatus | None = None
    resolution_notes: str | None = Field(default=None, max_length=RESOLUTION_NOTES_MAX_LENGTH)


class AssignRequest(CamelModel):
    technician_id: str | None = None


class StatusUpdateRequest(CamelModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    status: IssueStatus
    resolution_notes: str | None = Field(default=None, max_length=RESOLUTION_NOTES_MAX_LENGTH)


class CommentCreateRequest(CamelModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    text: str = Field(max_length=COMMENT_MAX_LENGTH)


class IssueStatsResponse(CamelModel):
    total: int
    by_status: dict[str, int]
    by_priority: dict[str, int]
    by_category: dict[str, int]
