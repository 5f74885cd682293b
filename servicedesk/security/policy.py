"""
Role-based authorization table.

Every endpoint declares the Operation it performs; access is decided here,
once per request, from the requester's role. Record-level rules (ownership,
assignment) are enforced by the services on top of this table.
"""

from enum import Enum

from servicedesk.enums import Role
from servicedesk.exceptions import AuthorizationError


class Operation(str, Enum):
    """Operations exposed by the API."""
    ISSUE_CREATE = "issue.create"
    ISSUE_LIST = "issue.list"
    ISSUE_READ = "issue.read"
    ISSUE_UPDATE = "issue.update"
    ISSUE_UPDATE_STATUS = "issue.update_status"
    ISSUE_ASSIGN = "issue.assign"
    ISSUE_DELETE = "issue.delete"
    ISSUE_COMMENT = "issue.comment"
    USER_LIST = "user.list"
    USER_READ = "user.read"
    USER_UPDATE = "user.update"
    USER_DELETE = "user.delete"


_EVERYONE = frozenset(Role)
_ADMIN_ONLY = frozenset({Role.ADMIN})

# USER_READ is open to every role here; non-admins are limited to their own
# record by the user service.
PERMISSIONS: dict[Operation, frozenset[Role]] = {
    Operation.ISSUE_CREATE: _EVERYONE,
    Operation.ISSUE_LIST: _EVERYONE,
    Operation.ISSUE_READ: _EVERYONE,
    Operation.ISSUE_UPDATE: _EVERYONE,
    Operation.ISSUE_UPDATE_STATUS: frozenset({Role.TECHNICIAN, Role.ADMIN}),
    Operation.ISSUE_ASSIGN: _ADMIN_ONLY,
    Operation.ISSUE_DELETE: _ADMIN_ONLY,
    Operation.ISSUE_COMMENT: _EVERYONE,
    Operation.USER_LIST: _ADMIN_ONLY,
    Operation.USER_READ: _EVERYONE,
    Operation.USER_UPDATE: _ADMIN_ONLY,
    Operation.USER_DELETE: _ADMIN_ONLY,
}


# Issue fields each role may change through the general update operation.
# Employees and technicians are further limited to issues they report or are
# assigned to. assigned_to is absent everywhere: it only changes via assign.
ISSUE_UPDATE_FIELDS: dict[Role, frozenset[str]] = {
    Role.EMPLOYEE: frozenset({"title", "description", "category", "priority", "location"}),
    Role.TECHNICIAN: frozenset({"status", "resolution_notes"}),
    Role.ADMIN: frozenset(
        {"title", "description", "category", "priority", "location", "status", "resolution_notes"}
    ),
}


def is_allowed(role: Role, operation: Operation) -> bool:
    """Return True if role may perform operation. Unknown operations are denied."""
    return role in PERMISSIONS.get(operation, frozenset())


def authorize(role: Role, operation: Operation) -> None:
    """
    Raise AuthorizationError unless role may perform operation.

    Raises:
        AuthorizationError: 403 with a message naming the role.
    """
    if not is_allowed(role, operation):
        raise AuthorizationError(f"Role '{Role(role).value}' is not allowed to perform this action")
