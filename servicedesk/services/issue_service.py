"""
Issue lifecycle service.

Owns the issue workflow on top of IssueRepository:
- role-scoped visibility for every read and list
- field-level update rights per role (see security.policy.ISSUE_UPDATE_FIELDS)
- assignment (Pending -> Assigned) and status changes
- append-only comments

Endpoint-level role checks happen before these methods are called; the
checks here are per record (ownership and assignment).
"""

from typing import Any

from servicedesk.constants import (
    COMMENT_MAX_LENGTH,
    DESCRIPTION_MAX_LENGTH,
    LOCATION_MAX_LENGTH,
    RESOLUTION_NOTES_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    is_valid_id,
)
from servicedesk.enums import IssueCategory, IssuePriority, IssueStatus, Role
from servicedesk.exceptions import AuthorizationError, NotFoundError, ValidationError
from servicedesk.logging import get_logger
from servicedesk.models import Issue, User
from servicedesk.repositories import IssueFilters, IssueRepository, UserRepository, VisibilityScope
from servicedesk.security.policy import ISSUE_UPDATE_FIELDS

logger = get_logger("service.issues")

# field name -> (max length, required)
TEXT_FIELDS: dict[str, tuple[int, bool]] = {
    "title": (TITLE_MAX_LENGTH, True),
    "description": (DESCRIPTION_MAX_LENGTH, True),
    "location": (LOCATION_MAX_LENGTH, True),
    "resolution_notes": (RESOLUTION_NOTES_MAX_LENGTH, False),
}

ENUM_FIELDS = {
    "category": IssueCategory,
    "priority": IssuePriority,
    "status": IssueStatus,
}


def clean_text(field: str, value: Any, max_length: int, required: bool = True) -> str | None:
    """
    Trim a text field and check its bounds.

    Raises:
        ValidationError: If a required value is missing/blank or the value is too long.
    """
    if value is None:
        if required:
            raise ValidationError(f"{field} is required", errors=[{"field": field, "msg": "required"}])
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string", errors=[{"field": field, "msg": "type"}])

    value = value.strip()
    if not value:
        if required:
            raise ValidationError(f"{field} is required", errors=[{"field": field, "msg": "required"}])
        return None
    if len(value) > max_length:
        raise ValidationError(
            f"{field} cannot exceed {max_length} characters",
            errors=[{"field": field, "msg": f"max length {max_length}"}],
        )
    return value


def coerce_enum(field: str, enum_cls, value: Any):
    """Convert a raw value to enum_cls or raise ValidationError listing the allowed values."""
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError(
            f"Invalid {field}. Allowed values: {allowed}",
            errors=[{"field": field, "msg": "invalid choice"}],
        ) from None


def visibility_scope(user: User) -> VisibilityScope:
    """Employees see what they reported, technicians what they are assigned, admins everything."""
    if user.role == Role.EMPLOYEE:
        return VisibilityScope(reported_by_id=user.id)
    if user.role == Role.TECHNICIAN:
        return VisibilityScope(assigned_to_id=user.id)
    return VisibilityScope()


def can_view(issue: Issue, user: User) -> bool:
    if user.role == Role.ADMIN:
        return True
    if user.role == Role.EMPLOYEE:
        return issue.reported_by_id == user.id
    if user.role == Role.TECHNICIAN:
        return issue.assigned_to_id is not None and issue.assigned_to_id == user.id
    return False


def is_participant(issue: Issue, user: User) -> bool:
    """Reporter, current assignee, or any admin."""
    return user.role == Role.ADMIN or user.id in (issue.reported_by_id, issue.assigned_to_id)


class IssueService:
    """
    Issue lifecycle manager.

    Usage:
        with db.session() as session:
            service = IssueService(session)
            issue = service.create_issue(reporter, {"title": ..., ...})
            service.assign(issue.id, technician.id)
    """

    def __init__(self, session, restrict_comments_to_participants: bool = False):
        self.session = session
        self.issues = IssueRepository(session)
        self.users = UserRepository(session)
        self.restrict_comments_to_participants = restrict_comments_to_participants

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def _load(self, issue_id: str) -> Issue:
        if not is_valid_id(issue_id):
            raise ValidationError("Invalid ID format")
        issue = self.issues.get_by_id(issue_id)
        if issue is None:
            raise NotFoundError("Issue not found")
        return issue

    def get_issue(self, issue_id: str, requester: User) -> Issue:
        """
        Get an issue the requester is allowed to see.

        Raises:
            NotFoundError: No issue with this id.
            AuthorizationError: The issue is outside the requester's visibility.
        """
        issue = self._load(issue_id)
        if not can_view(issue, requester):
            raise AuthorizationError("Access denied")
        return issue

    def list_issues(self, requester: User, filters: IssueFilters | None = None) -> list[Issue]:
        """Visible issues matching filters, newest first."""
        return self.issues.list_issues(visibility_scope(requester), filters or IssueFilters())

    def stats(self, requester: User) -> dict[str, Any]:
        """Counts of visible issues by status, priority and category."""
        breakdown = self.issues.status_breakdown(visibility_scope(requester))
        return {
            "total": sum(breakdown["status"].values()),
            "by_status": breakdown["status"],
            "by_priority": breakdown["priority"],
            "by_category": breakdown["category"],
        }

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def create_issue(self, reporter: User, data: dict[str, Any]) -> Issue:
        """
        File a new issue.

        Status is always Pending and the reporter is always the caller; any
        client-supplied values for those fields are ignored.
        """
        priority = data.get("priority")
        issue = self.issues.create(
            title=clean_text("title", data.get("title"), TITLE_MAX_LENGTH),
            description=clean_text("description", data.get("description"), DESCRIPTION_MAX_LENGTH),
            category=coerce_enum("category", IssueCategory, data.get("category")),
            priority=(
                coerce_enum("priority", IssuePriority, priority)
                if priority is not None
                else IssuePriority.MEDIUM
            ),
            location=clean_text("location", data.get("location"), LOCATION_MAX_LENGTH),
            status=IssueStatus.PENDING,
            reported_by_id=reporter.id,
            assigned_to_id=None,
        )
        self.issues.save(issue)

        logger.info(
            "issue_created",
            issue_id=issue.id,
            reporter_id=reporter.id,
            category=issue.category.value,
            priority=issue.priority.value,
        )
        return issue

    def update_issue(self, issue_id: str, requester: User, fields: dict[str, Any]) -> Issue:
        """
        Apply a partial update.

        Employees may edit the descriptive fields of issues they reported,
        technicians may set status/resolution notes on issues assigned to
        them, admins may edit all of these. A request that touches any field
        outside the requester's rights is rejected as a whole.

        Raises:
            AuthorizationError: Issue not visible, or a field the role may not change.
            ValidationError: Bad field value.
        """
        issue = self._load(issue_id)
        if not can_view(issue, requester):
            if requester.role == Role.EMPLOYEE:
                raise AuthorizationError("You can only update your own issues")
            raise AuthorizationError("You are not assigned to this issue")

        allowed = ISSUE_UPDATE_FIELDS.get(requester.role, frozenset())
        forbidden = sorted(name for name in fields if name not in allowed)
        if forbidden:
            logger.warning(
                "issue_update_denied",
                issue_id=issue.id,
                user_id=requester.id,
                role=requester.role.value,
                fields=forbidden,
            )
            raise AuthorizationError(
                f"Role '{requester.role.value}' cannot change: {', '.join(forbidden)}"
            )

        changes: dict[str, Any] = {}
        for name, value in fields.items():
            if name in TEXT_FIELDS:
                max_length, required = TEXT_FIELDS[name]
                changes[name] = clean_text(name, value, max_length, required)
            elif name in ENUM_FIELDS:
                changes[name] = coerce_enum(name, ENUM_FIELDS[name], value)

        if changes:
            self.issues.update(issue, **changes)
            self.issues.save(issue)
            logger.info("issue_updated", issue_id=issue.id, user_id=requester.id, fields=sorted(changes))
        return issue

    def assign(self, issue_id: str, technician_id: str) -> Issue:
        """
        Assign an issue to a technician and move it to Assigned in one write.

        Raises:
            NotFoundError: No issue with this id.
            ValidationError: technician_id is not an existing Technician.
        """
        issue = self._load(issue_id)
        if not technician_id:
            raise ValidationError("Technician ID is required")

        technician = self.users.get_technician(technician_id) if is_valid_id(technician_id) else None
        if technician is None:
            raise ValidationError("Invalid technician")

        self.issues.update(issue, assigned_to_id=technician.id, status=IssueStatus.ASSIGNED)
        self.issues.save(issue)

        logger.info("issue_assigned", issue_id=issue.id, technician_id=technician.id)
        return issue

    def update_status(
        self,
        issue_id: str,
        requester: User,
        status: Any,
        resolution_notes: str | None = None,
    ) -> Issue:
        """
        Set the status of an issue.

        Only the current assignee (or an admin) may do this. Any status may
        follow any other; Completed and Rejected are not terminal.

        Raises:
            AuthorizationError: Requester is neither the assignee nor an admin.
            ValidationError: Unknown status or notes too long.
        """
        issue = self._load(issue_id)

        is_assignee = issue.assigned_to_id is not None and issue.assigned_to_id == requester.id
        if not (is_assignee or requester.role == Role.ADMIN):
            logger.warning("status_update_denied", issue_id=issue.id, user_id=requester.id)
            raise AuthorizationError("You are not assigned to this issue")

        new_status = coerce_enum("status", IssueStatus, status)
        changes: dict[str, Any] = {"status": new_status}
        notes = clean_text("resolution_notes", resolution_notes, RESOLUTION_NOTES_MAX_LENGTH, required=False)
        if notes is not None:
            changes["resolution_notes"] = notes

        previous = issue.status
        self.issues.update(issue, **changes)
        self.issues.save(issue)

        logger.info(
            "issue_status_changed",
            issue_id=issue.id,
            user_id=requester.id,
            from_status=previous.value,
            to_status=new_status.value,
        )
        return issue

    def add_comment(self, issue_id: str, author: User, text: Any) -> Issue:
        """
        Append a comment to an issue.

        Any authenticated user may comment unless comments are restricted to
        participants (reporter, assignee, admins) by configuration.
        """
        issue = self._load(issue_id)
        if self.restrict_comments_to_participants and not is_participant(issue, author):
            raise AuthorizationError("Only the reporter, the assignee or an admin can comment")

        body = clean_text("text", text, COMMENT_MAX_LENGTH)
        self.issues.add_comment(issue, author.id, body)

        logger.info("issue_commented", issue_id=issue.id, user_id=author.id, comments=len(issue.comments))
        return issue

    def delete_issue(self, issue_id: str) -> None:
        """Hard-delete an issue together with its comments."""
        issue = self._load(issue_id)
        self.issues.delete(issue)
        logger.info("issue_deleted", issue_id=issue_id)
