"""
Issue repository with role-scoped queries.
"""

from dataclasses import dataclass

from sqlalchemy import and_, func, or_

from servicedesk.enums import IssueCategory, IssuePriority, IssueStatus
from servicedesk.models import Issue, IssueComment

from .base import BaseRepository


@dataclass
class IssueFilters:
    """Optional client-supplied list filters. None means "no constraint"."""

    status: IssueStatus | None = None
    priority: IssuePriority | None = None
    category: IssueCategory | None = None
    reported_by_id: str | None = None
    assigned_to_id: str | None = None
    search: str | None = None


@dataclass(frozen=True)
class VisibilityScope:
    """
    Server-side restriction derived from the requester's role.

    Both fields None means unrestricted (Admin). The scope is combined with
    IssueFilters using AND, so client filters can only narrow it.
    """

    reported_by_id: str | None = None
    assigned_to_id: str | None = None


class IssueRepository(BaseRepository[Issue]):
    """
    Repository for Issue operations.

    Key features:
    - list_issues: visibility scope AND client filters, newest first
    - add_comment: append-only comment sequence
    - status_breakdown: grouped counts for dashboards
    """

    model = Issue

    def _conditions(self, scope: VisibilityScope, filters: IssueFilters | None = None) -> list:
        conditions = []

        if scope.reported_by_id is not None:
            conditions.append(Issue.reported_by_id == scope.reported_by_id)
        if scope.assigned_to_id is not None:
            conditions.append(Issue.assigned_to_id == scope.assigned_to_id)

        if filters is None:
            return conditions

        if filters.status is not None:
            conditions.append(Issue.status == filters.status)
        if filters.priority is not None:
            conditions.append(Issue.priority == filters.priority)
        if filters.category is not None:
            conditions.append(Issue.category == filters.category)
        if filters.reported_by_id:
            conditions.append(Issue.reported_by_id == filters.reported_by_id)
        if filters.assigned_to_id:
            conditions.append(Issue.assigned_to_id == filters.assigned_to_id)

        if filters.search:
            term = filters.search
            conditions.append(
                or_(
                    Issue.title.icontains(term, autoescape=True),
                    Issue.description.icontains(term, autoescape=True),
                    Issue.location.icontains(term, autoescape=True),
                )
            )

        return conditions

    def list_issues(self, scope: VisibilityScope, filters: IssueFilters) -> list[Issue]:
        """
        Get issues visible in scope that match the filters, newest first.

        Args:
            scope: Role-derived visibility restriction (always applied)
            filters: Optional client filters

        Returns:
            List of issues with reporter, assignee and comments loaded
        """
        query = self.session.query(Issue)
        conditions = self._conditions(scope, filters)
        if conditions:
            query = query.filter(and_(*conditions))
        return query.order_by(Issue.created_at.desc()).all()

    def save(self, issue: Issue) -> Issue:
        """
        Flush pending changes on an issue as a single write and reload it.

        Reloading refreshes the reporter/assignee relationships, which do not
        follow changes to the raw id columns on their own.
        """
        self.session.flush()
        self.session.refresh(issue)
        return issue

    def add_comment(self, issue: Issue, user_id: str, text: str) -> IssueComment:
        """Append a comment at the end of the issue's comment sequence."""
        comment = IssueComment(user_id=user_id, text=text, position=len(issue.comments))
        issue.comments.append(comment)
        self.save(issue)
        return comment

    def status_breakdown(self, scope: VisibilityScope) -> dict[str, dict[str, int]]:
        """
        Count visible issues grouped by status, priority and category.

        Returns:
            {"status": {...}, "priority": {...}, "category": {...}} with every
            enum value present (zero when no issue has it).
        """
        conditions = self._conditions(scope)
        breakdown: dict[str, dict[str, int]] = {}

        for name, column, enum_cls in (
            ("status", Issue.status, IssueStatus),
            ("priority", Issue.priority, IssuePriority),
            ("category", Issue.category, IssueCategory),
        ):
            counts = {member.value: 0 for member in enum_cls}
            query = self.session.query(column, func.count(Issue.id))
            if conditions:
                query = query.filter(and_(*conditions))
            for value, count in query.group_by(column).all():
                counts[value.value if hasattr(value, "value") else str(value)] = count
            breakdown[name] = counts

        return breakdown
