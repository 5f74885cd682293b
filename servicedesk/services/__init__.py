"""
Service layer for business logic.

Services sit between the HTTP routers and the repositories and own the
record-level rules (visibility, ownership, assignment, credentials).
"""

from .issue_service import IssueService, can_view, visibility_scope
from .user_service import AccountService

__all__ = [
    "AccountService",
    "IssueService",
    "can_view",
    "visibility_scope",
]
