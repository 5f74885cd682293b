"""
Repository pattern implementations for data access.

Repositories provide a clean abstraction over database operations.

Usage:
    from servicedesk.repositories import IssueRepository
    from servicedesk.db import db

    with db.session() as session:
        repo = IssueRepository(session)
        issues = repo.list_issues(filters)
"""

from .base import BaseRepository
from .issue_repository import IssueFilters, IssueRepository, VisibilityScope
from .user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "IssueFilters",
    "IssueRepository",
    "UserRepository",
    "VisibilityScope",
]
