"""
Unified SQLAlchemy models for the Service Desk.

Single source of truth for all database models.

Usage:
    from servicedesk.models import User, Issue, IssueComment
"""

from .base import Base
from .issue import Issue, IssueComment
from .user import User

__all__ = [
    # Base
    "Base",
    # User
    "User",
    # Issue
    "Issue",
    "IssueComment",
]
