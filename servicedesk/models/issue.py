"""
Issue-related SQLAlchemy models.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Enum as SQLAEnum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, foreign, mapped_column, relationship

from servicedesk.constants import (
    COMMENT_MAX_LENGTH,
    ID_LENGTH,
    LOCATION_MAX_LENGTH,
    TITLE_MAX_LENGTH,
)
from servicedesk.enums import IssueCategory, IssuePriority, IssueStatus

from .base import Base, UTCDateTime, generate_id, utcnow
from .user import User, _enum_values


class Issue(Base):
    """
    A reported service/facility problem tracked through a status lifecycle.

    reported_by_id and assigned_to_id are weak references to users: there is
    no foreign key, so deleting a user leaves its issues in place and the
    reporter/assignee relationships simply resolve to None.
    """

    __tablename__ = "issues"

    id: Mapped[str] = mapped_column(String(ID_LENGTH), primary_key=True, default=generate_id)
    title: Mapped[str] = mapped_column(String(TITLE_MAX_LENGTH))
    description: Mapped[str] = mapped_column(Text)
    category: Mapped[IssueCategory] = mapped_column(
        SQLAEnum(IssueCategory, native_enum=False, length=20, values_callable=_enum_values),
        index=True,
    )
    priority: Mapped[IssuePriority] = mapped_column(
        SQLAEnum(IssuePriority, native_enum=False, length=20, values_callable=_enum_values),
        default=IssuePriority.MEDIUM,
        index=True,
    )
    status: Mapped[IssueStatus] = mapped_column(
        SQLAEnum(IssueStatus, native_enum=False, length=20, values_callable=_enum_values),
        default=IssueStatus.PENDING,
        index=True,
    )
    reported_by_id: Mapped[str] = mapped_column(String(ID_LENGTH), index=True)
    assigned_to_id: Mapped[Optional[str]] = mapped_column(String(ID_LENGTH), nullable=True, index=True)
    location: Mapped[str] = mapped_column(String(LOCATION_MAX_LENGTH))
    resolution_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    reporter: Mapped[Optional["User"]] = relationship(
        "User",
        primaryjoin=lambda: foreign(Issue.reported_by_id) == User.id,
        viewonly=True,
        lazy="selectin",
    )
    assignee: Mapped[Optional["User"]] = relationship(
        "User",
        primaryjoin=lambda: foreign(Issue.assigned_to_id) == User.id,
        viewonly=True,
        lazy="selectin",
    )
    comments: Mapped[list["IssueComment"]] = relationship(
        "IssueComment",
        back_populates="issue",
        cascade="all, delete-orphan",
        order_by="IssueComment.position",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<Issue {self.id} {self.status.value if self.status else None!r}>"


class IssueComment(Base):
    """
    A comment appended to an issue.

    Comments live and die with their issue and are never edited or removed
    on their own. position keeps the append order stable.
    """

    __tablename__ = "issue_comments"

    id: Mapped[str] = mapped_column(String(ID_LENGTH), primary_key=True, default=generate_id)
    issue_id: Mapped[str] = mapped_column(
        ForeignKey("issues.id", ondelete="CASCADE"), index=True
    )
    user_id: Mapped[str] = mapped_column(String(ID_LENGTH), index=True)
    text: Mapped[str] = mapped_column(String(COMMENT_MAX_LENGTH))
    position: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)

    # Relationships
    issue: Mapped["Issue"] = relationship("Issue", back_populates="comments")
    author: Mapped[Optional["User"]] = relationship(
        "User",
        primaryjoin=lambda: foreign(IssueComment.user_id) == User.id,
        viewonly=True,
        lazy="selectin",
    )
