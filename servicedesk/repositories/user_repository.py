"""User repository for authentication and user management."""

from sqlalchemy import or_

from servicedesk.enums import Role, UserStatus
from servicedesk.models import User

from .base import BaseRepository


def normalize_email(email: str) -> str:
    """Emails are unique case-insensitively; store and compare them lower-cased."""
    return email.strip().lower()


class UserRepository(BaseRepository[User]):
    """Repository for User operations."""

    model = User

    def get_by_email(self, email: str) -> User | None:
        """Get user by email (case-insensitive)."""
        return self.session.query(User).filter(User.email == normalize_email(email)).first()

    def email_taken(self, email: str, exclude_user_id: str | None = None) -> bool:
        """Check whether another user already owns this email."""
        query = self.session.query(User.id).filter(User.email == normalize_email(email))
        if exclude_user_id:
            query = query.filter(User.id != exclude_user_id)
        return query.first() is not None

    def get_technician(self, user_id: str) -> User | None:
        """Get a user only if it exists and has the Technician role."""
        user = self.get_by_id(user_id)
        if user is None or user.role != Role.TECHNICIAN:
            return None
        return user

    def list_users(
        self,
        role: Role | None = None,
        status: UserStatus | None = None,
        search: str | None = None,
    ) -> list[User]:
        """
        List users, newest first.

        Args:
            role: Only users with this role
            status: Only users with this account status
            search: Case-insensitive substring over name, email and department
        """
        query = self.session.query(User)

        if role is not None:
            query = query.filter(User.role == role)
        if status is not None:
            query = query.filter(User.status == status)
        if search:
            pattern = f"%{search}%"
            query = query.filter(
                or_(
                    User.name.ilike(pattern),
                    User.email.ilike(pattern),
                    User.department.ilike(pattern),
                )
            )

        return query.order_by(User.created_at.desc()).all()
