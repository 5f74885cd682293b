"""
User-related SQLAlchemy models.
"""

from datetime import datetime

from sqlalchemy import Enum as SQLAEnum, String
from sqlalchemy.orm import Mapped, mapped_column

from servicedesk.constants import DEPARTMENT_MAX_LENGTH, EMAIL_MAX_LENGTH, ID_LENGTH, NAME_MAX_LENGTH
from servicedesk.enums import Role, UserStatus

from .base import Base, UTCDateTime, generate_id, utcnow


def _enum_values(enum_cls) -> list[str]:
    return [member.value for member in enum_cls]


class User(Base):
    """
    User model for employees, technicians and admins.

    Attributes:
        email: Login identifier, stored lower-cased (unique, case-insensitive)
        password_hash: bcrypt hash; never serialized outward
        role: Employee, Admin or Technician
        status: active or inactive; inactive users cannot log in
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(ID_LENGTH), primary_key=True, default=generate_id)
    name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH))
    email: Mapped[str] = mapped_column(String(EMAIL_MAX_LENGTH), unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255))
    role: Mapped[Role] = mapped_column(
        SQLAEnum(Role, native_enum=False, length=20, values_callable=_enum_values),
        default=Role.EMPLOYEE,
        index=True,
    )
    department: Mapped[str | None] = mapped_column(String(DEPARTMENT_MAX_LENGTH), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    status: Mapped[UserStatus] = mapped_column(
        SQLAEnum(UserStatus, native_enum=False, length=20, values_callable=_enum_values),
        default=UserStatus.ACTIVE,
    )
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, onupdate=utcnow)

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE

    def __repr__(self) -> str:
        return f"<User {self.email} ({self.role.value if self.role else None})>"
