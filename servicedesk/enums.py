"""
Shared Enumerations.

Defines the closed value sets used across models, schemas and services.
Values are the exact strings stored in the database and sent over the wire.
"""

from enum import Enum


class Role(str, Enum):
    """User role; determines visibility and mutation rights."""
    EMPLOYEE = "Employee"
    ADMIN = "Admin"
    TECHNICIAN = "Technician"


class UserStatus(str, Enum):
    """Account status. Inactive accounts cannot log in."""
    ACTIVE = "active"
    INACTIVE = "inactive"


class IssueStatus(str, Enum):
    """Issue lifecycle status."""
    PENDING = "Pending"
    ASSIGNED = "Assigned"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    REJECTED = "Rejected"


class IssuePriority(str, Enum):
    """Issue priority level."""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


class IssueCategory(str, Enum):
    """Facility area an issue belongs to."""
    ELECTRICAL = "Electrical"
    PLUMBING = "Plumbing"
    HVAC = "HVAC"
    IT = "IT"
    FURNITURE = "Furniture"
    OTHER = "Other"
