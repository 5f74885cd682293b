"""
Security module for the Service Desk.

Provides:
- Password hashing (bcrypt)
- Access/refresh token signing and verification (JWT)
- The role x operation authorization table
"""

from .passwords import PasswordHasher
from .policy import ISSUE_UPDATE_FIELDS, Operation, authorize, is_allowed
from .tokens import TokenPair, TokenService

__all__ = [
    "PasswordHasher",
    "TokenService",
    "TokenPair",
    "Operation",
    "ISSUE_UPDATE_FIELDS",
    "authorize",
    "is_allowed",
]
