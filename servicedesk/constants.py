"""
Application constants for the Service Desk.

Field length limits and identifier format shared by models, request schemas
and the lifecycle services.
"""

import re

# =============================================================================
# Field Limits
# =============================================================================

NAME_MAX_LENGTH = 100
EMAIL_MAX_LENGTH = 255
DEPARTMENT_MAX_LENGTH = 100
PASSWORD_MIN_LENGTH = 6

TITLE_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 2000
LOCATION_MAX_LENGTH = 200
RESOLUTION_NOTES_MAX_LENGTH = 2000
COMMENT_MAX_LENGTH = 1000

# Phone numbers are stored as bare digits
PHONE_PATTERN = r"^[0-9]{10,15}$"

# =============================================================================
# Identifiers
# =============================================================================

# Record identifiers are UUID4 hex strings
ID_LENGTH = 32
ID_PATTERN = re.compile(r"^[0-9a-f]{32}$")


def is_valid_id(value: str | None) -> bool:
    """Return True when value has the canonical identifier format."""
    return bool(value) and ID_PATTERN.fullmatch(value) is not None
