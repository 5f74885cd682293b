"""
Service Desk Core Library.

This package provides the core functionality for the Service Desk,
including configuration, database management, models, repositories,
security (passwords, tokens, authorization) and the issue lifecycle services.

Usage:
    # Database
    from servicedesk.db import db, get_db
    from servicedesk.models import User, Issue, IssueComment
    from servicedesk.repositories import IssueRepository, UserRepository

    # Config
    from servicedesk.config import get_settings, Settings

    # Logging
    from servicedesk.logging import get_logger, configure_logging
"""

__version__ = "1.0.0"

# Lazy imports to avoid circular dependencies
# Users should import directly from submodules:
#   from servicedesk.db import db
#   from servicedesk.config import get_settings
#   from servicedesk.logging import get_logger
