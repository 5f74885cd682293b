"""
Pytest fixtures for Service Desk tests.

Every test gets a fresh in-memory SQLite database behind the DatabaseManager
singleton (StaticPool keeps the single connection alive for the test).
"""

import pytest

from servicedesk.config import Settings
from servicedesk.db import db
from servicedesk.enums import IssueCategory, IssuePriority, Role, UserStatus
from servicedesk.models import Issue, User
from servicedesk.security import PasswordHasher, TokenService

TEST_PASSWORD = "secret123"


@pytest.fixture
def settings():
    """Settings for tests: in-memory database, fast bcrypt, distinct JWT keys."""
    return Settings(
        DATABASE_URL="sqlite:///:memory:",
        JWT_SECRET_KEY="unit-access-key-0123456789abcdefghijklmnop",
        JWT_REFRESH_SECRET_KEY="unit-refresh-key-0123456789abcdefghijklmnop",
        BCRYPT_ROUNDS=4,
        DEBUG=False,
        ENV="test",
    )


@pytest.fixture
def hasher(settings):
    return PasswordHasher(rounds=settings.bcrypt_rounds)


@pytest.fixture
def tokens(settings):
    return TokenService(settings)


@pytest.fixture(scope="function")
def test_db(settings):
    """Create a fresh test database for each test."""
    db.reset()
    db.initialize(settings)
    db.create_all_tables()

    yield db

    db.reset()


@pytest.fixture
def test_session(test_db):
    """Get a test session from the test database."""
    session = test_db.SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def _create_user(session, hasher, role, email, name=None, status=UserStatus.ACTIVE, department=None):
    user = User(
        name=name or email.split("@")[0].title(),
        email=email,
        password_hash=hasher.hash(TEST_PASSWORD),
        role=role,
        status=status,
        department=department,
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture
def make_user(test_session, hasher):
    """Factory creating persisted users: make_user(Role.TECHNICIAN, "t2@example.com")."""

    def factory(role=Role.EMPLOYEE, email=None, **kwargs):
        factory.counter += 1
        email = email or f"user{factory.counter}@example.com"
        return _create_user(test_session, hasher, role, email, **kwargs)

    factory.counter = 0
    return factory


@pytest.fixture
def employee(make_user):
    return make_user(Role.EMPLOYEE, "employee@example.com", name="Erin Employee", department="Finance")


@pytest.fixture
def other_employee(make_user):
    return make_user(Role.EMPLOYEE, "other@example.com", name="Oscar Other")


@pytest.fixture
def technician(make_user):
    return make_user(Role.TECHNICIAN, "tech@example.com", name="Tara Tech", department="Facilities")


@pytest.fixture
def other_technician(make_user):
    return make_user(Role.TECHNICIAN, "tech2@example.com", name="Theo Tech")


@pytest.fixture
def admin(make_user):
    return make_user(Role.ADMIN, "admin@example.com", name="Ada Admin")


@pytest.fixture
def sample_issue_data():
    """Sample issue payload as sent by the client."""
    return {
        "title": "AC broken",
        "description": "The air conditioning in room 301 blows warm air.",
        "category": IssueCategory.HVAC.value,
        "priority": IssuePriority.HIGH.value,
        "location": "Bldg A/301",
    }


@pytest.fixture
def make_issue(test_session):
    """Factory creating persisted issues reported by a given user."""

    def factory(reporter, assignee=None, **overrides):
        fields = {
            "title": "Leaking tap",
            "description": "Kitchen tap drips constantly.",
            "category": IssueCategory.PLUMBING,
            "priority": IssuePriority.MEDIUM,
            "location": "Bldg B/Kitchen",
            "reported_by_id": reporter.id,
            "assigned_to_id": assignee.id if assignee else None,
        }
        fields.update(overrides)
        issue = Issue(**fields)
        test_session.add(issue)
        test_session.commit()
        test_session.refresh(issue)
        return issue

    return factory


@pytest.fixture
def password():
    """Plain-text password of every user created by make_user."""
    return TEST_PASSWORD
