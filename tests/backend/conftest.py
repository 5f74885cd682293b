from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from backend.app.main import create_app
from servicedesk.db import get_db


@pytest.fixture
def test_app(test_db, settings):
    app = create_app(settings)

    def override_get_db() -> Iterator[Session]:
        session = test_db.SessionLocal()
        try:
            yield session
            session.commit()  # Auto-commit on success like production
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def test_app_client(test_app) -> Iterator[TestClient]:
    with TestClient(test_app) as client:
        yield client


@pytest.fixture
def auth_headers(tokens):
    """Build a bearer header for a persisted user."""

    def build(user) -> dict[str, str]:
        return {"Authorization": f"Bearer {tokens.issue_access_token(user.id)}"}

    return build


@pytest.fixture
def employee_headers(auth_headers, employee):
    return auth_headers(employee)


@pytest.fixture
def technician_headers(auth_headers, technician):
    return auth_headers(technician)


@pytest.fixture
def admin_headers(auth_headers, admin):
    return auth_headers(admin)
