from servicedesk.enums import Role, UserStatus
from servicedesk.models import User

API = "/api/auth"


def _register(client, **overrides):
    body = {"name": "Nina New", "email": "nina@example.com", "password": "hunter22"}
    body.update(overrides)
    return client.post(f"{API}/register", json=body)


def test_register_returns_user_and_tokens(test_app_client):
    resp = _register(test_app_client, department="Sales", phone="5551234567")

    assert resp.status_code == 201
    body = resp.json()
    assert body["success"] is True
    assert body["message"] == "User registered successfully"
    data = body["data"]
    assert data["user"]["email"] == "nina@example.com"
    assert data["user"]["role"] == "Employee"
    assert data["user"]["status"] == "active"
    assert data["user"]["department"] == "Sales"
    assert "passwordHash" not in data["user"]
    assert "password_hash" not in data["user"]
    assert data["accessToken"]
    assert data["refreshToken"]
    assert "createdAt" in data["user"]


def test_register_duplicate_email_case_insensitive(test_app_client, test_session):
    assert _register(test_app_client).status_code == 201

    resp = _register(test_app_client, email="NINA@example.com", name="Copycat")

    assert resp.status_code == 400
    assert resp.json() == {
        "success": False,
        "message": "User with this email already exists",
        "errors": [{"field": "email", "msg": "already registered"}],
    }
    assert test_session.query(User).count() == 1


def test_register_validation_errors(test_app_client):
    resp = _register(test_app_client, password="123", email="not-an-email")

    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert body["message"] == "Validation failed"
    assert {error["field"] for error in body["errors"]} == {"email", "password"}


def test_register_rejects_unknown_role(test_app_client):
    assert _register(test_app_client, role="Overlord").status_code == 400


def test_login_success(test_app_client, employee, password, tokens):
    resp = test_app_client.post(f"{API}/login", json={"email": "employee@example.com", "password": password})

    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "Login successful"
    assert body["data"]["user"]["id"] == employee.id
    assert tokens.verify_access_token(body["data"]["accessToken"]) == employee.id


def test_login_wrong_password(test_app_client, employee):
    resp = test_app_client.post(f"{API}/login", json={"email": "employee@example.com", "password": "nope-nope"})

    assert resp.status_code == 401
    assert resp.json()["message"] == "Invalid email or password"
    assert resp.headers["www-authenticate"] == "Bearer"


def test_login_unknown_email(test_app_client):
    resp = test_app_client.post(f"{API}/login", json={"email": "ghost@example.com", "password": "whatever"})
    assert resp.status_code == 401


def test_login_inactive_account(test_app_client, make_user, password):
    make_user(Role.TECHNICIAN, "retired@example.com", status=UserStatus.INACTIVE)

    resp = test_app_client.post(f"{API}/login", json={"email": "retired@example.com", "password": password})

    assert resp.status_code == 403
    assert "inactive" in resp.json()["message"]


def test_refresh_token_flow(test_app_client, employee, tokens):
    pair = tokens.issue_pair(employee.id)

    resp = test_app_client.post(f"{API}/refresh-token", json={"refreshToken": pair.refresh_token})

    assert resp.status_code == 200
    new_access = resp.json()["data"]["accessToken"]
    assert tokens.verify_access_token(new_access) == employee.id


def test_refresh_token_missing(test_app_client):
    resp = test_app_client.post(f"{API}/refresh-token", json={})

    assert resp.status_code == 400
    assert resp.json()["message"] == "Refresh token is required"


def test_refresh_token_invalid_or_wrong_type(test_app_client, employee, tokens):
    access = tokens.issue_access_token(employee.id)

    for token in ("garbage", access):
        resp = test_app_client.post(f"{API}/refresh-token", json={"refreshToken": token})
        assert resp.status_code == 401
        assert resp.json()["message"] == "Invalid or expired refresh token"


def test_logout_requires_token(test_app_client, employee_headers):
    assert test_app_client.post(f"{API}/logout").status_code == 401

    resp = test_app_client.post(f"{API}/logout", headers=employee_headers)
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "message": "Logout successful"}


def test_logout_is_stateless(test_app_client, employee_headers):
    test_app_client.post(f"{API}/logout", headers=employee_headers)

    # the same access token keeps working until it expires
    assert test_app_client.get(f"{API}/me", headers=employee_headers).status_code == 200


def test_me_returns_current_user(test_app_client, employee, employee_headers):
    resp = test_app_client.get(f"{API}/me", headers=employee_headers)

    assert resp.status_code == 200
    assert resp.json()["data"]["id"] == employee.id
    assert resp.json()["data"]["name"] == "Erin Employee"


def test_invalid_bearer_token(test_app_client):
    resp = test_app_client.get(f"{API}/me", headers={"Authorization": "Bearer not-a-token"})

    assert resp.status_code == 401
    assert resp.json() == {"success": False, "message": "Invalid or expired token"}


def test_refresh_token_cannot_be_used_as_bearer(test_app_client, employee, tokens):
    refresh = tokens.issue_refresh_token(employee.id)

    resp = test_app_client.get(f"{API}/me", headers={"Authorization": f"Bearer {refresh}"})
    assert resp.status_code == 401


def test_token_of_deleted_user(test_app_client, test_session, employee, employee_headers):
    test_session.delete(employee)
    test_session.commit()

    resp = test_app_client.get(f"{API}/me", headers=employee_headers)
    assert resp.status_code == 401
    assert resp.json()["message"] == "User not found"


def test_change_password(test_app_client, employee_headers, password):
    resp = test_app_client.put(
        f"{API}/password",
        json={"currentPassword": "wrong-one", "newPassword": "brand-new-pass"},
        headers=employee_headers,
    )
    assert resp.status_code == 401

    resp = test_app_client.put(
        f"{API}/password",
        json={"currentPassword": password, "newPassword": "brand-new-pass"},
        headers=employee_headers,
    )
    assert resp.status_code == 200

    login = test_app_client.post(
        f"{API}/login", json={"email": "employee@example.com", "password": "brand-new-pass"}
    )
    assert login.status_code == 200


def test_change_password_too_short(test_app_client, employee_headers, password):
    resp = test_app_client.put(
        f"{API}/password",
        json={"currentPassword": password, "newPassword": "123"},
        headers=employee_headers,
    )
    assert resp.status_code == 400
