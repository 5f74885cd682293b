from servicedesk.enums import Role, UserStatus
from servicedesk.models import Issue, User

API = "/api/users"


def test_list_users_admin_only(test_app_client, employee, technician, admin, employee_headers, admin_headers):
    assert test_app_client.get(API, headers=employee_headers).status_code == 403

    body = test_app_client.get(API, headers=admin_headers).json()
    assert body["success"] is True
    assert body["count"] == 3
    assert all("passwordHash" not in user for user in body["data"])


def test_list_users_filters(test_app_client, employee, technician, admin, make_user, admin_headers):
    make_user(Role.TECHNICIAN, "idle@example.com", status=UserStatus.INACTIVE)

    body = test_app_client.get(API, params={"role": "Technician"}, headers=admin_headers).json()
    assert {u["email"] for u in body["data"]} == {"tech@example.com", "idle@example.com"}

    body = test_app_client.get(API, params={"status": "inactive"}, headers=admin_headers).json()
    assert [u["email"] for u in body["data"]] == ["idle@example.com"]

    body = test_app_client.get(API, params={"search": "ERIN"}, headers=admin_headers).json()
    assert [u["email"] for u in body["data"]] == ["employee@example.com"]

    assert test_app_client.get(API, params={"role": "Boss"}, headers=admin_headers).status_code == 400


def test_list_by_role(test_app_client, employee, technician, other_technician, admin_headers, technician_headers):
    body = test_app_client.get(f"{API}/role/Technician", headers=admin_headers).json()
    assert body["count"] == 2
    assert {u["role"] for u in body["data"]} == {"Technician"}

    assert test_app_client.get(f"{API}/role/Janitor", headers=admin_headers).status_code == 400
    assert test_app_client.get(f"{API}/role/Technician", headers=technician_headers).status_code == 403


def test_get_user_self_or_admin(
    test_app_client, employee, other_employee, employee_headers, admin_headers
):
    assert test_app_client.get(f"{API}/{employee.id}", headers=employee_headers).status_code == 200
    assert test_app_client.get(f"{API}/{employee.id}", headers=admin_headers).status_code == 200

    resp = test_app_client.get(f"{API}/{other_employee.id}", headers=employee_headers)
    assert resp.status_code == 403


def test_get_user_not_found_and_bad_id(test_app_client, admin_headers):
    assert test_app_client.get(f"{API}/{'0' * 32}", headers=admin_headers).status_code == 404
    assert test_app_client.get(f"{API}/xyz", headers=admin_headers).status_code == 400


def test_update_user(test_app_client, employee, admin_headers):
    resp = test_app_client.put(
        f"{API}/{employee.id}",
        json={"role": "Technician", "department": "Facilities", "status": "inactive"},
        headers=admin_headers,
    )

    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["role"] == "Technician"
    assert data["department"] == "Facilities"
    assert data["status"] == "inactive"


def test_update_user_duplicate_email(test_app_client, employee, technician, admin_headers):
    resp = test_app_client.put(f"{API}/{employee.id}", json={"email": "tech@example.com"}, headers=admin_headers)

    assert resp.status_code == 400
    assert resp.json()["message"] == "Email already in use"


def test_update_user_rejects_password_and_bad_values(test_app_client, employee, admin_headers):
    assert (
        test_app_client.put(f"{API}/{employee.id}", json={"password": "x" * 10}, headers=admin_headers).status_code
        == 400
    )
    assert test_app_client.put(f"{API}/{employee.id}", json={"phone": "12"}, headers=admin_headers).status_code == 400


def test_update_user_forbidden_for_non_admin(test_app_client, employee, employee_headers):
    resp = test_app_client.put(f"{API}/{employee.id}", json={"role": "Admin"}, headers=employee_headers)
    assert resp.status_code == 403


def test_update_unknown_user(test_app_client, admin_headers):
    assert test_app_client.put(f"{API}/{'0' * 32}", json={"name": "X"}, headers=admin_headers).status_code == 404


def test_deactivated_user_cannot_log_in(test_app_client, employee, admin_headers, password):
    test_app_client.put(f"{API}/{employee.id}", json={"status": "inactive"}, headers=admin_headers)

    resp = test_app_client.post("/api/auth/login", json={"email": "employee@example.com", "password": password})
    assert resp.status_code == 403


def test_delete_user_leaves_issues(test_app_client, test_session, make_issue, employee, admin_headers):
    issue = make_issue(employee)

    resp = test_app_client.delete(f"{API}/{employee.id}", headers=admin_headers)

    assert resp.status_code == 200
    assert resp.json()["message"] == "User deleted successfully"
    test_session.expire_all()
    assert test_session.get(User, employee.id) is None
    stored = test_session.get(Issue, issue.id)
    assert stored is not None
    assert stored.reported_by_id == employee.id


def test_admin_cannot_delete_self(test_app_client, admin, admin_headers):
    resp = test_app_client.delete(f"{API}/{admin.id}", headers=admin_headers)

    assert resp.status_code == 400
    assert resp.json()["message"] == "You cannot delete your own account"


def test_delete_user_requires_admin(test_app_client, employee, other_employee, employee_headers):
    assert test_app_client.delete(f"{API}/{other_employee.id}", headers=employee_headers).status_code == 403


def test_delete_unknown_user(test_app_client, admin_headers):
    assert test_app_client.delete(f"{API}/{'0' * 32}", headers=admin_headers).status_code == 404
