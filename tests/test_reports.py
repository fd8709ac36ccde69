"""
Tests for the admin dashboard and CSV reports.
"""
import csv
import io

from fastapi.testclient import TestClient

from store_ratings.core.config import settings


def parse_csv(text: str) -> list[list[str]]:
    return list(csv.reader(io.StringIO(text)))


def test_dashboard_totals(client: TestClient, admin_headers, create_account, create_store):
    owner_id, _ = create_account("Olive Owner", "olive@ratings.io", role="owner")
    store_id = create_store("Corner Shop", "shop@ratings.io", owner_id)
    _, rater = create_account("Uma User", "uma@ratings.io")
    client.post("/api/v1/user/ratings", json={"store_id": store_id, "rating": 5}, headers=rater)

    response = client.get("/api/v1/admin/dashboard", headers=admin_headers)

    assert response.status_code == 200
    assert response.json() == {"total_users": 3, "total_stores": 1, "total_ratings": 1}


def test_users_report(client: TestClient, admin_headers, create_account):
    create_account("Olive Owner", "olive@ratings.io", role="owner")

    response = client.get("/api/v1/admin/reports/users", headers=admin_headers)

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "attachment" in response.headers["content-disposition"]
    rows = parse_csv(response.text)
    assert rows[0] == ["ID", "Name", "Email", "Role"]
    assert [r[2] for r in rows[1:]] == [settings.ADMIN_EMAIL, "olive@ratings.io"]
    assert rows[2][3] == "owner"


def test_stores_report(client: TestClient, admin_headers, create_account, create_store):
    owner_id, _ = create_account("Olive Owner", "olive@ratings.io", role="owner")
    create_store("Corner, Shop", "shop@ratings.io", owner_id)

    response = client.get("/api/v1/admin/reports/stores", headers=admin_headers)

    rows = parse_csv(response.text)
    assert rows[0] == ["ID", "Store Name", "Owner", "Rating"]
    assert rows[1][1:] == ["Corner, Shop", "Olive Owner", "0.0"]


def test_reports_are_admin_only(client: TestClient, create_account):
    _, headers = create_account("Uma User", "uma@ratings.io")

    assert client.get("/api/v1/admin/reports/users", headers=headers).status_code == 403
    assert client.get("/api/v1/admin/dashboard", headers=headers).status_code == 403
