"""
Tests for GET /api/v1/owner/dashboard.
"""
from fastapi.testclient import TestClient


def test_dashboard_scenario(client: TestClient, create_account, create_store):
    owner_id, owner_headers = create_account("Olive Owner", "olive@ratings.io", role="owner")
    store_id = create_store("Corner Shop", "shop@ratings.io", owner_id)
    _, first = create_account("Uma User", "uma@ratings.io")
    _, second = create_account("Victor Vale", "victor@ratings.io")
    client.post("/api/v1/user/ratings", json={"store_id": store_id, "rating": 4}, headers=first)
    client.post("/api/v1/user/ratings", json={"store_id": store_id, "rating": 2}, headers=second)

    response = client.get("/api/v1/owner/dashboard", headers=owner_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["store"]["id"] == store_id
    assert data["average_rating"] == 3.0
    assert data["total_ratings"] == 2
    # Newest first.
    assert [r["user_name"] for r in data["ratings"]] == ["Victor Vale", "Uma User"]
    assert [r["rating"] for r in data["ratings"]] == [2, 4]


def test_rerating_moves_to_top_and_recomputes(client: TestClient, create_account, create_store):
    owner_id, owner_headers = create_account("Olive Owner", "olive@ratings.io", role="owner")
    store_id = create_store("Corner Shop", "shop@ratings.io", owner_id)
    _, first = create_account("Uma User", "uma@ratings.io")
    _, second = create_account("Victor Vale", "victor@ratings.io")
    client.post("/api/v1/user/ratings", json={"store_id": store_id, "rating": 4}, headers=first)
    client.post("/api/v1/user/ratings", json={"store_id": store_id, "rating": 2}, headers=second)
    client.post("/api/v1/user/ratings", json={"store_id": store_id, "rating": 1}, headers=first)

    data = client.get("/api/v1/owner/dashboard", headers=owner_headers).json()

    assert data["ratings"][0]["user_name"] == "Uma User"
    assert data["ratings"][0]["rating"] == 1
    assert data["total_ratings"] == 2
    assert data["average_rating"] == 1.5


def test_empty_store_average_is_zero(client: TestClient, create_account, create_store):
    owner_id, owner_headers = create_account("Olive Owner", "olive@ratings.io", role="owner")
    create_store("Corner Shop", "shop@ratings.io", owner_id)

    data = client.get("/api/v1/owner/dashboard", headers=owner_headers).json()

    assert data["average_rating"] == 0
    assert data["ratings"] == []


def test_owner_without_store(client: TestClient, create_account):
    _, owner_headers = create_account("Olive Owner", "olive@ratings.io", role="owner")

    response = client.get("/api/v1/owner/dashboard", headers=owner_headers)

    assert response.status_code == 404
    assert response.json()["detail"] == "No store found for this owner"


def test_only_owners_allowed(client: TestClient, admin_headers, create_account):
    _, user_headers = create_account("Uma User", "uma@ratings.io")

    assert client.get("/api/v1/owner/dashboard", headers=user_headers).status_code == 403
    assert client.get("/api/v1/owner/dashboard", headers=admin_headers).status_code == 403
