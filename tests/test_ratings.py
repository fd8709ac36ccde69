"""
Tests for store browsing and rating submission by regular users.
"""
import pytest
from fastapi.testclient import TestClient

from store_ratings.core.exceptions import NotFound, ValidationError
from store_ratings.models.user import Role
from store_ratings.repositories.store_repository import StoreRepository
from store_ratings.repositories.user_repository import UserRepository
from store_ratings.services.rating_service import RatingService


@pytest.fixture
def store_id(create_account, create_store) -> int:
    owner_id, _ = create_account("Olive Owner", "olive@ratings.io", role="owner")
    return create_store("Corner Shop", "shop@ratings.io", owner_id)


def rate(client: TestClient, headers: dict, store_id: int, value):
    return client.post("/api/v1/user/ratings", json={"store_id": store_id, "rating": value}, headers=headers)


def rating_rows(database, store_id: int) -> list[tuple]:
    with database.session() as conn:
        rows = conn.execute(
            "SELECT user_id, rating FROM ratings WHERE store_id = ?", (store_id,)
        ).fetchall()
    return [tuple(r) for r in rows]


class TestRateStore:
    """Tests for POST /api/v1/user/ratings."""

    def test_first_rating_created(self, client: TestClient, create_account, store_id):
        _, headers = create_account("Uma User", "uma@ratings.io")

        response = rate(client, headers, store_id, 4)

        assert response.status_code == 201
        assert response.json()["rating"] == 4
        assert response.json()["message"] == "Rating submitted successfully"

    def test_rerating_updates_single_row(self, client: TestClient, create_account, store_id, database):
        user_id, headers = create_account("Uma User", "uma@ratings.io")

        statuses = [rate(client, headers, store_id, value).status_code for value in (4, 2, 1)]

        assert statuses == [201, 200, 200]
        assert rating_rows(database, store_id) == [(user_id, 1)]

    @pytest.mark.parametrize("value", [0, 6])
    def test_out_of_range_rejected(self, client: TestClient, create_account, store_id, value, database):
        _, headers = create_account("Uma User", "uma@ratings.io")

        response = rate(client, headers, store_id, value)

        assert response.status_code == 400
        assert rating_rows(database, store_id) == []

    @pytest.mark.parametrize("value", [1, 5])
    def test_bounds_accepted(self, client: TestClient, create_account, store_id, value):
        _, headers = create_account("Uma User", "uma@ratings.io")

        assert rate(client, headers, store_id, value).status_code == 201

    def test_non_integer_rejected(self, client: TestClient, create_account, store_id):
        _, headers = create_account("Uma User", "uma@ratings.io")

        assert rate(client, headers, store_id, 3.5).status_code == 400
        assert rate(client, headers, store_id, "4").status_code == 400

    def test_unknown_store(self, client: TestClient, create_account):
        _, headers = create_account("Uma User", "uma@ratings.io")

        assert rate(client, headers, 999, 3).status_code == 404

    def test_deleted_user_token_rejected(
        self, client: TestClient, admin_headers, create_account, store_id, database
    ):
        user_id, headers = create_account("Uma User", "uma@ratings.io")
        client.delete(f"/api/v1/admin/users/{user_id}", headers=admin_headers)

        response = rate(client, headers, store_id, 4)

        assert response.status_code == 401
        assert rating_rows(database, store_id) == []

    def test_promoted_user_old_token_cannot_rate(
        self, client: TestClient, admin_headers, create_account, store_id
    ):
        user_id, headers = create_account("Uma User", "uma@ratings.io")
        client.patch(f"/api/v1/admin/users/{user_id}/role", json={"role": "owner"}, headers=admin_headers)

        assert rate(client, headers, store_id, 4).status_code == 403

    def test_admin_and_owner_cannot_rate(self, client: TestClient, admin_headers, create_account, store_id):
        _, owner_headers = create_account("Oscar Owner", "oscar@ratings.io", role="owner")

        assert rate(client, admin_headers, store_id, 3).status_code == 403
        assert rate(client, owner_headers, store_id, 3).status_code == 403


class TestBrowseStores:
    """Tests for GET /api/v1/user/stores."""

    def test_average_and_own_rating(self, client: TestClient, create_account, store_id):
        _, first = create_account("Uma User", "uma@ratings.io")
        _, second = create_account("Victor Vale", "victor@ratings.io")
        rate(client, first, store_id, 4)
        rate(client, second, store_id, 2)

        [store] = client.get("/api/v1/user/stores", headers=first).json()

        assert store["average_rating"] == 3.0
        assert store["total_ratings"] == 2
        assert store["my_rating"] == 4

    def test_unrated_store_reports_zero(self, client: TestClient, create_account, store_id):
        _, headers = create_account("Uma User", "uma@ratings.io")

        [store] = client.get("/api/v1/user/stores", headers=headers).json()

        assert store["average_rating"] == 0
        assert store["my_rating"] is None

    def test_average_rounded_to_one_decimal(self, client: TestClient, create_account, store_id):
        raters = [create_account(f"Rater {n}", f"rater{n}@ratings.io")[1] for n in range(3)]
        for headers, value in zip(raters, (5, 4, 4)):
            rate(client, headers, store_id, value)

        [store] = client.get("/api/v1/user/stores", headers=raters[0]).json()

        assert store["average_rating"] == 4.3

    def test_search_by_address(self, client: TestClient, create_account, create_store, store_id):
        other_owner, _ = create_account("Oscar Owner", "oscar@ratings.io", role="owner")
        create_store("Book Nook", "books@ratings.io", other_owner, address="9 Harbour Lane")
        _, headers = create_account("Uma User", "uma@ratings.io")

        response = client.get("/api/v1/user/stores?search=harbour", headers=headers)

        assert [s["name"] for s in response.json()] == ["Book Nook"]

    @pytest.mark.parametrize("term", ["%", "_"])
    def test_wildcards_match_literally(self, client: TestClient, create_account, store_id, term):
        _, headers = create_account("Uma User", "uma@ratings.io")

        response = client.get("/api/v1/user/stores", params={"search": term}, headers=headers)

        assert response.json() == []


class TestRatingService:
    """Direct service tests."""

    def _setup(self, conn) -> tuple[int, int]:
        users = UserRepository(conn)
        owner = users.create(name="Olive", email="olive@ratings.io", password_hash="x", role=Role.OWNER)
        rater = users.create(name="Uma", email="uma@ratings.io", password_hash="x", role=Role.USER)
        store = StoreRepository(conn).create(name="Shop", email="shop@ratings.io", owner_id=owner.id)
        return rater.id, store.id

    def test_created_flag(self, conn):
        user_id, store_id = self._setup(conn)
        service = RatingService(conn)

        _, first = service.rate_store(user_id, store_id, 3)
        stored, second = service.rate_store(user_id, store_id, 5)

        assert (first, second) == (True, False)
        assert stored.rating == 5

    def test_range_checked_without_schema(self, conn):
        user_id, store_id = self._setup(conn)

        with pytest.raises(ValidationError):
            RatingService(conn).rate_store(user_id, store_id, 0)
        with pytest.raises(ValidationError):
            RatingService(conn).rate_store(user_id, store_id, 6)

    def test_missing_store(self, conn):
        user_id, _ = self._setup(conn)

        with pytest.raises(NotFound):
            RatingService(conn).rate_store(user_id, 12345, 3)
