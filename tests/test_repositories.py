"""
Repository tests against a real SQLite file.
"""
import sqlite3

import pytest

from store_ratings.core.exceptions import NotFound
from store_ratings.db.database import like_pattern
from store_ratings.models.user import Role
from store_ratings.repositories.rating_repository import RatingRepository
from store_ratings.repositories.store_repository import StoreRepository
from store_ratings.repositories.user_repository import UserRepository


@pytest.fixture
def users(conn) -> UserRepository:
    return UserRepository(conn)


def make_user(users: UserRepository, email: str, role: Role = Role.USER):
    return users.create(name="Someone", email=email, password_hash="hash", role=role)


class TestUserRepository:
    def test_delete_unless_last_admin(self, users):
        first = make_user(users, "a1@ratings.io", Role.ADMIN)
        second = make_user(users, "a2@ratings.io", Role.ADMIN)

        assert users.delete_unless_last_admin(first.id) is True
        assert users.delete_unless_last_admin(second.id) is False
        assert users.get_by_id(second.id) is not None

    def test_delete_regular_user(self, users):
        user = make_user(users, "u@ratings.io")

        assert users.delete_unless_last_admin(user.id) is True
        assert users.delete_unless_last_admin(user.id) is False

    def test_update_role_skips_admins(self, users):
        admin = make_user(users, "a@ratings.io", Role.ADMIN)
        user = make_user(users, "u@ratings.io")

        assert users.update_role(admin.id, Role.USER) is None
        assert users.update_role(user.id, Role.OWNER).role is Role.OWNER

    def test_reset_token_consumed_once(self, users):
        user = make_user(users, "u@ratings.io")
        users.set_reset_token("u@ratings.io", "tok", expires_at_ms=2_000)

        assert users.consume_reset_token("tok", "new-hash", now_ms=1_000) is True
        assert users.consume_reset_token("tok", "newer-hash", now_ms=1_000) is False
        refreshed = users.get_by_id(user.id)
        assert refreshed.password_hash == "new-hash"
        assert refreshed.reset_token is None

    def test_expired_reset_token(self, users):
        make_user(users, "u@ratings.io")
        users.set_reset_token("u@ratings.io", "tok", expires_at_ms=2_000)

        assert users.consume_reset_token("tok", "new-hash", now_ms=2_000) is False

    def test_set_reset_token_unknown_email(self, users):
        assert users.set_reset_token("ghost@ratings.io", "tok", expires_at_ms=1) is False

    def test_list_and_count(self, users):
        make_user(users, "u@ratings.io")
        make_user(users, "o@ratings.io", Role.OWNER)

        assert [u.email for u in users.list_users(exclude_role=Role.OWNER)] == ["u@ratings.io"]
        assert users.count(Role.OWNER) == 1
        assert users.count() == 2

    def test_search_wildcards_are_literal(self, users):
        make_user(users, "plain@ratings.io")
        make_user(users, "main_office@ratings.io")

        assert users.list_users(search="%") == []
        assert [u.email for u in users.list_users(search="in_")] == ["main_office@ratings.io"]


class TestRatingRepository:
    def test_upsert_keeps_one_row(self, conn, users):
        owner = make_user(users, "o@ratings.io", Role.OWNER)
        rater = make_user(users, "u@ratings.io")
        store = StoreRepository(conn).create(name="Shop", email="shop@ratings.io", owner_id=owner.id)
        ratings = RatingRepository(conn)

        first, first_created = ratings.upsert(rater.id, store.id, 4)
        second, second_created = ratings.upsert(rater.id, store.id, 1)

        assert (first_created, second_created) == (True, False)
        assert second.id == first.id
        assert second.rating == 1
        assert ratings.count() == 1
        assert StoreRepository(conn).rating_summary(store.id) == {
            "average_rating": 1.0,
            "total_ratings": 1,
        }

    def test_rating_range_checked_by_schema(self, conn, users):
        owner = make_user(users, "o@ratings.io", Role.OWNER)
        rater = make_user(users, "u@ratings.io")
        store = StoreRepository(conn).create(name="Shop", email="shop@ratings.io", owner_id=owner.id)

        with pytest.raises(sqlite3.IntegrityError):
            RatingRepository(conn).upsert(rater.id, store.id, 9)

    def test_upsert_for_deleted_user_is_not_found(self, conn, users):
        owner = make_user(users, "o@ratings.io", Role.OWNER)
        rater = make_user(users, "u@ratings.io")
        store = StoreRepository(conn).create(name="Shop", email="shop@ratings.io", owner_id=owner.id)
        users.delete_unless_last_admin(rater.id)

        with pytest.raises(NotFound):
            RatingRepository(conn).upsert(rater.id, store.id, 3)
        assert RatingRepository(conn).count() == 0


class TestStoreRepository:
    def test_owner_removed_sets_store_owner_null(self, conn, users):
        owner = make_user(users, "o@ratings.io", Role.OWNER)
        stores = StoreRepository(conn)
        store = stores.create(name="Shop", email="shop@ratings.io", owner_id=owner.id)

        users.delete_unless_last_admin(owner.id)

        assert stores.get_by_id(store.id).owner_id is None
        assert stores.list_with_owner()[0]["owner"] is None


def test_like_pattern_escapes_wildcards():
    assert like_pattern("Shop") == "%shop%"
    assert like_pattern("50%_off\\") == "%50\\%\\_off\\\\%"
