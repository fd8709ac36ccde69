"""
Repository layer for User persistence.
All SQL for the `users` table lives here.
"""
import sqlite3
from typing import Optional
import logging

from store_ratings.core.exceptions import Conflict
from store_ratings.core.logging_config import log_db_timing
from store_ratings.db.database import like_pattern
from store_ratings.models.user import Role, User

logger = logging.getLogger(__name__)


class UserRepository:
    """Data access layer for user records."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        """Store the database connection for query execution."""
        logger.trace("Initializing UserRepository")
        self._conn = conn

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    @log_db_timing
    def get_by_id(self, user_id: int) -> Optional[User]:
        """Return a user by id or None if missing."""
        row = self._conn.execute(
            "SELECT * FROM users WHERE id = ?", (user_id,)
        ).fetchone()
        return User.from_row(row) if row else None

    @log_db_timing
    def get_by_email(self, email: str) -> Optional[User]:
        """Return a user by email or None if missing."""
        row = self._conn.execute(
            "SELECT * FROM users WHERE email = ?", (email,)
        ).fetchone()
        return User.from_row(row) if row else None

    @log_db_timing
    def list_users(
        self,
        role: Optional[Role] = None,
        exclude_role: Optional[Role] = None,
        search: Optional[str] = None,
    ) -> list[User]:
        """
        Return users ordered by id.

        *role* keeps only that role, *exclude_role* drops one, and *search*
        matches a case-insensitive substring of name or email.
        """
        clauses: list[str] = []
        params: list = []
        if role is not None:
            clauses.append("role = ?")
            params.append(role.value)
        if exclude_role is not None:
            clauses.append("role != ?")
            params.append(exclude_role.value)
        if search:
            clauses.append(
                "(LOWER(name) LIKE ? ESCAPE '\\' OR LOWER(email) LIKE ? ESCAPE '\\')"
            )
            pattern = like_pattern(search)
            params.extend([pattern, pattern])

        sql = "SELECT * FROM users"
        if clauses:
            sql += " WHERE " + " AND ".join(clauses)
        sql += " ORDER BY id"
        rows = self._conn.execute(sql, params).fetchall()
        return [User.from_row(r) for r in rows]

    @log_db_timing
    def count(self, role: Optional[Role] = None) -> int:
        """Count users, optionally only those holding *role*."""
        if role is None:
            row = self._conn.execute("SELECT COUNT(*) AS n FROM users").fetchone()
        else:
            row = self._conn.execute(
                "SELECT COUNT(*) AS n FROM users WHERE role = ?", (role.value,)
            ).fetchone()
        return row["n"]

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    @log_db_timing
    def create(
        self,
        name: str,
        email: str,
        password_hash: str,
        role: Role,
        address: Optional[str] = None,
    ) -> User:
        """Insert a new user row and return it. Duplicate email raises Conflict."""
        logger.info("Creating user record email=%s role=%s", email, role.value)
        try:
            cursor = self._conn.execute(
                """
                INSERT INTO users (name, email, password_hash, address, role)
                VALUES (?, ?, ?, ?, ?)
                """,
                (name, email, password_hash, address, role.value),
            )
        except sqlite3.IntegrityError as exc:
            if "UNIQUE" in str(exc):
                raise Conflict("Email already exists") from exc
            raise
        return self.get_by_id(cursor.lastrowid)  # type: ignore[return-value]

    @log_db_timing
    def update_password(self, user_id: int, password_hash: str) -> bool:
        cursor = self._conn.execute(
            "UPDATE users SET password_hash = ? WHERE id = ?",
            (password_hash, user_id),
        )
        return cursor.rowcount > 0

    @log_db_timing
    def update_role(self, user_id: int, role: Role) -> Optional[User]:
        """
        Set the role of a non-admin user. Admin rows are never touched here,
        so the update affects nothing when the target is an admin.
        """
        logger.info("Updating role user id=%s role=%s", user_id, role.value)
        cursor = self._conn.execute(
            "UPDATE users SET role = ? WHERE id = ? AND role != ?",
            (role.value, user_id, Role.ADMIN.value),
        )
        if cursor.rowcount == 0:
            return None
        return self.get_by_id(user_id)

    @log_db_timing
    def set_reset_token(self, email: str, token: str, expires_at_ms: int) -> bool:
        """Store a reset token for the user with *email*. False if no such user."""
        cursor = self._conn.execute(
            """
            UPDATE users
            SET reset_token = ?, reset_token_expiry = ?
            WHERE email = ?
            """,
            (token, expires_at_ms, email),
        )
        return cursor.rowcount > 0

    @log_db_timing
    def consume_reset_token(self, token: str, password_hash: str, now_ms: int) -> bool:
        """
        Swap in *password_hash* for the user holding an unexpired *token* and
        clear the token, all in one statement. False when nothing matched.
        """
        cursor = self._conn.execute(
            """
            UPDATE users
            SET password_hash = ?, reset_token = NULL, reset_token_expiry = NULL
            WHERE reset_token = ? AND reset_token_expiry > ?
            """,
            (password_hash, token, now_ms),
        )
        return cursor.rowcount > 0

    @log_db_timing
    def delete_unless_last_admin(self, user_id: int) -> bool:
        """
        Delete a user, refusing to remove the only remaining admin.

        The admin count is evaluated inside the DELETE itself so two
        concurrent requests cannot both pass the check. Returns False when
        nothing was deleted (missing user or last admin).
        """
        logger.info("Deleting user id=%s", user_id)
        cursor = self._conn.execute(
            """
            DELETE FROM users
            WHERE id = ?
              AND (
                    role != 'admin'
                    OR (SELECT COUNT(*) FROM users WHERE role = 'admin') > 1
                  )
            """,
            (user_id,),
        )
        logger.info("User delete affected %s rows", cursor.rowcount)
        return cursor.rowcount > 0
