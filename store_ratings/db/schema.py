"""
SQL DDL statements for all application tables.
Tables are created in dependency order so foreign keys resolve correctly.

Migration helpers run ALTER TABLE only when a column does not yet exist,
making them safe to call on every startup (idempotent).
"""
import sqlite3

# ---------------------------------------------------------------------------
# DDL
# ---------------------------------------------------------------------------

CREATE_USERS_TABLE = """
CREATE TABLE IF NOT EXISTS users (
    id                  INTEGER PRIMARY KEY AUTOINCREMENT,
    name                TEXT    NOT NULL,
    email               TEXT    NOT NULL UNIQUE,
    password_hash       TEXT    NOT NULL,
    address             TEXT,
    role                TEXT    NOT NULL DEFAULT 'user'
                                CHECK(role IN ('admin', 'owner', 'user')),
    reset_token         TEXT,
    reset_token_expiry  INTEGER,
    created_at          TEXT    NOT NULL DEFAULT (datetime('now'))
);
"""

CREATE_STORES_TABLE = """
CREATE TABLE IF NOT EXISTS stores (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    name        TEXT    NOT NULL,
    email       TEXT    NOT NULL UNIQUE,
    address     TEXT,
    owner_id    INTEGER REFERENCES users(id) ON DELETE SET NULL,
    created_at  TEXT    NOT NULL DEFAULT (datetime('now'))
);
"""

# One store per owner; unassigned stores (NULL owner) are not constrained.
CREATE_STORES_OWNER_INDEX = """
CREATE UNIQUE INDEX IF NOT EXISTS ux_stores_owner_id
    ON stores(owner_id) WHERE owner_id IS NOT NULL;
"""

CREATE_RATINGS_TABLE = """
CREATE TABLE IF NOT EXISTS ratings (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id     INTEGER NOT NULL REFERENCES users(id)  ON DELETE CASCADE,
    store_id    INTEGER NOT NULL REFERENCES stores(id) ON DELETE CASCADE,
    rating      INTEGER NOT NULL CHECK(rating BETWEEN 1 AND 5),
    rated_at    TEXT    NOT NULL,
    UNIQUE (user_id, store_id)
);
"""

CREATE_RATINGS_STORE_INDEX = """
CREATE INDEX IF NOT EXISTS ix_ratings_store_id ON ratings(store_id);
"""

# ---------------------------------------------------------------------------
# Incremental migrations (idempotent – safe to run every startup)
# ---------------------------------------------------------------------------

MIGRATIONS = [
    # Reset-password columns were added after the first release
    ("users", "reset_token",        "ALTER TABLE users ADD COLUMN reset_token        TEXT"),
    ("users", "reset_token_expiry", "ALTER TABLE users ADD COLUMN reset_token_expiry INTEGER"),
]

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

ALL_STATEMENTS = [
    CREATE_USERS_TABLE,
    CREATE_STORES_TABLE,
    CREATE_STORES_OWNER_INDEX,
    CREATE_RATINGS_TABLE,
    CREATE_RATINGS_STORE_INDEX,
]


def _column_exists(conn: sqlite3.Connection, table: str, column: str) -> bool:
    rows = conn.execute(f"PRAGMA table_info({table})").fetchall()
    return any(r["name"] == column for r in rows)


def create_tables(conn: sqlite3.Connection) -> None:
    """Create all tables and apply incremental migrations on *conn*."""
    for ddl in ALL_STATEMENTS:
        conn.execute(ddl)

    for table, column, alter_sql in MIGRATIONS:
        if not _column_exists(conn, table, column):
            conn.execute(alter_sql)
