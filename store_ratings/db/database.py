"""Database handle: connection factory, per-request transactions and lifecycle."""

import logging
import os
import sqlite3
from contextlib import contextmanager
from typing import Iterator

from store_ratings.core.config import settings

logger = logging.getLogger(__name__)

SQLITE_PREFIX = "sqlite:///"


def path_from_url(database_url: str) -> str:
    """Extract the file path from a ``sqlite:///`` URL."""
    if not database_url.startswith(SQLITE_PREFIX):
        raise ValueError(f"Unsupported DATABASE_URL: {database_url}")
    return database_url[len(SQLITE_PREFIX):]


LIKE_ESCAPE = "\\"


def like_pattern(search: str) -> str:
    """
    Case-folded ``%search%`` pattern with LIKE wildcards escaped, for use
    with ``LIKE ? ESCAPE '\\'``.
    """
    escaped = (
        search.lower()
        .replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


class Database:
    """
    Owns the location of the SQLite file and hands out connections.

    One instance is created per application (see ``main.create_app``) and
    injected into request handlers; nothing in the code base opens the
    database behind its back.
    """

    def __init__(self, path: str) -> None:
        self.path = str(path)
        self._opened = False

    @classmethod
    def from_settings(cls) -> "Database":
        return cls(path_from_url(settings.DATABASE_URL))

    def open(self) -> None:
        """Prepare the database file and schema. Called once at startup."""
        db_dir = os.path.dirname(self.path)
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)
        logger.info("Opening database at %s", self.path)
        from store_ratings.db import schema

        with self.session() as conn:
            schema.create_tables(conn)
        self._opened = True

    def close(self) -> None:
        """Mark the handle closed. Connections are per request, so none linger."""
        logger.info("Closing database at %s", self.path)
        self._opened = False

    @property
    def is_open(self) -> bool:
        return self._opened

    def connect(self) -> sqlite3.Connection:
        """Create and return a new SQLite connection with row factory."""
        logger.trace("Opening database connection to %s", self.path)
        conn = sqlite3.connect(self.path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    @contextmanager
    def session(self) -> Iterator[sqlite3.Connection]:
        """Yield a connection; commit on success, roll back on any error."""
        conn = self.connect()
        try:
            yield conn
            conn.commit()
            logger.trace("Database transaction committed")
        except Exception:
            logger.warning("Database transaction rolled back")
            conn.rollback()
            raise
        finally:
            conn.close()
            logger.trace("Database connection closed")
