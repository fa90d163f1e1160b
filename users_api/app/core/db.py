"""
SQLite database integration, connection pool and migrations.

This module provides a small fixed-size connection pool
(``ConnectionPool``), a function applying migrations on application
start (``init_db``) and a helper dependency for FastAPI routes
(``get_pool``).  The pool is created once per application in the
startup handler and closed on shutdown; routes never open connections
on their own.

The migration mechanism stores applied migration versions in the
``migrations`` table and executes new migrations in order.
"""

import logging
import os
import queue
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from fastapi import Request

logger = logging.getLogger(__name__)


MIGRATIONS: list[tuple[int, str]] = [
    # Migration 1: users table.  AUTOINCREMENT keeps ids from being
    # reused after a row (or the whole table) is deleted.
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS users (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            full_name TEXT NOT NULL CHECK (length(full_name) > 0),
            role TEXT NOT NULL CHECK (length(role) > 0),
            efficiency INTEGER NOT NULL CHECK (efficiency BETWEEN 0 AND 100)
        );
        """,
    ),
    # Migration 2: index for the role filter of the list endpoint
    (
        2,
        """
        CREATE INDEX IF NOT EXISTS idx_users_role ON users(role);
        """,
    ),
]


def resolve_database_path(database_url: str) -> str:
    """Compute the path to the SQLite database file.

    Absolute paths and the special ``:memory:`` name are returned as
    is.  Relative paths are resolved against the project root.
    """
    if database_url == ":memory:" or os.path.isabs(database_url):
        return database_url
    base_dir = Path(__file__).resolve().parent.parent.parent.parent
    return str((base_dir / database_url).resolve())


class ConnectionPool:
    """Fixed-size pool of SQLite connections.

    Connections are opened eagerly and handed out one at a time, so a
    connection is never used by two threads simultaneously even though
    it is created with ``check_same_thread=False``.  ``acquire`` blocks
    until a connection is returned when the pool is exhausted.
    """

    def __init__(self, database: str, size: int = 5, timeout: float = 30.0) -> None:
        if size < 1:
            raise ValueError("Pool size must be at least 1")
        self.database = database
        self.size = size
        self.timeout = timeout
        self._connections: "queue.Queue[sqlite3.Connection]" = queue.Queue(maxsize=size)
        self._closed = False
        for _ in range(size):
            self._connections.put(self._connect())

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.database, timeout=self.timeout, check_same_thread=False)
        # Return rows as dict‑like objects keyed by column name
        conn.row_factory = sqlite3.Row
        return conn

    @property
    def closed(self) -> bool:
        return self._closed

    def acquire(self) -> sqlite3.Connection:
        if self._closed:
            raise sqlite3.ProgrammingError("Connection pool is closed")
        try:
            return self._connections.get(timeout=self.timeout)
        except queue.Empty:
            raise sqlite3.OperationalError("Timed out waiting for a database connection") from None

    def release(self, conn: sqlite3.Connection) -> None:
        if self._closed:
            conn.close()
            return
        self._connections.put_nowait(conn)

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        """Yield a pooled connection, committing on success.

        Any exception rolls the open transaction back before the
        connection goes back to the pool and is then re-raised.
        """
        conn = self.acquire()
        try:
            yield conn
            conn.commit()
        except BaseException:
            conn.rollback()
            raise
        finally:
            self.release(conn)

    def close(self) -> None:
        """Close every idle connection and refuse further use."""
        self._closed = True
        while True:
            try:
                conn = self._connections.get_nowait()
            except queue.Empty:
                break
            conn.close()


def create_pool(database_url: str, size: int = 5) -> ConnectionPool:
    """Build a pool for the database named by ``database_url``."""
    return ConnectionPool(resolve_database_path(database_url), size=size)


def init_db(pool: ConnectionPool) -> int:
    """Initialise the database and apply pending migrations.

    Creates the ``migrations`` table if it does not exist, checks the
    current schema version, and applies any new migrations defined in
    ``MIGRATIONS``.  Returns the resulting schema version.
    """
    with pool.connection() as conn:
        cursor = conn.cursor()
        cursor.execute(
            "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)"
        )
        cursor.execute("SELECT MAX(version) AS version FROM migrations")
        row = cursor.fetchone()
        current_version = row["version"] if row and row["version"] is not None else 0

        for version, sql in MIGRATIONS:
            if version > current_version:
                cursor.executescript(sql)
                cursor.execute(
                    "INSERT INTO migrations (version) VALUES (?)", (version,)
                )
                logger.info("Applied migration %s", version)
                current_version = version

    return current_version


def get_pool(request: Request) -> ConnectionPool:
    """FastAPI dependency returning the application's connection pool."""
    return request.app.state.pool
