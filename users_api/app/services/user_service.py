"""
Business logic for users.

``UserService`` wraps a ``ConnectionPool`` and exposes the CRUD
operations of the users resource.  All queries use parameterized
statements; column names in the dynamic ``UPDATE`` come from the
fixed ``UPDATABLE_COLUMNS`` whitelist, never from request data.

The public methods are coroutines.  The blocking ``sqlite3`` work runs
in Starlette's thread pool so a slow query only suspends the request
that issued it.  ``sqlite3.Error`` is never caught here; it propagates
to the store error handler registered in ``main``.
"""

import logging
import sqlite3
from typing import List, Optional

from fastapi import Depends
from starlette.concurrency import run_in_threadpool

from ..core.db import ConnectionPool, get_pool
from ..schemas.user import UserCreate, UserRead, UserUpdate

logger = logging.getLogger(__name__)

# SQLite INTEGER is a signed 64-bit value; no row can carry an id outside it.
SQLITE_INT_MIN = -(2 ** 63)
SQLITE_INT_MAX = 2 ** 63 - 1


def storable_id(user_id: int) -> bool:
    return SQLITE_INT_MIN <= user_id <= SQLITE_INT_MAX


class UserService:
    """Сервис для работы с пользователями."""

    def __init__(self, pool: ConnectionPool) -> None:
        self.pool = pool

    @classmethod
    def from_pool(cls, pool: ConnectionPool = Depends(get_pool)) -> "UserService":
        """FastAPI dependency building a service bound to the app's pool."""
        return cls(pool)

    async def create_user(self, data: UserCreate) -> int:
        """Insert a new user and return the id assigned by the database."""
        return await run_in_threadpool(self._create_user, data)

    async def list_users(self, role: Optional[str] = None) -> List[UserRead]:
        """Return all users, or only those whose role equals ``role``.

        An empty ``role`` is treated as no filter.  Rows come back in
        whatever order the database produces.
        """
        return await run_in_threadpool(self._list_users, role)

    async def get_user(self, user_id: int) -> Optional[UserRead]:
        """Retrieve a user by ID, or ``None`` if there is no such row."""
        if not storable_id(user_id):
            return None
        return await run_in_threadpool(self._get_user, user_id)

    async def update_user(self, user_id: int, data: UserUpdate) -> Optional[UserRead]:
        """Apply a partial update and return the row as re-read afterwards.

        Only the fields present in ``data`` are written.  Returns
        ``None`` when no row matched the update, and also when the
        re-read finds nothing because the row was deleted in between.
        Raises ``ValueError`` if ``data`` carries no fields.
        """
        assignments = data.assignments()
        if not assignments:
            raise ValueError("At least one field must be updated")
        if not storable_id(user_id):
            return None
        return await run_in_threadpool(self._update_user, user_id, assignments)

    async def delete_user(self, user_id: int) -> Optional[UserRead]:
        """Delete a user and return the row as it was before deletion."""
        if not storable_id(user_id):
            return None
        return await run_in_threadpool(self._delete_user, user_id)

    async def delete_all_users(self) -> int:
        """Delete every user and return the number of rows removed."""
        return await run_in_threadpool(self._delete_all_users)

    def _create_user(self, data: UserCreate) -> int:
        with self.pool.connection() as conn:
            cursor = conn.execute(
                "INSERT INTO users (full_name, role, efficiency) VALUES (?, ?, ?)",
                (data.full_name, data.role, data.efficiency),
            )
            user_id = cursor.lastrowid
        logger.info("Created user %s", user_id)
        return user_id

    def _list_users(self, role: Optional[str]) -> List[UserRead]:
        query = "SELECT * FROM users"
        params: tuple = ()
        if role:
            query += " WHERE role = ?"
            params = (role,)
        with self.pool.connection() as conn:
            rows = conn.execute(query, params).fetchall()
        return [self._row_to_user_read(row) for row in rows]

    def _get_user(self, user_id: int) -> Optional[UserRead]:
        with self.pool.connection() as conn:
            row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
        if row is None:
            return None
        return self._row_to_user_read(row)

    def _update_user(self, user_id: int, assignments: list) -> Optional[UserRead]:
        fields = []
        values = []
        for column, value in assignments:
            fields.append(f"{column} = ?")
            values.append(value)
        values.append(user_id)
        sql = f"UPDATE users SET {', '.join(fields)} WHERE id = ?"
        with self.pool.connection() as conn:
            affected = conn.execute(sql, tuple(values)).rowcount
        if affected == 0:
            return None
        logger.info("Updated user %s (%s)", user_id, ", ".join(column for column, _ in assignments))
        # Separate read: a concurrent delete may land between the two.
        updated = self._get_user(user_id)
        if updated is None:
            logger.warning("User %s disappeared after update", user_id)
        return updated

    def _delete_user(self, user_id: int) -> Optional[UserRead]:
        with self.pool.connection() as conn:
            row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
            if row is None:
                return None
            conn.execute("DELETE FROM users WHERE id = ?", (user_id,))
        logger.info("Deleted user %s", user_id)
        return self._row_to_user_read(row)

    def _delete_all_users(self) -> int:
        with self.pool.connection() as conn:
            deleted = conn.execute("DELETE FROM users").rowcount
        logger.info("Deleted all users (%s rows)", deleted)
        return deleted

    @staticmethod
    def _row_to_user_read(row: sqlite3.Row) -> UserRead:
        """Convert a database row to a UserRead schema instance."""
        return UserRead(
            id=row["id"],
            full_name=row["full_name"],
            role=row["role"],
            efficiency=row["efficiency"],
        )
