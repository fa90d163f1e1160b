"""Liveness endpoint that also checks the database is reachable."""

from typing import Any, Dict

from fastapi import APIRouter, Depends
from starlette.concurrency import run_in_threadpool

from users_api.app.core.db import ConnectionPool, get_pool
from users_api.app.core.errors import envelope

router = APIRouter()


def _ping(pool: ConnectionPool) -> None:
    with pool.connection() as conn:
        conn.execute("SELECT 1").fetchone()


@router.get("/health")
async def health(pool: ConnectionPool = Depends(get_pool)) -> Dict[str, Any]:
    await run_in_threadpool(_ping, pool)
    return envelope(True, {"status": "ok"})
