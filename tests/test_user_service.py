"""Service-layer tests run directly against a pooled SQLite database."""

from __future__ import annotations

import asyncio
import logging
import sqlite3

import pytest
from pydantic import ValidationError

from users_api.app.schemas.user import UserCreate, UserUpdate
from users_api.app.services.user_service import UserService


def run(coro):
    return asyncio.run(coro)


def test_create_and_get(service: UserService) -> None:
    user_id = run(service.create_user(UserCreate(full_name="Ada", role="engineer", efficiency=90)))
    user = run(service.get_user(user_id))
    assert user is not None
    assert user.model_dump() == {"id": user_id, "full_name": "Ada", "role": "engineer", "efficiency": 90}


def test_get_missing_returns_none(service: UserService) -> None:
    assert run(service.get_user(1)) is None


def test_list_filter(service: UserService) -> None:
    run(service.create_user(UserCreate(full_name="Ada", role="engineer", efficiency=90)))
    run(service.create_user(UserCreate(full_name="Grace", role="admiral", efficiency=80)))
    assert [user.full_name for user in run(service.list_users("admiral"))] == ["Grace"]
    assert len(run(service.list_users())) == 2
    assert len(run(service.list_users(""))) == 2


def test_update_partial(service: UserService) -> None:
    user_id = run(service.create_user(UserCreate(full_name="Ada", role="engineer", efficiency=90)))
    updated = run(service.update_user(user_id, UserUpdate(efficiency=10)))
    assert updated is not None
    assert (updated.full_name, updated.role, updated.efficiency) == ("Ada", "engineer", 10)


def test_update_without_fields_raises(service: UserService) -> None:
    with pytest.raises(ValueError, match="At least one field"):
        run(service.update_user(1, UserUpdate()))


def test_update_missing_row_returns_none(service: UserService) -> None:
    assert run(service.update_user(5, UserUpdate(role="x"))) is None


def test_update_reports_row_deleted_before_reread(service: UserService, monkeypatch) -> None:
    user_id = run(service.create_user(UserCreate(full_name="Ada", role="engineer", efficiency=90)))
    monkeypatch.setattr(service, "_get_user", lambda _user_id: None)
    assert run(service.update_user(user_id, UserUpdate(role="x"))) is None


def test_update_assignments_follow_column_order() -> None:
    data = UserUpdate(efficiency=3, full_name="Ada")
    assert data.assignments() == [("full_name", "Ada"), ("efficiency", 3)]


def test_delete_returns_snapshot(service: UserService) -> None:
    user_id = run(service.create_user(UserCreate(full_name="Ada", role="engineer", efficiency=90)))
    deleted = run(service.delete_user(user_id))
    assert deleted is not None and deleted.id == user_id
    assert run(service.get_user(user_id)) is None
    assert run(service.delete_user(user_id)) is None


def test_delete_all_returns_count(service: UserService, caplog) -> None:
    for name in ("Ada", "Grace", "Alan"):
        run(service.create_user(UserCreate(full_name=name, role="engineer", efficiency=50)))
    with caplog.at_level(logging.INFO, logger="users_api.app.services.user_service"):
        assert run(service.delete_all_users()) == 3
    assert "Deleted all users (3 rows)" in caplog.text
    assert run(service.delete_all_users()) == 0


def test_store_errors_propagate(service: UserService, pool) -> None:
    with pool.connection() as conn:
        conn.execute("DROP TABLE users")
    with pytest.raises(sqlite3.OperationalError):
        run(service.list_users())


@pytest.mark.parametrize("user_id", [2**63, -(2**63) - 1])
def test_ids_outside_integer_range_match_nothing(service: UserService, user_id: int) -> None:
    assert run(service.get_user(user_id)) is None
    assert run(service.update_user(user_id, UserUpdate(role="x"))) is None
    assert run(service.delete_user(user_id)) is None


def test_largest_integer_id_is_looked_up(service: UserService) -> None:
    assert run(service.get_user(2**63 - 1)) is None


def test_update_schema_rejects_boolean_efficiency() -> None:
    with pytest.raises(ValidationError):
        UserUpdate(efficiency=True)
    with pytest.raises(ValidationError):
        UserCreate(full_name="Ada", role="engineer", efficiency=False)
