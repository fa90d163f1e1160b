"""Application wiring: settings, pool lifecycle and error formatting."""

from __future__ import annotations

import logging

from fastapi.testclient import TestClient

from users_api.app.core.config import Settings
from users_api.app.core.errors import envelope, format_validation_errors
from users_api.app.core.logging_config import PACKAGE_LOGGER, setup_logging
from users_api.app.main import create_app


def test_create_app_uses_given_settings(settings: Settings) -> None:
    app = create_app(settings)
    assert app.state.settings is settings
    assert app.title == settings.project_name


def test_pool_lives_for_the_lifespan(settings: Settings) -> None:
    app = create_app(settings)
    assert app.state.pool is None
    with TestClient(app):
        pool = app.state.pool
        assert pool is not None
        assert pool.database == settings.database_url
        assert pool.size == settings.db_pool_size
    assert app.state.pool is None
    assert pool.closed


def test_data_survives_restart(settings: Settings) -> None:
    with TestClient(create_app(settings)) as client:
        client.post("/users/create", json={"full_name": "Ada", "role": "engineer", "efficiency": 90})
    with TestClient(create_app(settings)) as client:
        users = client.get("/users/get").json()["result"]["users"]
    assert [user["full_name"] for user in users] == ["Ada"]


def test_envelope_omits_missing_result() -> None:
    assert envelope(True) == {"success": True}
    assert envelope(False, {"error": "x"}) == {"success": False, "result": {"error": "x"}}


def test_format_validation_errors_falls_back_to_pydantic_message() -> None:
    errors = [
        {"type": "missing", "loc": ("body", "role"), "msg": "Field required"},
        {"type": "missing", "loc": ("body",), "msg": "Field required"},
        {"type": "int_parsing", "loc": ("query", "limit"), "msg": "Input should be a valid integer"},
    ]
    assert format_validation_errors(errors) == [
        {"location": "body", "field": "role", "message": "Role is required"},
        {"location": "body", "field": "body", "message": "Field required"},
        {"location": "query", "field": "limit", "message": "Input should be a valid integer"},
    ]


def test_setup_logging_keeps_existing_handlers() -> None:
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    previous = package_logger.level
    try:
        assert logging.getLogger().handlers
        assert setup_logging("debug") is False
        assert package_logger.level == logging.DEBUG
    finally:
        package_logger.setLevel(previous)


def test_setup_logging_configures_bare_root(tmp_path, monkeypatch) -> None:
    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", [])
    monkeypatch.setattr(root, "level", root.level)
    logfile = tmp_path / "users.log"

    assert setup_logging("WARNING", str(logfile)) is True
    assert root.level == logging.WARNING
    assert len(root.handlers) == 2

    logging.getLogger("users_api.test").warning("written to file")
    for handler in root.handlers:
        handler.flush()
        handler.close()
    assert "[WARNING] users_api.test: written to file" in logfile.read_text(encoding="utf-8")
    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.INFO)


def test_id_message_only_applies_to_path_parameter() -> None:
    errors = [
        {"type": "int_parsing", "loc": ("path", "user_id"), "msg": "Input should be a valid integer"},
        {"type": "int_parsing", "loc": ("body", "user_id"), "msg": "Input should be a valid integer"},
    ]
    assert [item["message"] for item in format_validation_errors(errors)] == [
        "ID must be an integer",
        "Input should be a valid integer",
    ]
