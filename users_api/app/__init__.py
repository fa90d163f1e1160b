"""
Application package initializer.

``main`` assembles the application; ``core`` holds configuration,
logging, the database pool and the envelope error handlers; ``api``
holds the routes; ``schemas`` and ``services`` hold the pydantic models
and the SQL behind them.
"""

from .main import app, create_app  # noqa: F401
