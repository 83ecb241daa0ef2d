"""Test configuration and fixtures for the books API."""

import os

# Keep the default context away from any developer .env or database
os.environ.setdefault("APP_ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from tests.fixtures import *  # noqa: E402,F401,F403
