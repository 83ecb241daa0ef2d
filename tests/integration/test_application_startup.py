"""Integration tests for application lifecycle and startup behavior."""

from copy import deepcopy

import pytest

from src.bookshelf.runtime.context import get_config

config = get_config()


class TestApplicationStartup:
    """Test application startup and shutdown hooks."""

    @pytest.mark.asyncio
    async def test_startup_connects_and_creates_tables(self):
        """Startup should expose a ready database service on app.state."""
        import src.bookshelf.api.http.app as application
        from src.bookshelf.runtime.context import with_context

        test_config = deepcopy(config)
        test_config.database.url = "sqlite://"

        with with_context(config_override=test_config):
            await application.startup()

        try:
            database_service = application.app.state.app_dependencies.database_service
            assert database_service.health_check() is True

            from sqlalchemy import inspect

            assert "books" in inspect(database_service.engine).get_table_names()
        finally:
            await application.shutdown()
            del application.app.state.app_dependencies

    @pytest.mark.asyncio
    async def test_startup_exits_when_database_unreachable(self, tmp_path):
        """Startup should terminate the process when storage cannot be reached."""
        import src.bookshelf.api.http.app as application
        from src.bookshelf.runtime.context import with_context

        test_config = deepcopy(config)
        test_config.database.url = f"sqlite:///{tmp_path}/missing/dir/books.db"

        with pytest.raises(SystemExit) as exc_info:
            with with_context(config_override=test_config):
                await application.startup()

        assert exc_info.value.code == 1

    @pytest.mark.asyncio
    async def test_shutdown_without_startup(self):
        """Shutdown should be a no-op when startup never ran."""
        import src.bookshelf.api.http.app as application

        assert getattr(application.app.state, "app_dependencies", None) is None
        await application.shutdown()
