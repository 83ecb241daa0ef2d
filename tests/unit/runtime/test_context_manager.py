"""Unit tests for the async context manager system."""

import asyncio
from concurrent.futures import ThreadPoolExecutor

import pytest

from src.bookshelf.runtime.config.config_data import ConfigData
from src.bookshelf.runtime.context import (
    AppContext,
    get_config,
    get_context,
    set_config,
    set_context,
    with_context,
)


class TestContextManager:
    """Test the context manager functionality."""

    def test_default_context_available(self):
        """Should have a default context available."""
        context = get_context()
        config = get_config()

        assert isinstance(context, AppContext)
        assert isinstance(config, ConfigData)
        assert context.config is config

    def test_with_context_override_single_level(self):
        """Should override config for the duration of the context manager."""
        original_config = get_config()
        original_limit = original_config.pagination.max_limit

        test_config = ConfigData()
        test_config.pagination.max_limit = 25

        with with_context(test_config):
            override_config = get_config()
            assert override_config.pagination.max_limit == 25
            assert override_config is not original_config

        after_config = get_config()
        assert after_config.pagination.max_limit == original_limit
        assert after_config is original_config

    def test_with_context_nested_overrides(self):
        """Should handle nested context overrides correctly."""
        original_config = get_config()

        level1_config = ConfigData()
        level1_config.pagination.max_limit = 50
        level1_config.app.environment = "production"

        with with_context(level1_config):
            assert get_config().pagination.max_limit == 50
            assert get_config().app.environment == "production"

            level2_config = ConfigData()
            level2_config.logging.level = "DEBUG"

            with with_context(level2_config):
                level2 = get_config()
                assert level2.logging.level == "DEBUG"
                # Inherited from level 1
                assert level2.pagination.max_limit == 50
                assert level2.app.environment == "production"

            back_to_level1 = get_config()
            assert back_to_level1.logging.level == original_config.logging.level
            assert back_to_level1.app.environment == "production"

        assert get_config() is original_config

    def test_with_context_no_override(self):
        """Should work without any override (current context)."""
        original_config = get_config()

        with with_context():
            assert get_config() is original_config

        assert get_config() is original_config

    def test_exception_handling_in_context(self):
        """Should properly restore context even when exceptions occur."""
        original_config = get_config()

        test_config = ConfigData()
        test_config.database.url = "sqlite:///exception.db"

        with pytest.raises(ValueError):
            with with_context(test_config):
                assert get_config().database.url == "sqlite:///exception.db"
                raise ValueError("Test exception")

        assert get_config() is original_config

    def test_set_context_returns_reset_token(self):
        original = get_context()
        replacement = AppContext(config=ConfigData())

        token = set_context(replacement)
        try:
            assert get_context() is replacement
        finally:
            token.var.reset(token)

        assert get_context() is original

    def test_set_config_replaces_whole_config(self):
        original_default = get_config().pagination.default_limit

        def worker() -> tuple[int, int]:
            replacement = ConfigData()
            replacement.pagination.default_limit = 3
            set_config(replacement)
            return get_config().pagination.default_limit, get_config().pagination.max_limit

        # Run in a thread so the replacement does not leak into other tests
        with ThreadPoolExecutor(max_workers=1) as executor:
            default_limit, max_limit = executor.submit(worker).result()

        assert default_limit == 3
        assert max_limit == 100
        assert get_config().pagination.default_limit == original_default


class TestAsyncContextManager:
    """Test context manager behavior in async contexts."""

    @pytest.mark.asyncio
    async def test_async_context_isolation(self):
        """Should maintain context isolation in async functions."""
        original_config = get_config()

        async def async_worker(limit: int) -> int:
            worker_config = ConfigData()
            worker_config.pagination.max_limit = limit

            with with_context(worker_config):
                await asyncio.sleep(0.01)
                return get_config().pagination.max_limit

        results = await asyncio.gather(*(async_worker(n) for n in range(10, 15)))

        assert results == [10, 11, 12, 13, 14]
        assert get_config() is original_config

    @pytest.mark.asyncio
    async def test_async_context_with_concurrent_tasks(self):
        """Should maintain context isolation with concurrent async tasks."""
        results = {}
        valid_envs = ["development", "production", "test"]

        async def async_task(task_id: int) -> None:
            task_config = ConfigData()
            task_config.app.environment = valid_envs[task_id % len(valid_envs)]

            with with_context(task_config):
                await asyncio.sleep(0.01 * task_id)
                results[task_id] = get_config().app.environment

        await asyncio.gather(*(async_task(i) for i in range(1, 6)))

        for i in range(1, 6):
            assert results[i] == valid_envs[i % len(valid_envs)]


class TestThreadSafety:
    """Test context manager behavior across threads."""

    def test_thread_isolation(self):
        """Should maintain context isolation across threads."""
        original_config = get_config()

        def thread_worker(port: int) -> int:
            thread_config = ConfigData()
            thread_config.app.port = port
            with with_context(thread_config):
                return get_config().app.port

        with ThreadPoolExecutor(max_workers=4) as executor:
            ports = list(executor.map(thread_worker, range(4000, 4008)))

        assert ports == list(range(4000, 4008))
        assert get_config() is original_config
