"""Tests for the database engine and session factory."""

import pytest
from sqlalchemy import StaticPool, inspect
from sqlalchemy.exc import OperationalError
from sqlmodel import select

from src.bookshelf.core.services.database.db_session import DbSessionService
from src.bookshelf.entities.book import BookTable
from src.bookshelf.runtime.config.config_data import ConfigData, DatabaseConfig


def _service(url: str) -> DbSessionService:
    return DbSessionService(ConfigData(database=DatabaseConfig(url=url)))


class TestDbSessionService:
    def test_in_memory_database_shares_one_connection(self, memory_database_service):
        assert isinstance(memory_database_service.engine.pool, StaticPool)

        with memory_database_service.session_scope() as session:
            session.add(
                BookTable(title="Emma", author="Jane Austen", genre="Romance", published_year=1815)
            )

        with memory_database_service.session_scope() as session:
            assert len(session.exec(select(BookTable)).all()) == 1

    def test_create_all(self, memory_database_service):
        assert "books" in inspect(memory_database_service.engine).get_table_names()

    def test_file_database(self, tmp_path):
        service = _service(f"sqlite:///{tmp_path}/books.db")
        try:
            service.create_all()

            assert service.health_check() is True
            assert not isinstance(service.engine.pool, StaticPool)
            assert (tmp_path / "books.db").exists()
        finally:
            service.dispose()

    def test_session_scope_rolls_back_on_error(self, memory_database_service):
        with pytest.raises(RuntimeError):
            with memory_database_service.session_scope() as session:
                session.add(
                    BookTable(title="Emma", author="Jane Austen", genre="Romance", published_year=1815)
                )
                session.flush()
                raise RuntimeError("abort")

        with memory_database_service.session_scope() as session:
            assert session.exec(select(BookTable)).all() == []

    def test_session_scope_propagates_storage_errors(self, memory_database_service):
        with pytest.raises(OperationalError):
            with memory_database_service.session_scope() as session:
                session.exec(select(BookTable).where(BookTable.title == "x")).all()
                session.connection().exec_driver_sql("SELECT * FROM missing_table")

    def test_health_check_fails_for_unreachable_database(self, tmp_path):
        service = _service(f"sqlite:///{tmp_path}/no/such/dir/books.db")
        try:
            assert service.health_check() is False
        finally:
            service.dispose()

    def test_sessions_do_not_expire_on_commit(self, memory_database_service):
        session = memory_database_service.get_session()
        try:
            row = BookTable(title="Emma", author="Jane Austen", genre="Romance", published_year=1815)
            session.add(row)
            session.commit()
            session.close()

            assert row.title == "Emma"
        finally:
            session.close()
