"""
Unit tests for SQLAlchemyReadOnlyUnitOfWork.

SQLite has no ``SET TRANSACTION READ ONLY``; these cases exercise the
portable write guards, which apply on every backend.
"""

import pytest
from sqlalchemy import text

from tests.factories.user import UserFactory
from vidtube.models.user import User
from vidtube.uow import (
    SQLAlchemyReadOnlyUnitOfWork as ROuow,
)
from vidtube.uow import (
    SQLAlchemyUnitOfWork as RWuow,
)


class TestSQLAlchemyReadOnlyUnitOfWork:
    def test_blocks_orm_flush_writes(self, session):
        """
        Ensure that attempting to flush ORM changes inside the RO UoW raises.
        """
        with ROuow() as uow, pytest.raises(RuntimeError, match="ORM flush blocked"):
            # Add a transient object; any flush must be blocked.
            user = UserFactory.build()  # not persisted
            uow.session.add(user)
            uow.session.flush()

    def test_blocks_core_dml(self, session):
        """
        Ensure that raw SQL DML is blocked inside the RO UoW.
        """
        with ROuow() as uow, pytest.raises(RuntimeError, match="SQL statement blocked"):
            uow.session.execute(text("DELETE FROM users"))

    def test_allows_reads(self, session):
        """
        Read operations should work normally within RO UoW.
        """
        with RWuow() as uow:
            uow.session.add(UserFactory.build())

        with ROuow() as uow:
            assert uow.session.query(User).count() >= 1

    def test_disallows_commit(self, session):
        """
        RO UoW must reject commit().
        """
        with ROuow() as uow, pytest.raises(RuntimeError, match="does not allow commit"):
            uow.commit()

    def test_guards_removed_on_exit(self, session):
        with ROuow():
            pass

        # Writes work again once the scope is closed
        with RWuow() as uow:
            uow.session.add(UserFactory.build())

    def test_attaches_to_running_transaction(self, session):
        """An already begun session is reused; mutations are still blocked."""
        user = UserFactory()  # flush begins the session transaction

        with ROuow() as uow, pytest.raises(RuntimeError, match="ORM flush blocked"):
            user.full_name = "Mutated"
            uow.session.flush()
