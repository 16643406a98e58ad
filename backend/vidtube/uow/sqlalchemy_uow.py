"""
SQLAlchemy implementation of UnitOfWork for Flask.
"""

from __future__ import annotations

from contextlib import suppress

from sqlalchemy import event, text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import InvalidRequestError
from sqlalchemy.orm import Session, SessionTransaction

from vidtube.core.extensions import db
from vidtube.repositories import SubscriptionRepository, UserRepository
from vidtube.uow.base import UnitOfWork


class SQLAlchemyRepositoryContainer:
    """Provide repository instances that share a SQLAlchemy session."""

    def __init__(self, *, session: Session) -> None:
        self.session = session
        self.users = UserRepository(session=self.session)
        self.subscriptions = SubscriptionRepository(session=self.session)


class SQLAlchemyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """Read-write UoW: commits on a clean exit, rolls back otherwise."""

    def __init__(self) -> None:
        super().__init__(session=db.session)

    def __enter__(self) -> SQLAlchemyUnitOfWork:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            try:
                self.commit()
            except Exception:
                self.rollback()
                raise
        else:
            self.rollback()

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


class SQLAlchemyReadOnlyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    Read-only Unit of Work backed by the Flask-scoped SQLAlchemy session.

    Write guards block ORM flushes with pending changes and raw DML/DDL. When
    the scope owns its transaction on PostgreSQL it also issues
    ``SET TRANSACTION READ ONLY``. If the session has already begun (an outer
    request or test transaction) the scope attaches to it and relies on the
    guards alone. ``commit()`` is rejected.
    """

    _WRITE_PREFIXES = (
        "insert",
        "update",
        "delete",
        "alter",
        "drop",
        "truncate",
        "create",
        "replace",
    )

    def __init__(self) -> None:
        super().__init__(session=db.session)
        self._conn: Connection | None = None
        self._txn_ctx: SessionTransaction | None = None

    def __enter__(self) -> SQLAlchemyReadOnlyUnitOfWork:
        self._txn_ctx = None
        try:
            txn_ctx = self.session.begin()
            txn_ctx.__enter__()
            self._txn_ctx = txn_ctx
        except InvalidRequestError:
            # Session already begun: attach to the running transaction
            pass

        self._conn = self.session.connection()
        event.listen(self.session, "before_flush", self._before_flush)
        event.listen(self._conn, "before_cursor_execute", self._before_cursor_execute)

        if self._txn_ctx is not None and self._conn.dialect.name == "postgresql":
            self.session.execute(text("SET TRANSACTION READ ONLY"))
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if self._txn_ctx is not None:
                self.session.rollback()
                self._txn_ctx = None
        finally:
            with suppress(InvalidRequestError):
                event.remove(self.session, "before_flush", self._before_flush)
            if self._conn is not None:
                with suppress(InvalidRequestError):
                    event.remove(self._conn, "before_cursor_execute", self._before_cursor_execute)
            self._conn = None

    def commit(self) -> None:
        """:raises RuntimeError: always."""
        raise RuntimeError("Read-only UnitOfWork does not allow commit().")

    def rollback(self) -> None:
        self.session.rollback()

    # ------------------------------ Guards ------------------------------------

    def _before_flush(self, session, flush_context, instances) -> None:
        if session.new or session.dirty or session.deleted:
            raise RuntimeError(
                "Read-only UnitOfWork: ORM flush blocked (new/dirty/deleted objects present)."
            )

    def _before_cursor_execute(self, conn, cursor, statement, parameters, context, executemany):
        first_token = statement.lstrip().split(None, 1)[0].lower() if statement else ""
        if first_token.startswith(self._WRITE_PREFIXES):
            raise RuntimeError(f"Read-only UnitOfWork: SQL statement blocked: {first_token.upper()}")
