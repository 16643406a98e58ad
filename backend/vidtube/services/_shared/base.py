# vidtube/services/_shared/base.py
from __future__ import annotations

from vidtube.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)


class BaseService:
    """
    Base class for application services.

    Notes
    -----
    - Services must never touch the global session; always use a Unit of Work.
    - Failures are raised as :class:`~vidtube.services._shared.errors.ServiceError`
      subclasses; the HTTP layer maps their ``kind`` to a status code.
    """

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        """Create a read-write Unit of Work."""
        return SQLAlchemyUnitOfWork()

    def ro_uow(self) -> SQLAlchemyReadOnlyUnitOfWork:
        """Create a read-only Unit of Work."""
        return SQLAlchemyReadOnlyUnitOfWork()
