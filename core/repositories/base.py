"""
Base Repository - Unit of Work over a SQLAlchemy engine.

Implements the Unit of Work pattern so that a multi-statement business
operation is committed (or rolled back) as a whole.
"""

from __future__ import annotations

from typing import Any, Mapping

from sqlalchemy.engine import Connection, CursorResult, Engine
from sqlalchemy.sql.elements import ClauseElement


class SqlUnitOfWork:
    """
    SQLAlchemy implementation of Unit of Work.

    Borrows one pooled connection for the duration of the ``with`` block and
    runs every statement inside a single transaction. Anything not committed
    when the block exits (exception or early return) is rolled back, and the
    connection always goes back to the pool.
    """

    def __init__(self, engine: Engine):
        self._engine = engine
        self._connection: Connection | None = None
        self._transaction = None

    def __enter__(self) -> "SqlUnitOfWork":
        self._connection = self._engine.connect()
        self._transaction = self._connection.begin()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        try:
            if self._transaction is not None and self._transaction.is_active:
                self.rollback()
        finally:
            if self._connection is not None:
                self._connection.close()
            self._connection = None
            self._transaction = None

    @property
    def connection(self) -> Connection:
        if self._connection is None:
            raise RuntimeError("UnitOfWork not started. Use 'with' statement.")
        return self._connection

    def execute(self, statement: ClauseElement, params: Mapping[str, Any] | None = None) -> CursorResult:
        return self.connection.execute(statement, dict(params or {}))

    def commit(self) -> None:
        if self._transaction is not None:
            self._transaction.commit()

    def rollback(self) -> None:
        if self._transaction is not None:
            self._transaction.rollback()
