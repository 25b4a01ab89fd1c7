"""Sessions: build SQL for a model, run it, and manage transactions and hooks."""

from __future__ import annotations

import contextlib
import dataclasses
import datetime
import inspect
import sqlite3
from enum import Enum
from typing import Any, Callable

from myorm import log
from myorm.clause import Clause, ClauseType
from myorm.dialect import Dialect
from myorm.schema import Schema, parse


class Hook(str, Enum):
    """Names of the methods a model may define to run around each operation.

    A hook receives the session as its only argument. An exception raised by a
    hook is logged and does not stop the operation.
    """

    BEFORE_QUERY = "before_query"
    AFTER_QUERY = "after_query"
    BEFORE_UPDATE = "before_update"
    AFTER_UPDATE = "after_update"
    BEFORE_DELETE = "before_delete"
    AFTER_DELETE = "after_delete"
    BEFORE_INSERT = "before_insert"
    AFTER_INSERT = "after_insert"


class NotFoundError(LookupError):
    """No record matched a query that needs one."""


def _model_class(value) -> type:
    return value if isinstance(value, type) else type(value)


def _convert(sql_type: str, value):
    if value is None:
        return None
    if sql_type == "bool":
        return bool(value)
    if sql_type == "datetime" and isinstance(value, str):
        return datetime.datetime.fromisoformat(value)
    return value


def _build_record(table: Schema, row) -> Any:
    cls = _model_class(table.model)
    init_names = {f.name for f in dataclasses.fields(cls) if f.init}
    values = {
        column.name: _convert(column.type, value)
        for column, value in zip(table.fields, row)
    }
    record = cls(**{k: v for k, v in values.items() if k in init_names})
    for name, value in values.items():
        if name not in init_names:
            object.__setattr__(record, name, value)
    return record


class Session:
    """One conversation with the database, bound to a model's table.

    SQL accumulates through ``raw`` and the clause methods (``where``,
    ``limit``, ``order_by``) and is cleared whenever a statement runs.
    """

    def __init__(self, db, dialect: Dialect) -> None:
        if isinstance(db, sqlite3.Connection):
            # Statements commit on their own unless a transaction is open.
            db.isolation_level = None
        self._conn = db
        self._dialect = dialect
        self._ref_table: Schema | None = None
        self._clause = Clause()
        self._sql: list[str] = []
        self._vars: list[Any] = []

    def db(self):
        """Return the connection statements run on."""
        return self._conn

    def clear(self) -> None:
        """Forget the pending SQL, its parameters and its clauses."""
        self._sql = []
        self._vars = []
        self._clause = Clause()

    def raw(self, sql: str, *args) -> Session:
        """Append ``sql`` and its parameters to the pending statement."""
        self._sql.append(sql + " ")
        self._vars.extend(args)
        return self

    def _run(self):
        sql = "".join(self._sql)
        params = list(self._vars)
        try:
            log.info(sql, params)
            return self._conn.execute(sql, params)
        except Exception as exc:
            log.error(exc)
            raise
        finally:
            self.clear()

    def exec(self):
        """Run the pending statement and return its cursor."""
        return self._run()

    def query_rows(self):
        """Run the pending query and return a cursor over its rows."""
        return self._run()

    def query_row(self):
        """Run the pending query and return its first row, or None."""
        cursor = self._run()
        try:
            return cursor.fetchone()
        finally:
            cursor.close()

    def transaction(self, f: Callable[[Session], Any]):
        """Run ``f(self)`` in a transaction and return its result.

        The transaction is committed if ``f`` returns and rolled back if it
        raises; the exception then propagates.
        """
        self.begin()
        try:
            result = f(self)
        except BaseException:
            with contextlib.suppress(Exception):
                self.rollback()
            raise
        self.commit()
        return result

    def call_method(self, method: Hook | str, value) -> None:
        """Call the hook ``method`` on ``value``, or on the session's model if None."""
        name = method.value if isinstance(method, Hook) else method
        target = self.ref_table().model if value is None else value
        attr = inspect.getattr_static(target, name, None)
        if attr is None:
            return
        if isinstance(target, type) and not isinstance(attr, (classmethod, staticmethod)):
            return
        hook = getattr(target, name)
        if not callable(hook):
            return
        try:
            outcome = hook(self)
        except Exception as exc:
            log.error(exc)
            return
        if isinstance(outcome, Exception):
            log.error(outcome)

    def insert(self, *args) -> int:
        """Insert each model instance as a record; return the rows affected."""
        if not args:
            raise ValueError("nothing to insert")
        records = []
        for value in args:
            self.call_method(Hook.BEFORE_INSERT, value)
            table = self.model(value).ref_table()
            self._clause.set(ClauseType.INSERT, table.name, table.field_names)
            records.append(table.record_values(value))
        self._clause.set(ClauseType.VALUES, *records)
        sql, params = self._clause.build(ClauseType.INSERT, ClauseType.VALUES)
        cursor = self.raw(sql, *params).exec()
        self.call_method(Hook.AFTER_INSERT, None)
        return cursor.rowcount

    def find(self, model) -> list:
        """Return the records of ``model`` that match the pending clauses."""
        table = self.model(model).ref_table()
        self.call_method(Hook.BEFORE_QUERY, None)
        self._clause.set(ClauseType.SELECT, table.name, table.field_names)
        sql, params = self._clause.build(
            ClauseType.SELECT, ClauseType.WHERE, ClauseType.ORDERBY, ClauseType.LIMIT
        )
        cursor = self.raw(sql, *params).query_rows()
        results = []
        try:
            for row in cursor:
                record = _build_record(table, row)
                self.call_method(Hook.AFTER_QUERY, record)
                results.append(record)
        finally:
            cursor.close()
        return results

    def update(self, *args) -> int:
        """Update matching records; return the rows affected.

        Takes either one mapping of column to value or alternating column
        names and values.
        """
        self.call_method(Hook.BEFORE_UPDATE, None)
        if len(args) == 1 and isinstance(args[0], dict):
            assignments = dict(args[0])
        else:
            if not args or len(args) % 2:
                raise ValueError("update needs a mapping or column/value pairs")
            assignments = dict(zip(args[0::2], args[1::2]))
        self._clause.set(ClauseType.UPDATE, self.ref_table().name, assignments)
        sql, params = self._clause.build(ClauseType.UPDATE, ClauseType.WHERE)
        cursor = self.raw(sql, *params).exec()
        self.call_method(Hook.AFTER_UPDATE, None)
        return cursor.rowcount

    def delete(self) -> int:
        """Delete matching records; return the rows affected."""
        self.call_method(Hook.BEFORE_DELETE, None)
        self._clause.set(ClauseType.DELETE, self.ref_table().name)
        sql, params = self._clause.build(ClauseType.DELETE, ClauseType.WHERE)
        cursor = self.raw(sql, *params).exec()
        self.call_method(Hook.AFTER_DELETE, None)
        return cursor.rowcount

    def count(self) -> int:
        """Return the number of matching records."""
        self._clause.set(ClauseType.COUNT, self.ref_table().name)
        sql, params = self._clause.build(ClauseType.COUNT, ClauseType.WHERE)
        row = self.raw(sql, *params).query_row()
        if row is None:
            raise NotFoundError("count returned no row")
        return int(row[0])

    def limit(self, num: int) -> Session:
        """Return at most ``num`` records from the next query."""
        self._clause.set(ClauseType.LIMIT, num)
        return self

    def where(self, desc: str, *args) -> Session:
        """Filter the next statement by ``desc`` with its parameters."""
        self._clause.set(ClauseType.WHERE, desc, *args)
        return self

    def order_by(self, desc: str) -> Session:
        """Order the next query by ``desc``."""
        self._clause.set(ClauseType.ORDERBY, desc)
        return self

    def first(self, model):
        """Return the first matching record of ``model``."""
        records = self.limit(1).find(model)
        if not records:
            raise NotFoundError("NOT FOUND")
        return records[0]

    def model(self, value) -> Session:
        """Bind the session to the table of ``value``'s model class."""
        if self._ref_table is None or _model_class(value) is not _model_class(
            self._ref_table.model
        ):
            self._ref_table = parse(value, self._dialect)
        return self

    def ref_table(self) -> Schema:
        """Return the schema the session is bound to."""
        if self._ref_table is None:
            log.error("Model is not set")
            raise RuntimeError("model is not set")
        return self._ref_table

    def create_table(self) -> None:
        """Create the bound model's table."""
        table = self.ref_table()
        columns = ",".join(f"{f.name} {f.type} {f.tag}" for f in table.fields)
        self.raw(f"CREATE TABLE {table.name} ({columns});").exec()

    def has_table(self) -> bool:
        """Return whether the bound model's table exists."""
        name = self.ref_table().name
        sql, params = self._dialect.table_exist_sql(name)
        row = self.raw(sql, *params).query_row()
        return row is not None and row[0] == name

    def drop_table(self) -> None:
        """Drop the bound model's table if it exists."""
        self.raw(f"DROP TABLE IF EXISTS {self.ref_table().name}").exec()

    def begin(self) -> None:
        """Open a transaction."""
        log.info("transaction begin")
        try:
            self._conn.execute("BEGIN")
        except Exception as exc:
            log.error(exc)
            raise

    def commit(self) -> None:
        """Commit the open transaction."""
        log.info("transaction commit")
        try:
            self._conn.execute("COMMIT")
        except Exception as exc:
            log.error(exc)
            raise

    def rollback(self) -> None:
        """Roll back the open transaction."""
        log.info("transaction rollback")
        try:
            self._conn.execute("ROLLBACK")
        except Exception as exc:
            log.error(exc)
            raise