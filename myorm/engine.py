"""The engine: owns the database connection and hands out sessions."""

from __future__ import annotations

import sqlite3
from typing import Any, Callable

from myorm import log
from myorm.dialect import get_dialect
from myorm.session import Session


def _difference(a: list[str], b: list[str]) -> list[str]:
    """Return the items of ``a`` that are not in ``b``, in ``a``'s order."""
    seen = set(b)
    return [item for item in a if item not in seen]


class Engine:
    """A connection to one database, with the sessions opened on it."""

    def __init__(self, driver: str, source: str) -> None:
        dialect = get_dialect(driver)
        if dialect is None:
            log.error(f"dialect {driver} Not Found")
            raise ValueError(f"dialect {driver} Not Found")
        try:
            conn = sqlite3.connect(source)
            conn.execute("SELECT 1")
        except sqlite3.Error as exc:
            log.error(exc)
            raise
        self._conn = conn
        self._dialect = dialect
        self._default_session: Session | None = None
        self._sessions: list[Session] = []
        log.info("Connect database success")

    def close(self) -> None:
        """Close the database connection."""
        try:
            self._conn.close()
        except sqlite3.Error:
            log.error("Failed to close database")
            raise
        log.info("Close database success")

    def __enter__(self) -> Engine:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def default_session(self) -> Session | None:
        """The first session this engine opened, or None."""
        return self._default_session

    @property
    def session_queue(self) -> list[Session]:
        """Every session this engine opened, oldest first."""
        return list(self._sessions)

    def new_session(self) -> Session:
        """Open a session on this engine's connection."""
        session = Session(self._conn, self._dialect)
        self._sessions.append(session)
        if self._default_session is None:
            self._default_session = session
        return session

    def transaction(self, f: Callable[[Session], Any]) -> Any:
        """Run ``f`` with the default session inside a transaction.

        The transaction commits if ``f`` returns and rolls back if it raises;
        the exception then propagates.
        """
        session = self._default_session or self.new_session()
        return session.transaction(f)

    def migrate(self, value) -> None:
        """Bring the table of ``value``'s model in line with the model's fields."""

        def _migrate(s: Session) -> None:
            if not s.model(value).has_table():
                log.info(f"table {s.ref_table().name} doesn't exist")
                s.create_table()
                return
            table = s.ref_table()
            cursor = s.raw(f"SELECT * FROM {table.name} LIMIT 1").query_rows()
            try:
                columns = [description[0] for description in cursor.description]
            finally:
                cursor.close()
            add_cols = _difference(table.field_names, columns)
            del_cols = _difference(columns, table.field_names)
            log.info(f"added cols {add_cols}, deleted cols {del_cols}")

            for name in add_cols:
                column = table.get_field(name)
                s.raw(
                    f"ALTER TABLE {table.name} ADD COLUMN {column.name} {column.type};"
                ).exec()

            if not del_cols:
                return
            tmp = "tmp_" + table.name
            field_str = ", ".join(table.field_names)
            s.raw(f"CREATE TABLE {tmp} AS SELECT {field_str} from {table.name};").exec()
            s.raw(f"DROP TABLE {table.name};").exec()
            s.raw(f"ALTER TABLE {tmp} RENAME TO {table.name};").exec()

        self.transaction(_migrate)