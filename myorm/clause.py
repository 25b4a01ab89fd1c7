"""SQL clause generators and a builder that stitches clauses into a statement."""

from __future__ import annotations

from enum import Enum, auto
from typing import Any, Callable


class ClauseType(Enum):
    INSERT = auto()
    VALUES = auto()
    SELECT = auto()
    LIMIT = auto()
    WHERE = auto()
    ORDERBY = auto()
    UPDATE = auto()
    DELETE = auto()
    COUNT = auto()


def _bind_vars(num: int) -> str:
    return ", ".join("?" * num)


def _insert(table_name, fields) -> tuple[str, list]:
    return f"INSERT INTO {table_name} ({','.join(fields)})", []


def _values(*rows) -> tuple[str, list]:
    bind_str = ""
    groups = []
    params: list[Any] = []
    for row in rows:
        row = list(row)
        if not bind_str:
            bind_str = _bind_vars(len(row))
        groups.append(f"({bind_str})")
        params.extend(row)
    return "VALUES " + ", ".join(groups), params


def _select(table_name, fields) -> tuple[str, list]:
    return f"SELECT {','.join(fields)} FROM {table_name}", []


def _limit(*args) -> tuple[str, list]:
    return "LIMIT ?", list(args)


def _where(desc, *args) -> tuple[str, list]:
    return f"WHERE {desc}", list(args)


def _order_by(desc) -> tuple[str, list]:
    return f"ORDER BY {desc}", []


def _update(table_name, assignments: dict) -> tuple[str, list]:
    keys = ", ".join(f"{key} = ?" for key in assignments)
    return f"UPDATE {table_name} SET {keys}", list(assignments.values())


def _delete(table_name) -> tuple[str, list]:
    return f"DELETE FROM {table_name}", []


def _count(table_name) -> tuple[str, list]:
    return _select(table_name, ["count(*)"])


_GENERATORS: dict[ClauseType, Callable[..., tuple[str, list]]] = {
    ClauseType.INSERT: _insert,
    ClauseType.VALUES: _values,
    ClauseType.SELECT: _select,
    ClauseType.LIMIT: _limit,
    ClauseType.WHERE: _where,
    ClauseType.ORDERBY: _order_by,
    ClauseType.UPDATE: _update,
    ClauseType.DELETE: _delete,
    ClauseType.COUNT: _count,
}


class Clause:
    """Holds the parts of one SQL statement, keyed by clause type."""

    def __init__(self) -> None:
        self._sql: dict[ClauseType, str] = {}
        self._vars: dict[ClauseType, list] = {}

    def set(self, name: ClauseType, *args) -> None:
        """Generate the clause ``name`` from ``args``, replacing any earlier one."""
        sql, params = _GENERATORS[name](*args)
        self._sql[name] = sql
        self._vars[name] = params

    def build(self, *args: ClauseType) -> tuple[str, list]:
        """Join the clauses that are set, in the given order, with their parameters."""
        present = [order for order in args if order in self._sql]
        sql = " ".join(self._sql[order] for order in present)
        params = [value for order in present for value in self._vars[order]]
        return sql, params