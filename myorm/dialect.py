"""Mapping from Python types to SQL column types, per database."""

from __future__ import annotations

import datetime
import typing
from abc import ABC, abstractmethod


class Dialect(ABC):
    """What the ORM needs to know about one database's SQL."""

    @abstractmethod
    def data_type_of(self, typ) -> str:
        """Return the SQL column type for the Python type ``typ``."""

    @abstractmethod
    def table_exist_sql(self, table_name: str) -> tuple[str, list]:
        """Return a query, with parameters, that yields the table's name if it exists."""


_dialects: dict[str, Dialect] = {}


def register_dialect(name: str, dialect: Dialect) -> None:
    """Make ``dialect`` available under ``name``."""
    _dialects[name] = dialect


def get_dialect(name: str) -> Dialect | None:
    """Return the dialect registered under ``name``, or None."""
    return _dialects.get(name)


class Sqlite3Dialect(Dialect):
    """SQLite's column types."""

    def data_type_of(self, typ) -> str:
        base = typing.get_origin(typ) or typ
        if isinstance(base, type):
            if issubclass(base, bool):
                return "bool"
            if issubclass(base, int):
                return "integer"
            if issubclass(base, float):
                return "real"
            if issubclass(base, str):
                return "text"
            if issubclass(base, (bytes, bytearray, list, tuple)):
                return "blob"
            if issubclass(base, datetime.datetime):
                return "datetime"
        name = getattr(typ, "__name__", repr(typ))
        raise TypeError(f"invalid sql type {name}")

    def table_exist_sql(self, table_name: str) -> tuple[str, list]:
        return (
            "SELECT name FROM sqlite_master WHERE type='table' and name = ?",
            [table_name],
        )


register_dialect("sqlite3", Sqlite3Dialect())