# myorm

A small object-relational mapper for SQLite, built on the standard
library's `sqlite3` module. It maps dataclasses to tables and offers
chainable queries, lifecycle hooks, transactions and a simple schema
migration. It has no dependencies outside the standard library.

## Installation

```
pip install .
```

For running the test suite:

```
pip install ".[test]"
pytest
```

## Overview

- `myorm.engine.Engine` opens a database connection and hands out sessions.
- `myorm.session.Session` builds and runs SQL for one model at a time.
- `myorm.schema.parse` turns a dataclass model into a table description
  (a `Schema` holding its `Field`s).
- `myorm.dialect` maps Python types to SQL column types; a SQLite dialect
  (`Sqlite3Dialect`) is registered under the name `"sqlite3"`, and
  `register_dialect` / `get_dialect` manage the registry.
- `myorm.clause.Clause` assembles SQL statements from parts named by
  `ClauseType`.
- `myorm.log` writes coloured messages to standard output;
  `set_level(INFO_LEVEL | ERROR_LEVEL | DISABLED)` controls how much.

## Models

A model is a dataclass. Each field whose name does not start with an
underscore becomes a column named after the field; the table is named
after the class. Column types come from the field annotations:

| Python type                           | SQLite column |
|---------------------------------------|---------------|
| `bool`                                | `bool`        |
| `int`                                 | `integer`     |
| `float`                               | `real`        |
| `str`                                 | `text`        |
| `bytes`, `bytearray`, `list`, `tuple` | `blob`        |
| `datetime.datetime`                   | `datetime`    |

Any other type raises `TypeError`. Extra column text, such as a
constraint, goes in the field metadata under the key `"myorm"`:

```python
from dataclasses import dataclass, field


@dataclass
class User:
    Name: str = field(default="", metadata={"myorm": "PRIMARY KEY"})
    Age: int = 0
```

## Example

```python
from myorm.engine import Engine

with Engine("sqlite3", "app.db") as engine:
    s = engine.new_session().model(User())
    s.drop_table()
    s.create_table()

    s.insert(User("Tom", 18), User("Sam", 25))
    print(s.count())                      # 2

    s.where("Name = ?", "Tom").update("Age", 30)
    s.where("Age < ?", 20).delete()

    adults = s.where("Age >= ?", 18).limit(2).find(User)   # list of User
    oldest = s.order_by("Age DESC").first(User)
```

`insert`, `update` and `delete` return the number of rows affected.
`update` takes either alternating column names and values or a single
dict. `find` returns a list of model instances; `first` returns one and
raises `myorm.session.NotFoundError` when nothing matches.

### Chaining

`where`, `limit` and `order_by` only record conditions and return the
session, so put them first. `insert`, `find`, `update`, `delete`,
`count` and `first` run the statement and then clear the recorded
conditions. `raw(sql, *params)` appends SQL directly; `exec`,
`query_rows` and `query_row` run it.

### Transactions

`Engine.transaction(f)` runs `f` with the engine's default session
inside a transaction. If `f` raises, the transaction is rolled back and
the exception propagates; otherwise it is committed and `f`'s result is
returned.

```python
def add_users(session):
    session.insert(User("Amy", 21), User("Su", 21))

engine.transaction(add_users)
```

`Session.transaction(f)` does the same on a single session, and
`begin`, `commit` and `rollback` are available for manual control.

The engine's first session is `engine.default_session`; all sessions it
opened are listed in `engine.session_queue`.

### Hooks

A model instance can define any of the methods named by
`myorm.session.Hook`: `before_insert`, `after_insert`, `before_query`,
`after_query`, `before_update`, `after_update`, `before_delete`,
`after_delete`. Each is called with the session as its only argument.
`before_insert` runs on every inserted instance and `after_query` on
every record `find` returns; the others run on the model the session is
bound to. An exception raised by a hook (or returned from it) is logged
and does not stop the operation.

```python
@dataclass
class Account:
    ID: int = 0
    Password: str = ""

    def after_query(self, session):
        self.Password = "******"
```

### Migration

`Engine.migrate(model)` brings the model's table in line with its
current fields: it creates the table if it is missing, adds new columns,
and rebuilds the table without columns that were removed. The rebuilt
table keeps the remaining columns and their data, not their
constraints.

## Limits

- Only SQLite is supported. `Engine` accepts only the driver name
  `"sqlite3"` (or another name given to `register_dialect`, still on a
  SQLite connection) and raises `ValueError` for an unknown one.
- There are no relations, joins or identity tracking: each session
  works on one model's table at a time.
- There is no command-line tool; the package is a library.