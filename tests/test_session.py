import sqlite3
from dataclasses import dataclass, field

import pytest

from myorm.dialect import get_dialect
from myorm.session import Hook, NotFoundError, Session


@dataclass
class User:
    name: str = field(metadata={"myorm": "PRIMARY KEY"})
    age: int = 0
    school: str = ""


@dataclass
class Account:
    id: int = field(default=0, metadata={"myorm": "PRIMARY KEY"})
    nickname: str = ""

    def before_insert(self, session):
        self.id += 1000

    def after_query(self, session):
        self.nickname = "***"


@dataclass
class Flag:
    label: str = ""
    active: bool = False


@pytest.fixture
def conn():
    connection = sqlite3.connect(":memory:")
    yield connection
    connection.close()


@pytest.fixture
def session(conn):
    s = Session(conn, get_dialect("sqlite3")).model(User)
    s.drop_table()
    s.create_table()
    return s


def test_walkthrough(session):
    assert session.insert(User("ou", 18, "CAU"), User("Sam", 25, "GU")) == 2
    assert session.count() == 2

    def add(s):
        s.insert(User("Amy", 21, "HU"), User("su", 21, "HU"))
        return s

    assert session.transaction(add) is session
    assert session.count() == 4

    assert session.where("name = ?", "Amy").update("age", 30) == 1
    assert session.where("school=?", "CAU").delete() == 1

    users = session.where("name = ?", "Amy").limit(3).find(User)
    assert users == [User("Amy", 30, "HU")]

    adults = session.where("age>=?", 18).limit(2).find(User)
    assert len(adults) == 2
    assert all(u.age >= 18 for u in adults)

    assert session.where("age<?", 22).count() == 1
    session.where("age>=?", 18)
    assert session.count() == 3


def test_transaction_rolls_back_on_error(session):
    session.insert(User("Tom", 18))

    def failing(s):
        s.insert(User("Jack", 20))
        raise ValueError("boom")

    with pytest.raises(ValueError, match="boom"):
        session.transaction(failing)
    assert session.count() == 1


def test_begin_commit_rollback(session):
    session.begin()
    session.insert(User("Tom", 18))
    session.rollback()
    assert session.count() == 0
    session.begin()
    session.insert(User("Tom", 18))
    session.commit()
    assert session.count() == 1


def test_has_table_and_drop(session):
    assert session.has_table() is True
    session.drop_table()
    assert session.has_table() is False


def test_first_with_order(session):
    session.insert(User("Tom", 18), User("Sam", 25))
    assert session.order_by("age DESC").first(User) == User("Sam", 25, "")


def test_first_not_found(session):
    with pytest.raises(NotFoundError):
        session.first(User)


def test_update_with_mapping(session):
    session.insert(User("Tom", 18, "A"))
    assert session.where("name = ?", "Tom").update({"age": 40, "school": "B"}) == 1
    assert session.find(User) == [User("Tom", 40, "B")]


def test_update_odd_pairs_raises(session):
    with pytest.raises(ValueError):
        session.update("age")


def test_raw_accumulates_and_clears(session):
    session.raw("INSERT INTO User (name, age, school) VALUES (?, ?, ?)", "Tom", 1, "X")
    session.exec()
    row = session.raw("SELECT name, age FROM User WHERE name = ?", "Tom").query_row()
    assert tuple(row) == ("Tom", 1)
    assert session.raw("SELECT count(*) FROM User").query_row()[0] == 1


def test_exec_error_propagates(session):
    with pytest.raises(sqlite3.Error):
        session.raw("SELECT * FROM missing_table").exec()
    # pending SQL was cleared, so the session still works
    assert session.count() == 0


def test_ref_table_unset(conn):
    s = Session(conn, get_dialect("sqlite3"))
    with pytest.raises(RuntimeError):
        s.ref_table()


def test_insert_nothing_raises(session):
    with pytest.raises(ValueError):
        session.insert()


def test_hooks_run(conn):
    s = Session(conn, get_dialect("sqlite3")).model(Account)
    s.create_table()
    s.insert(Account(1, "bob"))
    found = s.find(Account)
    assert found == [Account(1001, "***")]


def test_call_method_on_instance(conn):
    s = Session(conn, get_dialect("sqlite3"))
    account = Account(5, "x")
    s.call_method(Hook.BEFORE_INSERT, account)
    assert account.id == 1005


def test_hook_error_is_logged_not_raised(conn):
    @dataclass
    class Broken:
        key: int = 0

        def before_insert(self, session):
            raise RuntimeError("hook failed")

    s = Session(conn, get_dialect("sqlite3")).model(Broken)
    s.create_table()
    assert s.insert(Broken(3)) == 1
    assert s.find(Broken) == [Broken(3)]


def test_bool_round_trip(conn):
    s = Session(conn, get_dialect("sqlite3")).model(Flag)
    s.create_table()
    s.insert(Flag("on", True), Flag("off", False))
    flags = s.order_by("label").find(Flag)
    assert flags == [Flag("off", False), Flag("on", True)]
    assert flags[1].active is True


def test_model_switches_table(conn):
    s = Session(conn, get_dialect("sqlite3")).model(User)
    assert s.ref_table().name == "User"
    s.model(Account)
    assert s.ref_table().name == "Account"
    assert s.ref_table().field_names == ["id", "nickname"]