from myorm.clause import Clause, ClauseType


def test_build_select():
    clause = Clause()
    clause.set(ClauseType.LIMIT, 3)
    clause.set(ClauseType.SELECT, "User", ["*"])
    clause.set(ClauseType.WHERE, "Name = ?", "Tom")
    clause.set(ClauseType.ORDERBY, "Age ASC")
    sql, params = clause.build(
        ClauseType.SELECT, ClauseType.WHERE, ClauseType.ORDERBY, ClauseType.LIMIT
    )
    assert sql == "SELECT * FROM User WHERE Name = ? ORDER BY Age ASC LIMIT ?"
    assert params == ["Tom", 3]


def test_build_insert_values():
    clause = Clause()
    clause.set(ClauseType.INSERT, "User", ["Name", "Age"])
    clause.set(ClauseType.VALUES, ["Tom", 18], ["Sam", 25])
    sql, params = clause.build(ClauseType.INSERT, ClauseType.VALUES)
    assert sql == "INSERT INTO User (Name,Age) VALUES (?, ?), (?, ?)"
    assert params == ["Tom", 18, "Sam", 25]


def test_build_update_with_where():
    clause = Clause()
    clause.set(ClauseType.UPDATE, "User", {"Age": 30})
    clause.set(ClauseType.WHERE, "Name = ?", "Amy")
    sql, params = clause.build(ClauseType.UPDATE, ClauseType.WHERE)
    assert sql == "UPDATE User SET Age = ? WHERE Name = ?"
    assert params == [30, "Amy"]


def test_build_delete_and_count():
    clause = Clause()
    clause.set(ClauseType.DELETE, "User")
    clause.set(ClauseType.COUNT, "User")
    clause.set(ClauseType.WHERE, "Age > ?", 18)
    assert clause.build(ClauseType.DELETE, ClauseType.WHERE) == (
        "DELETE FROM User WHERE Age > ?",
        [18],
    )
    assert clause.build(ClauseType.COUNT, ClauseType.WHERE) == (
        "SELECT count(*) FROM User WHERE Age > ?",
        [18],
    )


def test_missing_clauses_are_skipped():
    clause = Clause()
    clause.set(ClauseType.SELECT, "User", ["Name"])
    assert clause.build(ClauseType.SELECT, ClauseType.WHERE, ClauseType.LIMIT) == (
        "SELECT Name FROM User",
        [],
    )


def test_set_replaces_previous_clause():
    clause = Clause()
    clause.set(ClauseType.LIMIT, 3)
    clause.set(ClauseType.LIMIT, 1)
    assert clause.build(ClauseType.LIMIT) == ("LIMIT ?", [1])


def test_empty_build():
    assert Clause().build(ClauseType.SELECT) == ("", [])