from datetime import time, timedelta
from decimal import Decimal

from src.attendance_tracker.attendance_tracker.database.bootstrap import (
    _strip_create_db_and_use,
    _strip_line_comments,
    iter_sql_statements,
)
from src.attendance_tracker.attendance_tracker.database.mysql_base import (
    normalize_mysql_decimal,
    normalize_mysql_time,
)


def test_iter_sql_statements_keeps_quoted_semicolons():
    sql = "CREATE TABLE a (x INT);\nINSERT INTO a VALUES ('a;b');\n  \nSELECT 1"
    assert list(iter_sql_statements(sql)) == [
        "CREATE TABLE a (x INT)",
        "INSERT INTO a VALUES ('a;b')",
        "SELECT 1",
    ]


def test_strip_helpers():
    sql = "CREATE DATABASE foo;\nUSE foo;\n-- comment\nCREATE TABLE t (id INT);"
    cleaned = _strip_line_comments(_strip_create_db_and_use(sql))
    assert list(iter_sql_statements(cleaned)) == ["CREATE TABLE t (id INT)"]


def test_normalize_mysql_time():
    assert normalize_mysql_time(None) is None
    assert normalize_mysql_time(time(9, 15, 42)) == time(9, 15)
    # mysql-connector returns TIME columns as timedelta
    assert normalize_mysql_time(timedelta(hours=17, minutes=30, seconds=5)) == time(17, 30)
    assert normalize_mysql_time("08:05:00") == time(8, 5)


def test_normalize_mysql_decimal():
    assert normalize_mysql_decimal(None) == 0.0
    assert normalize_mysql_decimal(Decimal("8.50")) == 8.5
