from __future__ import annotations

import re
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator

import mysql.connector

from .connection import DBConfig

_DATABASE_DIRECTIVES = re.compile(r"(?im)^\s*(?:CREATE\s+DATABASE|USE)\b.*?;\s*$")

# Quoted literal ('' escapes), line comment, terminator, plain run, any other char.
_SQL_TOKEN = re.compile(r"'(?:[^'\\]|\\.|'')*'|--[^\n]*|;|[^';-]+|.", re.S)


def _strip_database_directives(sql: str) -> str:
    # The target database comes from DB_CONFIG, not from the file.
    return _DATABASE_DIRECTIVES.sub("", sql)


def _iter_sql_statements(sql: str) -> Iterable[str]:
    buf: list[str] = []
    for match in _SQL_TOKEN.finditer(sql):
        token = match.group(0)
        if token.startswith("--"):
            continue
        if token != ";":
            buf.append(token)
            continue
        stmt = "".join(buf).strip()
        buf.clear()
        if stmt:
            yield stmt

    tail = "".join(buf).strip()
    if tail:
        yield tail


@contextmanager
def _admin_cursor(target: DBConfig, *, use_database: bool = True) -> Iterator:
    params = {
        "host": target.host,
        "port": target.port,
        "user": target.user,
        "password": target.password,
        "use_pure": True,
    }
    if use_database:
        params["database"] = target.database

    conn = mysql.connector.connect(**params)
    try:
        cur = conn.cursor()
        yield cur
        conn.commit()
    finally:
        conn.close()


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    with _admin_cursor(target, use_database=False) as cur:
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )


def load_schema_statements(schema_path: str | Path) -> list[str]:
    sql = Path(schema_path).read_text(encoding="utf-8")
    return list(_iter_sql_statements(_strip_database_directives(sql)))


def apply_schema(db_config: dict, *, schema_path: str | Path) -> int:
    """Create the database if needed and run every statement of ``schema_path``.

    Returns the number of statements executed.
    """
    statements = load_schema_statements(schema_path)
    ensure_database_exists(db_config)
    with _admin_cursor(DBConfig.from_dict(db_config)) as cur:
        for stmt in statements:
            cur.execute(stmt)
    return len(statements)


def list_tables(db_config: dict) -> list[str]:
    with _admin_cursor(DBConfig.from_dict(db_config)) as cur:
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
