from __future__ import annotations

import logging
import re
import uuid
from pathlib import Path
from typing import Iterable

from ..core.constants import DEMO_STUDENTS
from .connection import DBConfig, DatabaseConnection
from .mysql_base import db_cursor

logger = logging.getLogger(__name__)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql usable regardless of the configured DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_comments(sql: str) -> str:
    return "\n".join(line for line in sql.splitlines() if not line.lstrip().startswith("--"))


def iter_sql_statements(sql: str) -> Iterable[str]:
    """Split a script on ``;`` outside single/double quoted strings."""

    buf: list[str] = []
    quote: str | None = None
    escape = False

    for ch in sql:
        buf.append(ch)
        if escape:
            escape = False
        elif ch == "\\":
            escape = True
        elif quote:
            if ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ";":
            stmt = "".join(buf[:-1]).strip()
            buf.clear()
            if stmt:
                yield stmt

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(config: DBConfig) -> None:
    conn = DatabaseConnection(config).connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    config = DBConfig.from_dict(db_config)
    ensure_database_exists(config)

    sql = _strip_comments(_strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8")))
    with db_cursor(DatabaseConnection(config), dictionary=False) as (_, cur):
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)
    logger.info("Applied %s to %s", Path(schema_path).name, config.describe())


def ensure_demo_students(db_config: dict) -> int:
    """Insert the CS001-CS006 demo roster, skipping roll numbers already present.

    Returns the number of rows inserted.
    """

    config = DBConfig.from_dict(db_config)
    inserted = 0
    with db_cursor(DatabaseConnection(config)) as (_, cur):
        for roll_no, name, department in DEMO_STUDENTS:
            cur.execute("SELECT id FROM students WHERE roll_no=%s", (roll_no,))
            if cur.fetchone():
                continue
            cur.execute(
                "INSERT INTO students(id, roll_no, name, department) VALUES(%s,%s,%s,%s)",
                (str(uuid.uuid4()), roll_no, name, department),
            )
            inserted += 1
    logger.info("Demo roster ready (%d inserted)", inserted)
    return inserted


def list_tables(db_config: dict) -> list[str]:
    config = DBConfig.from_dict(db_config)
    with db_cursor(DatabaseConnection(config), dictionary=False) as (_, cur):
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
