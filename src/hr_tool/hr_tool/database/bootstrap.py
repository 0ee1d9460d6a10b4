from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

from .connection import DBConfig, DatabaseConnection

logger = logging.getLogger(__name__)

DEFAULT_SCHEMA_PATH = Path(__file__).resolve().parents[4] / "database" / "schema.sql"


def _strip_create_db_and_use(sql: str) -> str:
    # The target database comes from DB_CONFIG, not from the script.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_comments(sql: str) -> str:
    return "\n".join(line for line in sql.splitlines() if not line.lstrip().startswith("--"))


def iter_sql_statements(sql: str) -> Iterable[str]:
    """Split a script on ``;`` outside of single/double quoted literals."""
    buf: list[str] = []
    quote: str | None = None

    for ch in sql:
        if quote:
            buf.append(ch)
            if ch == quote:
                quote = None
            continue
        if ch in ("'", '"'):
            quote = ch
            buf.append(ch)
            continue
        if ch == ";":
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue
        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    conn = DatabaseConnection(target).connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path = DEFAULT_SCHEMA_PATH) -> None:
    """Create the database (if needed) and run every statement of schema.sql."""
    ensure_database_exists(db_config)

    schema_path = Path(schema_path)
    sql = _strip_comments(_strip_create_db_and_use(schema_path.read_text(encoding="utf-8")))

    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        count = 0
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)
            count += 1
        conn.commit()
        logger.info("Applied %d schema statements from %s", count, schema_path)
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
