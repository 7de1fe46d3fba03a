from __future__ import annotations

import json
import logging
import sqlite3
from pathlib import Path
from typing import Any, Iterable, Mapping

import streamlit as st

from atelier.schema import SCHEMA_SQL
from atelier.utils import iso_now

logger = logging.getLogger(__name__)

UPSERT_SQL = """
INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, ?)
ON CONFLICT(key) DO UPDATE SET value=excluded.value, updated_at=excluded.updated_at
"""


def connect(db_path: Path | str) -> sqlite3.Connection:
    conn = sqlite3.connect(str(db_path), check_same_thread=False)
    conn.row_factory = sqlite3.Row
    return conn


@st.cache_resource
def get_conn(db_path: Path) -> sqlite3.Connection:
    return connect(db_path)


def ensure_schema(conn: sqlite3.Connection) -> None:
    conn.executescript(SCHEMA_SQL)
    conn.commit()


def q(conn: sqlite3.Connection, sql: str, params: Iterable[Any] = ()) -> list[sqlite3.Row]:
    cur = conn.execute(sql, tuple(params))
    rows = cur.fetchall()
    cur.close()
    return rows


def x(conn: sqlite3.Connection, sql: str, params: Iterable[Any] = ()) -> int:
    cur = conn.execute(sql, tuple(params))
    conn.commit()
    last = cur.lastrowid
    cur.close()
    return int(last or 0)


def read_value(conn: sqlite3.Connection, key: str, initial: Any) -> Any:
    """
    Returns the JSON value stored under `key`.
    Falls back to `initial` when the key is missing or cannot be read/decoded.
    """
    try:
        rows = q(conn, "SELECT value FROM kv_store WHERE key=?", (key,))
        if not rows:
            return initial
        return json.loads(rows[0]["value"])
    except (sqlite3.Error, ValueError):
        logger.exception("Could not read %r, using initial value", key)
        return initial


def write_values(conn: sqlite3.Connection, values: Mapping[str, Any]) -> bool:
    """
    Writes several keys in one transaction: all of them land or none does.
    Failures are logged and reported through the return value only.
    """
    try:
        payloads = [(str(k), json.dumps(v)) for k, v in values.items()]
        ts = iso_now()
        with conn:
            for key, payload in payloads:
                conn.execute(UPSERT_SQL, (key, payload, ts))
    except (sqlite3.Error, TypeError, ValueError):
        logger.exception("Could not persist %s", ", ".join(map(str, values)))
        return False
    return True


def write_value(conn: sqlite3.Connection, key: str, value: Any) -> bool:
    return write_values(conn, {key: value})


def delete_all(conn: sqlite3.Connection) -> None:
    x(conn, "DELETE FROM kv_store;")
