import json
import sqlite3, os
from datetime import datetime, timezone

from shrthnder.app import config
from shrthnder.app.errors import DatabaseError


def _ensure_schema(conn):
    conn.execute("""
    CREATE TABLE IF NOT EXISTS results(
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        job_category TEXT NOT NULL,
        payload_json TEXT NOT NULL,
        created_at TEXT NOT NULL
    );
    """)


def get_conn(db_path=None):
    path = db_path or config.DB_PATH
    os.makedirs(os.path.dirname(os.fspath(path)) or ".", exist_ok=True)
    conn = sqlite3.connect(path)
    _ensure_schema(conn)
    return conn


def save_result(payload: dict, db_path=None) -> dict:
    """Store one submission and return it with its timestamp filled in."""
    record = dict(payload)
    record.setdefault("timestamp", datetime.now(timezone.utc).isoformat())
    conn = None
    try:
        conn = get_conn(db_path)
        conn.execute(
            "INSERT INTO results(job_category, payload_json, created_at) VALUES (?,?,?)",
            (record.get("job_category", ""), json.dumps(record), record["timestamp"])
        )
        conn.commit()
    except (sqlite3.Error, OSError) as e:
        raise DatabaseError(str(e)) from e
    finally:
        if conn is not None:
            conn.close()
    return record


def get_results(db_path=None) -> list:
    conn = None
    try:
        conn = get_conn(db_path)
        cur = conn.execute("SELECT payload_json FROM results ORDER BY id")
        return [json.loads(row[0]) for row in cur.fetchall()]
    except (sqlite3.Error, OSError, ValueError) as e:
        raise DatabaseError(str(e)) from e
    finally:
        if conn is not None:
            conn.close()


def clear_results(db_path=None):
    conn = None
    try:
        conn = get_conn(db_path)
        conn.execute("DELETE FROM results")
        conn.commit()
    except (sqlite3.Error, OSError) as e:
        raise DatabaseError(str(e)) from e
    finally:
        if conn is not None:
            conn.close()
