from __future__ import annotations

import os
import sqlite3
import threading
from datetime import datetime, timezone
from typing import Any

from skillforge.core.config import settings

_conn: sqlite3.Connection | None = None
_conn_lock = threading.Lock()


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _get_connection() -> sqlite3.Connection:
    global _conn
    with _conn_lock:
        if _conn is not None:
            return _conn

        db_path = settings.resume_store_db_path
        directory = os.path.dirname(db_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        _conn = sqlite3.connect(
            db_path,
            check_same_thread=False,
            timeout=5,
            isolation_level=None,
        )
        _conn.execute("PRAGMA journal_mode=WAL;")
        _conn.execute("PRAGMA synchronous=NORMAL;")
        _conn.execute("PRAGMA busy_timeout=5000;")
        _conn.execute(
            """
            CREATE TABLE IF NOT EXISTS saved_resumes (
                owner_id TEXT PRIMARY KEY,
                filename TEXT NOT NULL,
                content_type TEXT NOT NULL,
                extracted_text TEXT NOT NULL,
                size_bytes INTEGER NOT NULL,
                uploaded_at TEXT NOT NULL
            );
            """
        )
        return _conn


def init_resume_store() -> None:
    _get_connection()


def save_resume(
    *,
    owner_id: str,
    filename: str,
    content_type: str,
    extracted_text: str,
    size_bytes: int,
) -> dict[str, Any]:
    owner = (owner_id or "").strip()
    if not owner:
        raise ValueError("owner_id is required.")
    if not (extracted_text or "").strip():
        raise ValueError("Cannot save an empty resume.")

    conn = _get_connection()
    uploaded_at = _utc_now()
    with _conn_lock:
        conn.execute(
            """
            INSERT INTO saved_resumes (
                owner_id, filename, content_type, extracted_text, size_bytes, uploaded_at
            ) VALUES (?, ?, ?, ?, ?, ?)
            ON CONFLICT(owner_id) DO UPDATE SET
                filename = excluded.filename,
                content_type = excluded.content_type,
                extracted_text = excluded.extracted_text,
                size_bytes = excluded.size_bytes,
                uploaded_at = excluded.uploaded_at
            """,
            (owner, filename, content_type, extracted_text, int(size_bytes), uploaded_at.isoformat()),
        )
    return {
        "owner_id": owner,
        "filename": filename,
        "content_type": content_type,
        "extracted_text": extracted_text,
        "size_bytes": int(size_bytes),
        "uploaded_at": uploaded_at,
    }


def get_saved_resume(owner_id: str) -> dict[str, Any] | None:
    conn = _get_connection()
    with _conn_lock:
        cur = conn.execute(
            """
            SELECT owner_id, filename, content_type, extracted_text, size_bytes, uploaded_at
            FROM saved_resumes
            WHERE owner_id = ?
            """,
            ((owner_id or "").strip(),),
        )
        row = cur.fetchone()

    if not row:
        return None

    return {
        "owner_id": row[0],
        "filename": row[1],
        "content_type": row[2],
        "extracted_text": row[3],
        "size_bytes": int(row[4]),
        "uploaded_at": datetime.fromisoformat(row[5]),
    }


def delete_saved_resume(owner_id: str) -> bool:
    conn = _get_connection()
    with _conn_lock:
        cur = conn.execute("DELETE FROM saved_resumes WHERE owner_id = ?", ((owner_id or "").strip(),))
        return bool(cur.rowcount)


def clear_saved_resumes() -> None:
    conn = _get_connection()
    with _conn_lock:
        conn.execute("DELETE FROM saved_resumes")
