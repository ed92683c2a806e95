from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from skillforge.core.config import settings


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


_schema_ready = False


def _get_db_path() -> Path:
    return Path(settings.analytics_db_path)


def init_db() -> None:
    global _schema_ready
    if not settings.analytics_enabled:
        return
    db_path = _get_db_path()
    db_path.parent.mkdir(parents=True, exist_ok=True)
    with sqlite3.connect(db_path) as conn:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS ai_calls (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                created_at TEXT NOT NULL,
                run_id TEXT NOT NULL,
                feature TEXT NOT NULL,
                provider TEXT NOT NULL,
                model TEXT NOT NULL,
                key_index INTEGER NOT NULL,
                status TEXT NOT NULL,
                error_code TEXT,
                latency_ms INTEGER
            )
            """
        )
        conn.execute(
            """
            CREATE INDEX IF NOT EXISTS idx_ai_calls_created_at
            ON ai_calls (created_at)
            """
        )
        conn.commit()
    _schema_ready = True
    purge_old_records()


def log_ai_call(
    *,
    run_id: str,
    feature: str,
    provider: str,
    model: str,
    key_index: int,
    status: str,
    error_code: str | None = None,
    latency_ms: int | None = None,
) -> None:
    if not settings.analytics_enabled:
        return
    if not _schema_ready:
        init_db()
    db_path = _get_db_path()
    with sqlite3.connect(db_path) as conn:
        conn.execute(
            """
            INSERT INTO ai_calls (
                created_at, run_id, feature, provider, model, key_index, status, error_code, latency_ms
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                _utc_now(),
                run_id,
                feature,
                provider,
                model,
                key_index,
                status,
                error_code,
                latency_ms,
            ),
        )
        conn.commit()


def purge_old_records() -> dict[str, int]:
    if not settings.analytics_enabled:
        return {"ai_calls": 0}

    db_path = _get_db_path()
    retention = max(1, int(settings.analytics_retention_days))
    with sqlite3.connect(db_path) as conn:
        cur = conn.execute(
            "DELETE FROM ai_calls WHERE created_at < datetime('now', ?)",
            (f"-{retention} days",),
        )
        deleted = int(cur.rowcount or 0)
        conn.commit()
    return {"ai_calls": deleted}


def get_ai_summary() -> dict[str, Any]:
    if not settings.analytics_enabled:
        return {"enabled": False}
    if not _schema_ready:
        init_db()
    db_path = _get_db_path()
    with sqlite3.connect(db_path) as conn:
        total = conn.execute("SELECT COUNT(*) FROM ai_calls").fetchone()[0]
        by_status = dict(conn.execute("SELECT status, COUNT(*) FROM ai_calls GROUP BY status").fetchall())
        by_feature = dict(conn.execute("SELECT feature, COUNT(*) FROM ai_calls GROUP BY feature").fetchall())
        cur = conn.execute(
            """
            SELECT AVG(latency_ms)
            FROM ai_calls
            WHERE status = 'success' AND created_at >= datetime('now', '-7 days')
            """
        )
        avg_latency = cur.fetchone()[0]
    return {
        "enabled": True,
        "total": total,
        "by_status": by_status,
        "by_feature": by_feature,
        "avg_success_latency_ms_7d": int(avg_latency) if avg_latency is not None else None,
    }
