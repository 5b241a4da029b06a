"""Dual-write audit logger: JSONL file + SQLite database."""

from __future__ import annotations

import getpass
import json
import logging
import os
import sqlite3
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Generator

from vhm_common import AuditEvent, SyncResult

from vhm.config import get_config

log = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS audit_logs (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    timestamp TEXT NOT NULL,
    host TEXT NOT NULL,
    actor TEXT NOT NULL,
    action TEXT NOT NULL,
    target TEXT NOT NULL DEFAULT '',
    params TEXT NOT NULL DEFAULT '{}',
    result TEXT NOT NULL DEFAULT 'success',
    error TEXT,
    warnings TEXT NOT NULL DEFAULT '[]',
    duration_ms INTEGER
);
CREATE INDEX IF NOT EXISTS idx_audit_timestamp ON audit_logs(timestamp);
CREATE INDEX IF NOT EXISTS idx_audit_action ON audit_logs(action);
CREATE INDEX IF NOT EXISTS idx_audit_target ON audit_logs(target);
"""


def _get_actor() -> str:
    return os.environ.get("VHM_ACTOR") or getpass.getuser()


def _init_db(db_path: Path) -> sqlite3.Connection:
    conn = sqlite3.connect(str(db_path))
    conn.executescript(_SCHEMA)
    return conn


def _write_jsonl(path: Path, event: AuditEvent) -> None:
    with open(path, "a") as f:
        f.write(event.to_jsonl() + "\n")


def _write_sqlite(db_path: Path, event: AuditEvent) -> None:
    conn = _init_db(db_path)
    try:
        conn.execute(
            """INSERT INTO audit_logs
               (timestamp, host, actor, action, target, params, result, error, warnings, duration_ms)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                event.timestamp.isoformat(),
                event.host,
                event.actor,
                event.action,
                event.target,
                json.dumps(event.params, default=str),
                event.result,
                event.error,
                json.dumps(event.warnings),
                event.duration_ms,
            ),
        )
        conn.commit()
    finally:
        conn.close()


def log_event(event: AuditEvent) -> None:
    """Write an audit event to both JSONL and SQLite.

    Audit storage problems are logged, never raised: the operation being
    audited has already happened by the time its event is written.
    """
    cfg = get_config()
    for write, path in ((_write_jsonl, cfg.audit_jsonl_path), (_write_sqlite, cfg.audit_db_path)):
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            write(path, event)
        except (OSError, sqlite3.Error) as exc:
            log.warning("Cannot write audit event %s to %s: %s", event.action, path, exc)


def record_result(event: AuditEvent, result: SyncResult) -> None:
    """Copy the outcome of a sync or site operation onto an audit event."""
    event.warnings = list(result.warnings)
    if result.failed:
        event.result = "failure"
        event.error = result.error
    elif result.warnings:
        event.result = "warning"


@contextmanager
def audit(action: str, target: str = "", **params: Any) -> Generator[AuditEvent, None, None]:
    """Context manager that records timing and success/warning/failure."""
    event = AuditEvent(
        actor=_get_actor(),
        action=action,
        target=target,
        params=params,
    )
    start = time.monotonic()
    try:
        yield event
    except Exception as exc:
        event.result = "failure"
        event.error = str(exc)
        raise
    finally:
        event.duration_ms = int((time.monotonic() - start) * 1000)
        log_event(event)
