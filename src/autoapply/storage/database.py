"""Shared SQLite connection, schema and transaction scope."""

from __future__ import annotations

import logging
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from autoapply.exceptions import StoreError

logger = logging.getLogger(__name__)

_SCHEMA = """\
CREATE TABLE IF NOT EXISTS auto_apply_sessions (
    id                      TEXT PRIMARY KEY,
    user_id                 TEXT NOT NULL,
    status                  TEXT NOT NULL,
    job_titles              TEXT NOT NULL,
    locations               TEXT NOT NULL,
    salary_min              NUMERIC DEFAULT 0,
    salary_max              NUMERIC DEFAULT 0,
    exclude_companies       TEXT DEFAULT '[]',
    include_remote          INTEGER DEFAULT 1,
    jobs_found              INTEGER DEFAULT 0,
    applications_submitted  INTEGER DEFAULT 0,
    applications_skipped    INTEGER DEFAULT 0,
    start_time              TEXT NOT NULL,
    last_update_time        TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_sessions_owner
    ON auto_apply_sessions (user_id, start_time);

CREATE TABLE IF NOT EXISTS session_logs (
    id              INTEGER PRIMARY KEY AUTOINCREMENT,
    session_id      TEXT NOT NULL REFERENCES auto_apply_sessions(id),
    time            TEXT NOT NULL,
    message         TEXT NOT NULL,
    type            TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS session_jobs (
    id              INTEGER PRIMARY KEY AUTOINCREMENT,
    session_id      TEXT NOT NULL REFERENCES auto_apply_sessions(id),
    source          TEXT NOT NULL,
    title           TEXT DEFAULT '',
    company         TEXT DEFAULT '',
    location        TEXT DEFAULT '',
    url             TEXT NOT NULL,
    status          TEXT NOT NULL,
    found_at        TEXT NOT NULL,
    updated_at      TEXT DEFAULT '',
    UNIQUE(session_id, url)
);

CREATE TABLE IF NOT EXISTS profiles (
    user_id         TEXT PRIMARY KEY,
    name            TEXT NOT NULL,
    email           TEXT NOT NULL,
    title           TEXT DEFAULT '',
    phone           TEXT DEFAULT '',
    skills          TEXT DEFAULT '[]',
    experience      TEXT DEFAULT '[]',
    education       TEXT DEFAULT '[]',
    resume_path     TEXT DEFAULT '',
    created_at      TEXT NOT NULL,
    updated_at      TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS job_applications (
    id                  INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id             TEXT NOT NULL,
    job_title           TEXT DEFAULT '',
    company_name        TEXT DEFAULT '',
    location            TEXT DEFAULT '',
    status              TEXT DEFAULT 'applied',
    application_date    TEXT DEFAULT '',
    description         TEXT DEFAULT '',
    position_type       TEXT DEFAULT '',
    skills              TEXT DEFAULT '',
    requirements        TEXT DEFAULT '',
    salary              TEXT DEFAULT '',
    url                 TEXT DEFAULT '',
    notes               TEXT DEFAULT '',
    created_at          TEXT NOT NULL,
    updated_at          TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS credentials (
    id              INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id         TEXT NOT NULL,
    portal_name     TEXT NOT NULL,
    username        TEXT NOT NULL,
    password_hash   TEXT NOT NULL,
    url             TEXT DEFAULT '',
    notes           TEXT DEFAULT '',
    created_at      TEXT NOT NULL,
    updated_at      TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS user_settings (
    user_id                 TEXT PRIMARY KEY,
    dark_mode               INTEGER DEFAULT 0,
    email_notifications     INTEGER DEFAULT 1,
    auto_apply_preferences  TEXT NOT NULL,
    created_at              TEXT NOT NULL,
    updated_at              TEXT NOT NULL
);
"""


class Database:
    """One SQLite connection shared by every store.

    Each :meth:`transaction` holds a lock for its whole duration, so a reader
    never observes half of another caller's write.
    """

    def __init__(self, path: str | Path) -> None:
        target = str(path)
        if target != ":memory:":
            Path(target).parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.RLock()
        try:
            self._conn = sqlite3.connect(target, check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
            self._conn.executescript(_SCHEMA)
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to open database {target}: {exc}") from exc
        logger.info("Database ready at %s.", target)

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Run the body as one atomic unit: commit on success, roll back otherwise."""
        with self._lock:
            try:
                with self._conn:
                    yield self._conn
            except sqlite3.Error as exc:
                raise StoreError(str(exc)) from exc

    def close(self) -> None:
        with self._lock:
            self._conn.close()
