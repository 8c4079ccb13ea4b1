"""Session store: one automation session per row plus its ordered logs and jobs."""

from __future__ import annotations

import json
import logging
import sqlite3
from typing import Iterable, Mapping

from autoapply.models import (
    AutomationSession,
    FoundJob,
    JobStatus,
    LogEntry,
    LogSeverity,
    SalaryRange,
    SearchCriteria,
    SessionStatus,
    utc_now,
)
from autoapply.storage.database import Database

logger = logging.getLogger(__name__)

COUNTER_FIELDS: frozenset[str] = frozenset(
    {"jobs_found", "applications_submitted", "applications_skipped"}
)

_RUNNING = SessionStatus.RUNNING.value


class SessionStore:
    """Persistence for :class:`AutomationSession` documents.

    Every method is one transaction. Mutations issued by the automation task
    only apply while the session is still ``running``; against a terminal
    session they change nothing and return ``False`` (or an empty list).
    """

    def __init__(self, db: Database) -> None:
        self._db = db

    # ---- create / read ----

    async def create(self, session: AutomationSession) -> str:
        c = session.criteria
        with self._db.transaction() as conn:
            conn.execute(
                "INSERT INTO auto_apply_sessions (id, user_id, status, job_titles, locations, "
                "salary_min, salary_max, exclude_companies, include_remote, jobs_found, "
                "applications_submitted, applications_skipped, start_time, last_update_time) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    session.id,
                    session.user_id,
                    session.status.value,
                    json.dumps(list(c.job_titles)),
                    json.dumps(list(c.locations)),
                    c.salary_range.min,
                    c.salary_range.max,
                    json.dumps(list(c.exclude_companies)),
                    int(c.include_remote),
                    session.jobs_found,
                    session.applications_submitted,
                    session.applications_skipped,
                    session.start_time,
                    session.last_update_time,
                ),
            )
            for entry in session.logs:
                _insert_log(conn, session.id, entry)
        logger.info("Created session %s for user %s.", session.id, session.user_id)
        return session.id

    async def get(self, session_id: str, owner_id: str) -> AutomationSession | None:
        """Return the session only if *owner_id* owns it."""
        with self._db.transaction() as conn:
            row = conn.execute(
                "SELECT * FROM auto_apply_sessions WHERE id=? AND user_id=?",
                (session_id, owner_id),
            ).fetchone()
            return _load(conn, row) if row else None

    async def get_by_id(self, session_id: str) -> AutomationSession | None:
        """Unscoped read, for the automation task that owns the session."""
        with self._db.transaction() as conn:
            row = conn.execute(
                "SELECT * FROM auto_apply_sessions WHERE id=?", (session_id,)
            ).fetchone()
            return _load(conn, row) if row else None

    async def list_by_owner(self, owner_id: str) -> list[AutomationSession]:
        """Sessions of *owner_id*, newest start time first."""
        with self._db.transaction() as conn:
            rows = conn.execute(
                "SELECT * FROM auto_apply_sessions WHERE user_id=? "
                "ORDER BY start_time DESC, rowid DESC",
                (owner_id,),
            ).fetchall()
            return [_load(conn, row) for row in rows]

    async def is_running(self, session_id: str) -> bool:
        with self._db.transaction() as conn:
            row = conn.execute(
                "SELECT status FROM auto_apply_sessions WHERE id=?", (session_id,)
            ).fetchone()
        return row is not None and row["status"] == _RUNNING

    # ---- mutations ----

    async def append_log(self, session_id: str, entry: LogEntry) -> bool:
        with self._db.transaction() as conn:
            if not _touch_if_running(conn, session_id):
                return False
            _insert_log(conn, session_id, entry)
        return True

    async def append_jobs(self, session_id: str, jobs: Iterable[FoundJob]) -> list[FoundJob]:
        """Append the jobs whose URL the session has not seen yet.

        Returns only the newly stored entries; ``jobs_found`` grows by exactly
        that many in the same transaction.
        """
        added: list[FoundJob] = []
        with self._db.transaction() as conn:
            if not _touch_if_running(conn, session_id):
                return []
            for job in jobs:
                cur = conn.execute(
                    "INSERT OR IGNORE INTO session_jobs (session_id, source, title, company, "
                    "location, url, status, found_at, updated_at) "
                    "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
                    (
                        session_id,
                        job.source,
                        job.title,
                        job.company,
                        job.location,
                        job.url,
                        job.status.value,
                        job.found_at,
                        job.updated_at,
                    ),
                )
                if cur.rowcount == 1:
                    added.append(job)
            if added:
                conn.execute(
                    "UPDATE auto_apply_sessions SET jobs_found = jobs_found + ? WHERE id=?",
                    (len(added), session_id),
                )
        return added

    async def update_job_status(self, session_id: str, url: str, status: JobStatus) -> bool:
        """Move a ``found`` job to its outcome; each job transitions at most once."""
        now = utc_now()
        with self._db.transaction() as conn:
            if not _touch_if_running(conn, session_id, now):
                return False
            cur = conn.execute(
                "UPDATE session_jobs SET status=?, updated_at=? "
                "WHERE session_id=? AND url=? AND status=?",
                (status.value, now, session_id, url, JobStatus.FOUND.value),
            )
            return cur.rowcount == 1

    async def increment_counters(self, session_id: str, deltas: Mapping[str, int]) -> bool:
        unknown = set(deltas) - COUNTER_FIELDS
        if unknown:
            raise ValueError(f"Unknown counter field(s): {sorted(unknown)}")
        if any(delta < 0 for delta in deltas.values()):
            raise ValueError("Counters only grow.")
        if not deltas:
            return True
        assignments = ", ".join(f"{name} = {name} + ?" for name in deltas)
        with self._db.transaction() as conn:
            cur = conn.execute(
                f"UPDATE auto_apply_sessions SET {assignments}, last_update_time=? "
                "WHERE id=? AND status=?",
                (*deltas.values(), utc_now(), session_id, _RUNNING),
            )
            return cur.rowcount == 1

    async def set_status(
        self,
        session_id: str,
        status: SessionStatus,
        log: LogEntry | None = None,
        *,
        owner_id: str | None = None,
    ) -> bool:
        """Transition ``running -> status``; terminal sessions are left untouched.

        *log* is appended in the same transaction when the transition happens.
        *owner_id* restricts the transition to that owner's session.
        """
        query = "UPDATE auto_apply_sessions SET status=?, last_update_time=? WHERE id=? AND status=?"
        params: list[str] = [status.value, utc_now(), session_id, _RUNNING]
        if owner_id is not None:
            query += " AND user_id=?"
            params.append(owner_id)
        with self._db.transaction() as conn:
            cur = conn.execute(query, params)
            if cur.rowcount != 1:
                return False
            if log is not None:
                _insert_log(conn, session_id, log)
        logger.info("Session %s -> %s.", session_id, status.value)
        return True


# ---- row helpers ----


def _touch_if_running(conn: sqlite3.Connection, session_id: str, now: str | None = None) -> bool:
    cur = conn.execute(
        "UPDATE auto_apply_sessions SET last_update_time=? WHERE id=? AND status=?",
        (now or utc_now(), session_id, _RUNNING),
    )
    return cur.rowcount == 1


def _insert_log(conn: sqlite3.Connection, session_id: str, entry: LogEntry) -> None:
    conn.execute(
        "INSERT INTO session_logs (session_id, time, message, type) VALUES (?, ?, ?, ?)",
        (session_id, entry.time, entry.message, entry.severity.value),
    )


def _load(conn: sqlite3.Connection, row: sqlite3.Row) -> AutomationSession:
    logs = [
        LogEntry(r["message"], LogSeverity(r["type"]), r["time"])
        for r in conn.execute(
            "SELECT time, message, type FROM session_logs WHERE session_id=? ORDER BY id",
            (row["id"],),
        )
    ]
    jobs = [
        FoundJob(
            source=r["source"],
            title=r["title"],
            company=r["company"],
            location=r["location"],
            url=r["url"],
            status=JobStatus(r["status"]),
            found_at=r["found_at"],
            updated_at=r["updated_at"] or "",
        )
        for r in conn.execute(
            "SELECT * FROM session_jobs WHERE session_id=? ORDER BY id", (row["id"],)
        )
    ]
    criteria = SearchCriteria(
        job_titles=tuple(json.loads(row["job_titles"])),
        locations=tuple(json.loads(row["locations"])),
        salary_range=SalaryRange(row["salary_min"], row["salary_max"]),
        exclude_companies=tuple(json.loads(row["exclude_companies"])),
        include_remote=bool(row["include_remote"]),
    )
    return AutomationSession(
        id=row["id"],
        user_id=row["user_id"],
        criteria=criteria,
        status=SessionStatus(row["status"]),
        jobs_found=row["jobs_found"],
        applications_submitted=row["applications_submitted"],
        applications_skipped=row["applications_skipped"],
        start_time=row["start_time"],
        last_update_time=row["last_update_time"],
        logs=logs,
        jobs=jobs,
    )
