"""SQLite-backed history of manually tracked job applications."""

from __future__ import annotations

import logging
import sqlite3
from typing import Any, Mapping

from autoapply.models import JobApplication, utc_now
from autoapply.storage.database import Database

logger = logging.getLogger(__name__)

# columns a caller may set, keyed by their document name
EDITABLE_FIELDS: dict[str, str] = {
    "jobTitle": "job_title",
    "companyName": "company_name",
    "location": "location",
    "status": "status",
    "applicationDate": "application_date",
    "description": "description",
    "positionType": "position_type",
    "skills": "skills",
    "requirements": "requirements",
    "salary": "salary",
    "url": "url",
    "notes": "notes",
}

_SEARCHABLE_COLUMNS = (
    "job_title",
    "company_name",
    "description",
    "location",
    "position_type",
    "skills",
    "requirements",
)


def _like(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class ApplicationTracker:
    """CRUD and search over a user's job applications."""

    def __init__(self, db: Database) -> None:
        self._db = db

    def list_for_user(self, user_id: str) -> list[JobApplication]:
        with self._db.transaction() as conn:
            rows = conn.execute(
                "SELECT * FROM job_applications WHERE user_id=? ORDER BY id", (user_id,)
            ).fetchall()
        return [_to_model(r) for r in rows]

    def get(self, user_id: str, application_id: int) -> JobApplication | None:
        with self._db.transaction() as conn:
            row = conn.execute(
                "SELECT * FROM job_applications WHERE id=? AND user_id=?",
                (application_id, user_id),
            ).fetchone()
        return _to_model(row) if row else None

    def search(
        self,
        user_id: str,
        query: str = "",
        status: str = "",
        company: str = "",
        date_from: str = "",
        date_to: str = "",
    ) -> list[JobApplication]:
        """Filter applications; every query term may match any searchable column."""
        sql = "SELECT * FROM job_applications WHERE user_id=?"
        params: list[Any] = [user_id]

        terms = query.split()
        if terms:
            ors = [
                f"{col} LIKE ? ESCAPE '\\'" for _term in terms for col in _SEARCHABLE_COLUMNS
            ]
            sql += " AND (" + " OR ".join(ors) + ")"
            params.extend(_like(t) for t in terms for _col in _SEARCHABLE_COLUMNS)

        if status and status != "all":
            sql += " AND status=?"
            params.append(status)
        if company:
            sql += " AND company_name LIKE ? ESCAPE '\\'"
            params.append(_like(company))
        if date_from:
            sql += " AND application_date >= ?"
            params.append(date_from)
        if date_to:
            sql += " AND application_date <= ?"
            params.append(date_to)
        sql += " ORDER BY id"

        with self._db.transaction() as conn:
            rows = conn.execute(sql, params).fetchall()
        logger.debug("Application search for %s matched %d row(s).", user_id, len(rows))
        return [_to_model(r) for r in rows]

    def add(self, user_id: str, fields: Mapping[str, Any]) -> JobApplication:
        now = utc_now()
        values = _editable(fields)
        columns = ["user_id", *values.keys(), "created_at", "updated_at"]
        with self._db.transaction() as conn:
            cur = conn.execute(
                f"INSERT INTO job_applications ({', '.join(columns)}) "
                f"VALUES ({', '.join('?' for _ in columns)})",
                (user_id, *values.values(), now, now),
            )
            application_id = cur.lastrowid
        created = self.get(user_id, application_id)  # type: ignore[arg-type]
        assert created is not None
        return created

    def update(
        self, user_id: str, application_id: int, fields: Mapping[str, Any]
    ) -> JobApplication | None:
        values = _editable(fields)
        values["updated_at"] = utc_now()
        assignments = ", ".join(f"{col}=?" for col in values)
        with self._db.transaction() as conn:
            cur = conn.execute(
                f"UPDATE job_applications SET {assignments} WHERE id=? AND user_id=?",
                (*values.values(), application_id, user_id),
            )
            if cur.rowcount == 0:
                return None
        return self.get(user_id, application_id)

    def delete(self, user_id: str, application_id: int) -> bool:
        with self._db.transaction() as conn:
            cur = conn.execute(
                "DELETE FROM job_applications WHERE id=? AND user_id=?",
                (application_id, user_id),
            )
            return cur.rowcount == 1


def _editable(fields: Mapping[str, Any]) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for key, column in EDITABLE_FIELDS.items():
        if key in fields and fields[key] is not None:
            value = fields[key]
            values[column] = ", ".join(value) if isinstance(value, list) else str(value)
    return values


def _to_model(row: sqlite3.Row) -> JobApplication:
    return JobApplication(
        id=row["id"],
        user_id=row["user_id"],
        job_title=row["job_title"],
        company_name=row["company_name"],
        location=row["location"],
        status=row["status"],
        application_date=row["application_date"],
        description=row["description"],
        position_type=row["position_type"],
        skills=row["skills"],
        requirements=row["requirements"],
        salary=row["salary"],
        url=row["url"],
        notes=row["notes"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )
