"""Job-portal credentials; passwords are kept only as bcrypt hashes."""

from __future__ import annotations

import logging
import sqlite3

import bcrypt

from autoapply.models import PortalCredential, utc_now
from autoapply.storage.database import Database

logger = logging.getLogger(__name__)


def hash_password(raw_password: str) -> str:
    return bcrypt.hashpw(raw_password.encode("utf-8"), bcrypt.gensalt(rounds=10)).decode("utf-8")


class CredentialStore:
    def __init__(self, db: Database) -> None:
        self._db = db

    def list_for_user(self, user_id: str) -> list[PortalCredential]:
        with self._db.transaction() as conn:
            rows = conn.execute(
                "SELECT * FROM credentials WHERE user_id=? ORDER BY id", (user_id,)
            ).fetchall()
        logger.debug("Found %d credential(s) for user %s.", len(rows), user_id)
        return [_to_model(r) for r in rows]

    def get(self, user_id: str, credential_id: int) -> PortalCredential | None:
        with self._db.transaction() as conn:
            row = conn.execute(
                "SELECT * FROM credentials WHERE id=? AND user_id=?", (credential_id, user_id)
            ).fetchone()
        return _to_model(row) if row else None

    def add(
        self,
        user_id: str,
        portal_name: str,
        username: str,
        password: str,
        url: str = "",
        notes: str = "",
    ) -> PortalCredential:
        now = utc_now()
        password_hash = hash_password(password)
        with self._db.transaction() as conn:
            cur = conn.execute(
                "INSERT INTO credentials (user_id, portal_name, username, password_hash, url, "
                "notes, created_at, updated_at) VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                (user_id, portal_name, username, password_hash, url, notes, now, now),
            )
            credential_id = cur.lastrowid
        logger.info("Added %s credential for user %s.", portal_name, user_id)
        stored = self.get(user_id, credential_id)  # type: ignore[arg-type]
        assert stored is not None
        return stored

    def update(
        self,
        user_id: str,
        credential_id: int,
        portal_name: str,
        username: str,
        password: str = "",
        url: str = "",
        notes: str = "",
    ) -> PortalCredential | None:
        """Update a credential; the stored hash changes only when *password* is given."""
        values: dict[str, str] = {
            "portal_name": portal_name,
            "username": username,
            "url": url,
            "notes": notes,
            "updated_at": utc_now(),
        }
        # bcrypt runs outside the database lock
        if password:
            values["password_hash"] = hash_password(password)
        assignments = ", ".join(f"{col}=?" for col in values)
        with self._db.transaction() as conn:
            cur = conn.execute(
                f"UPDATE credentials SET {assignments} WHERE id=? AND user_id=?",
                (*values.values(), credential_id, user_id),
            )
            if cur.rowcount == 0:
                return None
        return self.get(user_id, credential_id)

    def delete(self, user_id: str, credential_id: int) -> bool:
        with self._db.transaction() as conn:
            cur = conn.execute(
                "DELETE FROM credentials WHERE id=? AND user_id=?", (credential_id, user_id)
            )
            return cur.rowcount == 1


def _to_model(row: sqlite3.Row) -> PortalCredential:
    return PortalCredential(
        id=row["id"],
        user_id=row["user_id"],
        portal_name=row["portal_name"],
        username=row["username"],
        password_hash=row["password_hash"],
        url=row["url"],
        notes=row["notes"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )
