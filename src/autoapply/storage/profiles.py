"""Applicant profiles, one per user."""

from __future__ import annotations

import json
import logging
from dataclasses import replace

from autoapply.models import UserProfile, utc_now
from autoapply.storage.database import Database

logger = logging.getLogger(__name__)


class ProfileStore:
    """Read and upsert :class:`UserProfile` rows."""

    def __init__(self, db: Database) -> None:
        self._db = db

    async def get(self, user_id: str) -> UserProfile | None:
        with self._db.transaction() as conn:
            row = conn.execute("SELECT * FROM profiles WHERE user_id=?", (user_id,)).fetchone()
        if row is None:
            return None
        return UserProfile(
            user_id=row["user_id"],
            name=row["name"],
            email=row["email"],
            title=row["title"],
            phone=row["phone"],
            skills=tuple(json.loads(row["skills"])),
            experience=tuple(json.loads(row["experience"])),
            education=tuple(json.loads(row["education"])),
            resume_path=row["resume_path"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    async def upsert(self, profile: UserProfile) -> tuple[UserProfile, bool]:
        """Insert or replace the profile; returns ``(stored, created)``."""
        now = utc_now()
        existing = await self.get(profile.user_id)
        created = existing is None
        stored = replace(
            profile,
            created_at=now if existing is None else existing.created_at,
            updated_at=now,
        )
        with self._db.transaction() as conn:
            conn.execute(
                "INSERT INTO profiles (user_id, name, email, title, phone, skills, experience, "
                "education, resume_path, created_at, updated_at) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?) "
                "ON CONFLICT(user_id) DO UPDATE SET name=excluded.name, email=excluded.email, "
                "title=excluded.title, phone=excluded.phone, skills=excluded.skills, "
                "experience=excluded.experience, education=excluded.education, "
                "resume_path=excluded.resume_path, updated_at=excluded.updated_at",
                (
                    stored.user_id,
                    stored.name,
                    stored.email,
                    stored.title,
                    stored.phone,
                    json.dumps(list(stored.skills)),
                    json.dumps(list(stored.experience)),
                    json.dumps(list(stored.education)),
                    stored.resume_path,
                    stored.created_at,
                    stored.updated_at,
                ),
            )
        logger.info("%s profile for user %s.", "Created" if created else "Updated", profile.user_id)
        return stored, created
