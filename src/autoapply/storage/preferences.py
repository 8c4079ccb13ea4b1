"""Per-user UI and auto-apply preferences."""

from __future__ import annotations

import json
from typing import Any

from autoapply.models import utc_now
from autoapply.storage.database import Database

_REQUIRED_PREFERENCE_KEYS = ("jobTitles", "locations", "salaryRange", "excludeCompanies", "includeRemote")


def default_preferences(user_id: str) -> dict[str, Any]:
    return {
        "userId": user_id,
        "darkMode": False,
        "emailNotifications": True,
        "autoApplyPreferences": {
            "jobTitles": [],
            "locations": [],
            "salaryRange": {"min": 0, "max": 0},
            "excludeCompanies": [],
            "includeRemote": True,
        },
    }


def is_valid_auto_apply_preferences(prefs: Any) -> bool:
    return isinstance(prefs, dict) and all(
        prefs.get(key) is not None for key in _REQUIRED_PREFERENCE_KEYS
    )


class PreferencesStore:
    def __init__(self, db: Database) -> None:
        self._db = db

    def get(self, user_id: str) -> dict[str, Any]:
        """Stored preferences, or the defaults when the user never saved any."""
        with self._db.transaction() as conn:
            row = conn.execute(
                "SELECT * FROM user_settings WHERE user_id=?", (user_id,)
            ).fetchone()
        if row is None:
            return default_preferences(user_id)
        return {
            "userId": row["user_id"],
            "darkMode": bool(row["dark_mode"]),
            "emailNotifications": bool(row["email_notifications"]),
            "autoApplyPreferences": json.loads(row["auto_apply_preferences"]),
            "createdAt": row["created_at"],
            "updatedAt": row["updated_at"],
        }

    def save(
        self,
        user_id: str,
        auto_apply_preferences: dict[str, Any],
        dark_mode: bool = False,
        email_notifications: bool = True,
    ) -> dict[str, Any]:
        now = utc_now()
        with self._db.transaction() as conn:
            conn.execute(
                "INSERT INTO user_settings (user_id, dark_mode, email_notifications, "
                "auto_apply_preferences, created_at, updated_at) VALUES (?, ?, ?, ?, ?, ?) "
                "ON CONFLICT(user_id) DO UPDATE SET dark_mode=excluded.dark_mode, "
                "email_notifications=excluded.email_notifications, "
                "auto_apply_preferences=excluded.auto_apply_preferences, "
                "updated_at=excluded.updated_at",
                (
                    user_id,
                    int(dark_mode),
                    int(email_notifications),
                    json.dumps(auto_apply_preferences),
                    now,
                    now,
                ),
            )
        return self.get(user_id)
