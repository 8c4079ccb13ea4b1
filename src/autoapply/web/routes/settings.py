"""Per-user preferences, including the default auto-apply criteria."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from autoapply.storage.preferences import PreferencesStore, is_valid_auto_apply_preferences
from autoapply.web.dependencies import current_user_id, get_preferences
from autoapply.web.schemas import SettingsRequest

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("")
def get_settings(
    user_id: str = Depends(current_user_id),
    store: PreferencesStore = Depends(get_preferences),
) -> dict[str, Any]:
    return store.get(user_id)


@router.post("")
def save_settings(
    body: SettingsRequest,
    user_id: str = Depends(current_user_id),
    store: PreferencesStore = Depends(get_preferences),
) -> dict[str, Any]:
    if body.auto_apply_preferences is None:
        raise HTTPException(status_code=400, detail="Auto apply preferences are required")
    if not is_valid_auto_apply_preferences(body.auto_apply_preferences):
        raise HTTPException(status_code=400, detail="Invalid auto apply preferences format")
    return store.save(
        user_id,
        body.auto_apply_preferences,
        dark_mode=body.dark_mode,
        email_notifications=body.email_notifications,
    )
