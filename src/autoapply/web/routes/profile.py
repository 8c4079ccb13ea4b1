"""Applicant profile read/write."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from autoapply.models import UserProfile
from autoapply.storage.profiles import ProfileStore
from autoapply.web.dependencies import current_user_id, get_profiles
from autoapply.web.schemas import ProfileRequest

router = APIRouter(prefix="/profile", tags=["profile"])


def _split(value: list[str] | str, sep: str) -> tuple[str, ...]:
    items = value if isinstance(value, list) else value.split(sep)
    return tuple(item.strip() for item in items if item.strip())


@router.get("")
async def get_profile(
    user_id: str = Depends(current_user_id),
    profiles: ProfileStore = Depends(get_profiles),
) -> dict[str, Any]:
    profile = await profiles.get(user_id)
    if profile is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    return profile.to_document()


@router.post("")
async def save_profile(
    body: ProfileRequest,
    user_id: str = Depends(current_user_id),
    profiles: ProfileStore = Depends(get_profiles),
) -> JSONResponse:
    if not body.name.strip() or not body.email.strip():
        raise HTTPException(status_code=400, detail="Name and email are required")
    stored, created = await profiles.upsert(
        UserProfile(
            user_id=user_id,
            name=body.name.strip(),
            email=body.email.strip(),
            title=body.title,
            phone=body.phone,
            skills=_split(body.skills, ","),
            experience=_split(body.experience, "\n"),
            education=_split(body.education, "\n"),
            resume_path=body.resume_path,
        )
    )
    return JSONResponse(stored.to_document(), status_code=201 if created else 200)
