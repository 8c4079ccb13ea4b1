"""Request-scoped lookups: caller identity and the stores on ``app.state``."""

from __future__ import annotations

from fastapi import Header, HTTPException, Request

from autoapply.service import AutoApplyService
from autoapply.storage.applications import ApplicationTracker
from autoapply.storage.credentials import CredentialStore
from autoapply.storage.preferences import PreferencesStore
from autoapply.storage.profiles import ProfileStore


def current_user_id(x_user_id: str | None = Header(default=None)) -> str:
    """The authenticated user id, as forwarded by the upstream auth layer."""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="No user identity, authorization denied")
    return x_user_id.strip()


def get_service(request: Request) -> AutoApplyService:
    return request.app.state.service


def get_profiles(request: Request) -> ProfileStore:
    return request.app.state.profiles


def get_applications(request: Request) -> ApplicationTracker:
    return request.app.state.applications


def get_credentials(request: Request) -> CredentialStore:
    return request.app.state.credentials


def get_preferences(request: Request) -> PreferencesStore:
    return request.app.state.preferences
