"""Job-portal credentials; passwords never leave the server."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Response

from autoapply.storage.credentials import CredentialStore
from autoapply.web.dependencies import current_user_id, get_credentials
from autoapply.web.schemas import CredentialRequest

router = APIRouter(prefix="/credentials", tags=["credentials"])


@router.get("")
def list_credentials(
    user_id: str = Depends(current_user_id),
    store: CredentialStore = Depends(get_credentials),
) -> list[dict[str, Any]]:
    return [c.to_document() for c in store.list_for_user(user_id)]


@router.post("", status_code=201)
def add_credential(
    body: CredentialRequest,
    user_id: str = Depends(current_user_id),
    store: CredentialStore = Depends(get_credentials),
) -> dict[str, Any]:
    if not body.portal_name or not body.username or not body.password:
        raise HTTPException(
            status_code=400, detail="Portal name, username, and password are required"
        )
    credential = store.add(
        user_id, body.portal_name, body.username, body.password, body.url, body.notes
    )
    return credential.to_document()


@router.put("/{credential_id}")
def update_credential(
    credential_id: int,
    body: CredentialRequest,
    user_id: str = Depends(current_user_id),
    store: CredentialStore = Depends(get_credentials),
) -> dict[str, Any]:
    if not body.portal_name or not body.username:
        raise HTTPException(status_code=400, detail="Portal name and username are required")
    updated = store.update(
        user_id,
        credential_id,
        body.portal_name,
        body.username,
        password=body.password,
        url=body.url,
        notes=body.notes,
    )
    if updated is None:
        raise HTTPException(status_code=404, detail="Credential not found or not authorized")
    return updated.to_document()


@router.delete("/{credential_id}", status_code=204)
def delete_credential(
    credential_id: int,
    user_id: str = Depends(current_user_id),
    store: CredentialStore = Depends(get_credentials),
) -> Response:
    if not store.delete(user_id, credential_id):
        raise HTTPException(status_code=404, detail="Credential not found or not authorized")
    return Response(status_code=204)
