"""Start, stop, and poll auto-apply sessions."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from autoapply.exceptions import SessionConflictError, SessionNotFoundError
from autoapply.service import AutoApplyService, build_criteria
from autoapply.web.dependencies import current_user_id, get_service
from autoapply.web.schemas import StartRequest

router = APIRouter(prefix="/auto-apply", tags=["auto-apply"])


@router.post("/start")
async def start_session(
    body: StartRequest,
    user_id: str = Depends(current_user_id),
    service: AutoApplyService = Depends(get_service),
) -> dict[str, str]:
    criteria = build_criteria(
        body.job_titles,
        body.locations,
        salary_min=body.salary_range.min,
        salary_max=body.salary_range.max,
        exclude_companies=body.exclude_companies,
        include_remote=body.include_remote,
    )
    session_id = await service.start(user_id, criteria)
    return {"sessionId": session_id, "message": "Auto-apply session started successfully"}


@router.get("/status/{session_id}")
async def session_status(
    session_id: str,
    user_id: str = Depends(current_user_id),
    service: AutoApplyService = Depends(get_service),
) -> dict[str, Any]:
    session = await service.status(user_id, session_id)
    return session.to_document()


@router.get("/sessions")
async def list_sessions(
    user_id: str = Depends(current_user_id),
    service: AutoApplyService = Depends(get_service),
) -> list[dict[str, Any]]:
    return [s.to_document() for s in await service.list_sessions(user_id)]


@router.post("/stop/{session_id}")
async def stop_session(
    session_id: str,
    user_id: str = Depends(current_user_id),
    service: AutoApplyService = Depends(get_service),
) -> dict[str, str]:
    try:
        await service.stop(user_id, session_id)
    except (SessionNotFoundError, SessionConflictError) as exc:
        raise HTTPException(
            status_code=400,
            detail="Failed to stop auto-apply session or session is not running",
        ) from exc
    return {"message": "Auto-apply session stopped successfully"}
