"""Manually tracked job applications."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from autoapply.storage.applications import ApplicationTracker
from autoapply.web.dependencies import current_user_id, get_applications
from autoapply.web.schemas import JobApplicationRequest

router = APIRouter(prefix="/jobs", tags=["jobs"])


def _parse_id(raw: str) -> int:
    if not raw.isdigit():
        raise HTTPException(status_code=400, detail="Invalid job ID format")
    return int(raw)


@router.get("")
def list_jobs(
    user_id: str = Depends(current_user_id),
    tracker: ApplicationTracker = Depends(get_applications),
) -> list[dict[str, Any]]:
    return [a.to_document() for a in tracker.list_for_user(user_id)]


@router.get("/search")
def search_jobs(
    query: str = "",
    status: str = "",
    company: str = "",
    date_from: str = Query("", alias="dateFrom"),
    date_to: str = Query("", alias="dateTo"),
    user_id: str = Depends(current_user_id),
    tracker: ApplicationTracker = Depends(get_applications),
) -> list[dict[str, Any]]:
    results = tracker.search(
        user_id,
        query=query,
        status=status,
        company=company,
        date_from=date_from,
        date_to=date_to,
    )
    return [a.to_document() for a in results]


@router.get("/{job_id}")
def get_job(
    job_id: str,
    user_id: str = Depends(current_user_id),
    tracker: ApplicationTracker = Depends(get_applications),
) -> dict[str, Any]:
    application = tracker.get(user_id, _parse_id(job_id))
    if application is None:
        raise HTTPException(status_code=404, detail="Job application not found")
    return application.to_document()


@router.post("", status_code=201)
def add_job(
    body: JobApplicationRequest,
    user_id: str = Depends(current_user_id),
    tracker: ApplicationTracker = Depends(get_applications),
) -> dict[str, Any]:
    fields = body.model_dump(by_alias=True, exclude_unset=True)
    return tracker.add(user_id, fields).to_document()


@router.put("/{job_id}")
def update_job(
    job_id: str,
    body: JobApplicationRequest,
    user_id: str = Depends(current_user_id),
    tracker: ApplicationTracker = Depends(get_applications),
) -> dict[str, Any]:
    fields = body.model_dump(by_alias=True, exclude_unset=True)
    updated = tracker.update(user_id, _parse_id(job_id), fields)
    if updated is None:
        raise HTTPException(status_code=404, detail="Job not found")
    return updated.to_document()


@router.delete("/{job_id}", status_code=204)
def delete_job(
    job_id: str,
    user_id: str = Depends(current_user_id),
    tracker: ApplicationTracker = Depends(get_applications),
) -> Response:
    if not tracker.delete(user_id, _parse_id(job_id)):
        raise HTTPException(status_code=404, detail="Job not found")
    return Response(status_code=204)
