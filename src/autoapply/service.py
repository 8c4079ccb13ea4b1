"""Start, stop, and inspect auto-apply sessions."""

from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Iterable

from autoapply.exceptions import SessionConflictError, SessionNotFoundError, ValidationError
from autoapply.models import (
    AutomationSession,
    LogEntry,
    SalaryRange,
    SearchCriteria,
    SessionStatus,
)
from autoapply.orchestrator import SessionRunner
from autoapply.storage.sessions import SessionStore

logger = logging.getLogger(__name__)


def _clean(values: Iterable[str] | None) -> tuple[str, ...]:
    return tuple(v.strip() for v in values or () if v and v.strip())


def build_criteria(
    job_titles: Iterable[str] | None,
    locations: Iterable[str] | None,
    salary_min: float = 0,
    salary_max: float = 0,
    exclude_companies: Iterable[str] | None = None,
    include_remote: bool = True,
) -> SearchCriteria:
    """Validate raw input into an immutable :class:`SearchCriteria`.

    Only titles and locations are required; the salary range is passed to the
    job boards as given.
    """
    titles = _clean(job_titles)
    places = _clean(locations)
    if not titles or not places:
        raise ValidationError("Job titles and locations are required")
    return SearchCriteria(
        job_titles=titles,
        locations=places,
        salary_range=SalaryRange(salary_min, salary_max),
        exclude_companies=_clean(exclude_companies),
        include_remote=include_remote,
    )


class AutoApplyService:
    """Owns the background task of every session started in this process."""

    def __init__(self, store: SessionStore, runner: SessionRunner) -> None:
        self._store = store
        self._runner = runner
        self._tasks: dict[str, asyncio.Task[None]] = {}

    async def start(self, owner_id: str, criteria: SearchCriteria) -> str:
        """Create a ``running`` session and schedule its run; returns at once."""
        if not criteria.job_titles or not criteria.locations:
            raise ValidationError("Job titles and locations are required")
        session = AutomationSession(
            id=uuid.uuid4().hex,
            user_id=owner_id,
            criteria=criteria,
            logs=[LogEntry.info("Auto-apply session started")],
        )
        session_id = await self._store.create(session)

        task = asyncio.create_task(self._runner.run(session_id), name=f"auto-apply-{session_id}")
        self._tasks[session_id] = task
        task.add_done_callback(lambda _t, sid=session_id: self._tasks.pop(sid, None))
        logger.info("Started session %s for user %s.", session_id, owner_id)
        return session_id

    async def status(self, owner_id: str, session_id: str) -> AutomationSession:
        session = await self._store.get(session_id, owner_id)
        if session is None:
            raise SessionNotFoundError(f"Auto-apply session {session_id} not found")
        return session

    async def stop(self, owner_id: str, session_id: str) -> None:
        """Move ``running -> stopped``; the background task notices before its next step."""
        stopped = await self._store.set_status(
            session_id,
            SessionStatus.STOPPED,
            LogEntry.info("Auto-apply session stopped by user"),
            owner_id=owner_id,
        )
        if stopped:
            return
        session = await self._store.get(session_id, owner_id)
        if session is None:
            raise SessionNotFoundError(f"Auto-apply session {session_id} not found")
        raise SessionConflictError(f"Auto-apply session is already {session.status.value}")

    async def list_sessions(self, owner_id: str) -> list[AutomationSession]:
        return await self._store.list_by_owner(owner_id)

    async def wait(self, session_id: str) -> None:
        """Block until the session's background run (if any in this process) ends."""
        task = self._tasks.get(session_id)
        if task is not None:
            await task

    async def shutdown(self) -> None:
        """Cancel in-flight runs and leave their sessions in a terminal state."""
        tasks = dict(self._tasks)
        for task in tasks.values():
            task.cancel()
        await asyncio.gather(*tasks.values(), return_exceptions=True)
        for session_id in tasks:
            await self._store.set_status(
                session_id,
                SessionStatus.ERROR,
                LogEntry.error("Auto-apply session interrupted by server shutdown"),
            )
        if tasks:
            logger.info("Interrupted %d running session(s) on shutdown.", len(tasks))
