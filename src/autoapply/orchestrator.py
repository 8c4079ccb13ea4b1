"""Session runner: search every source, filter, apply, and record progress."""

from __future__ import annotations

import logging
from typing import Sequence

from autoapply.evaluation.filter_chain import ListingFilter, build_filter_chain
from autoapply.exceptions import AdapterError, ProfileMissingError, StoreError
from autoapply.models import (
    ApplyOutcome,
    AutomationSession,
    FoundJob,
    JobListing,
    JobStatus,
    LogEntry,
    LogSeverity,
    SessionStatus,
    UserProfile,
)
from autoapply.sources.base import JobSource
from autoapply.storage.profiles import ProfileStore
from autoapply.storage.sessions import SessionStore

logger = logging.getLogger(__name__)

_LOG_LEVELS: dict[LogSeverity, int] = {
    LogSeverity.INFO: logging.INFO,
    LogSeverity.SUCCESS: logging.INFO,
    LogSeverity.WARNING: logging.WARNING,
    LogSeverity.ERROR: logging.ERROR,
}

# error outcomes did not produce a submission, so they count as skipped
_COUNTER_FOR: dict[JobStatus, str] = {
    JobStatus.APPLIED: "applications_submitted",
    JobStatus.SKIPPED: "applications_skipped",
    JobStatus.ERROR: "applications_skipped",
}


class SessionRunner:
    """Drives one session from ``running`` to a terminal state.

    Sources are visited in order; within a source, titles are the outer
    loop and locations the inner one. The stored status is re-read before
    every search and every apply, so a stop request lets at most the
    in-flight call finish.
    """

    def __init__(
        self,
        store: SessionStore,
        profiles: ProfileStore,
        sources: Sequence[JobSource],
    ) -> None:
        self._store = store
        self._profiles = profiles
        self._sources = list(sources)

    async def run(self, session_id: str) -> None:
        """Execute the session; never raises."""
        try:
            await self._execute(session_id)
        except ProfileMissingError as exc:
            logger.warning("Session %s: %s", session_id, exc)
            await self._fail(session_id, str(exc))
        except Exception as exc:
            logger.exception("Session %s crashed.", session_id)
            await self._fail(session_id, f"Error in auto-apply process: {exc}")

    # ---- stages ----

    async def _execute(self, session_id: str) -> None:
        session = await self._store.get_by_id(session_id)
        if session is None or not session.is_running:
            logger.info("Session %s is not running; nothing to do.", session_id)
            return

        await self._log(session_id, LogEntry.info("Initializing job search"))

        profile = await self._profiles.get(session.user_id)
        if profile is None:
            raise ProfileMissingError(
                "User profile not found. Please complete your profile before auto-applying."
            )

        filter_head = build_filter_chain(session.criteria)

        for source in self._sources:
            if not await self._run_source(session, source, profile, filter_head):
                logger.info("Session %s stopped externally.", session_id)
                return

        await self._store.set_status(
            session_id,
            SessionStatus.COMPLETED,
            LogEntry.info("Auto-apply session completed"),
        )

    async def _run_source(
        self,
        session: AutomationSession,
        source: JobSource,
        profile: UserProfile,
        filter_head: ListingFilter | None,
    ) -> bool:
        """Search and apply on one source; ``False`` once the session is no longer running."""
        session_id = session.id
        criteria = session.criteria
        await self._log(session_id, LogEntry.info(f"Starting {source.display_name} job search"))

        for title in criteria.job_titles:
            for location in criteria.locations:
                if not await self._store.is_running(session_id):
                    return False

                await self._log(
                    session_id,
                    LogEntry.info(f"Searching {source.display_name} for {title} in {location}"),
                )
                try:
                    listings = await source.search(
                        title,
                        location,
                        include_remote=criteria.include_remote,
                        salary_min=criteria.salary_range.min,
                    )
                except AdapterError as exc:
                    await self._log(
                        session_id,
                        LogEntry.error(
                            f"Error in {source.display_name} search for {title} in {location}: {exc}"
                        ),
                    )
                    continue

                new_jobs = await self._store.append_jobs(
                    session_id, [FoundJob.from_listing(listing) for listing in listings]
                )
                if new_jobs:
                    await self._log(session_id, LogEntry.info(f"Found {len(new_jobs)} new jobs"))

                for job in new_jobs:
                    if not await self._store.is_running(session_id):
                        return False
                    await self._process_listing(
                        session_id, source, job.to_listing(), profile, filter_head
                    )
        return True

    async def _process_listing(
        self,
        session_id: str,
        source: JobSource,
        listing: JobListing,
        profile: UserProfile,
        filter_head: ListingFilter | None,
    ) -> None:
        reason = filter_head.evaluate(listing) if filter_head else None
        if reason is not None:
            await self._record(
                session_id,
                listing,
                JobStatus.SKIPPED,
                LogEntry.info(f"Skipping job at excluded company: {listing.company}"),
            )
            return

        await self._log(
            session_id,
            LogEntry.info(f"Attempting to apply for {listing.title} at {listing.company}"),
        )
        try:
            outcome = await source.apply(listing, profile)
        except AdapterError as exc:
            outcome = ApplyOutcome.error(str(exc))

        where = f"{listing.title} at {listing.company}"
        if outcome.status is JobStatus.APPLIED:
            entry = LogEntry.success(f"Successfully applied to {where}")
        elif outcome.status is JobStatus.SKIPPED:
            entry = LogEntry.warning(f"Skipped {where} - {outcome.detail}")
        else:
            outcome = ApplyOutcome.error(outcome.detail)
            entry = LogEntry.error(f"Error applying to {where}: {outcome.detail}")
        await self._record(session_id, listing, outcome.status, entry)

    # ---- store helpers ----

    async def _record(
        self, session_id: str, listing: JobListing, status: JobStatus, entry: LogEntry
    ) -> None:
        """Set the job's final status, bump its counter, then log; all only once."""
        if not await self._store.update_job_status(session_id, listing.url, status):
            return
        await self._store.increment_counters(session_id, {_COUNTER_FOR[status]: 1})
        await self._log(session_id, entry)

    async def _log(self, session_id: str, entry: LogEntry) -> None:
        logger.log(_LOG_LEVELS[entry.severity], "[%s] %s", session_id, entry.message)
        await self._store.append_log(session_id, entry)

    async def _fail(self, session_id: str, message: str) -> None:
        try:
            await self._store.set_status(session_id, SessionStatus.ERROR, LogEntry.error(message))
        except StoreError:
            logger.exception("Could not record failure of session %s.", session_id)
