"""Tests for the SQLite session store."""

from __future__ import annotations

import pytest

from autoapply.models import (
    AutomationSession,
    FoundJob,
    JobStatus,
    LogEntry,
    SearchCriteria,
    SessionStatus,
)
from conftest import listing, run


def _session(session_id: str = "s1", owner: str = "user-1", start: str = "2024-01-01T00:00:00.000000+00:00"):
    return AutomationSession(
        id=session_id,
        user_id=owner,
        criteria=SearchCriteria(job_titles=("Dev",), locations=("Remote",)),
        start_time=start,
        last_update_time=start,
        logs=[LogEntry.info("Auto-apply session started")],
    )


def _jobs(*urls: str) -> list[FoundJob]:
    return [FoundJob.from_listing(listing("Acme", url)) for url in urls]


def test_create_and_get_roundtrip(store):
    run(store.create(_session()))
    loaded = run(store.get("s1", "user-1"))
    assert loaded is not None
    assert loaded.status is SessionStatus.RUNNING
    assert loaded.criteria.job_titles == ("Dev",)
    doc = loaded.to_document()
    assert doc["_id"] == "s1"
    assert doc["logs"][0]["message"] == "Auto-apply session started"
    assert doc["jobsFound"] == 0


def test_get_is_owner_scoped(store):
    run(store.create(_session()))
    assert run(store.get("s1", "someone-else")) is None
    assert run(store.get_by_id("s1")) is not None


def test_list_newest_first(store):
    run(store.create(_session("old", start="2024-01-01T00:00:00.000000+00:00")))
    run(store.create(_session("new", start="2024-02-01T00:00:00.000000+00:00")))
    run(store.create(_session("other", owner="user-2")))
    assert [s.id for s in run(store.list_by_owner("user-1"))] == ["new", "old"]


def test_append_jobs_deduplicates(store):
    run(store.create(_session()))
    first = run(store.append_jobs("s1", _jobs("https://x/1", "https://x/2")))
    second = run(store.append_jobs("s1", _jobs("https://x/2", "https://x/3", "https://x/3")))
    assert [j.url for j in first] == ["https://x/1", "https://x/2"]
    assert [j.url for j in second] == ["https://x/3"]

    session = run(store.get_by_id("s1"))
    assert session.jobs_found == 3
    assert [j.url for j in session.jobs] == ["https://x/1", "https://x/2", "https://x/3"]


def test_job_status_transitions_once(store):
    run(store.create(_session()))
    run(store.append_jobs("s1", _jobs("https://x/1")))
    assert run(store.update_job_status("s1", "https://x/1", JobStatus.APPLIED)) is True
    assert run(store.update_job_status("s1", "https://x/1", JobStatus.ERROR)) is False
    job = run(store.get_by_id("s1")).jobs[0]
    assert job.status is JobStatus.APPLIED
    assert job.updated_at


def test_increment_counters(store):
    run(store.create(_session()))
    assert run(store.increment_counters("s1", {"applications_submitted": 2, "applications_skipped": 1}))
    session = run(store.get_by_id("s1"))
    assert (session.applications_submitted, session.applications_skipped) == (2, 1)


def test_increment_rejects_unknown_or_negative(store):
    run(store.create(_session()))
    with pytest.raises(ValueError):
        run(store.increment_counters("s1", {"status": 1}))
    with pytest.raises(ValueError):
        run(store.increment_counters("s1", {"jobs_found": -1}))


def test_set_status_only_from_running(store):
    run(store.create(_session()))
    assert run(store.set_status("s1", SessionStatus.STOPPED, LogEntry.info("stopped"))) is True
    assert run(store.set_status("s1", SessionStatus.COMPLETED, LogEntry.info("done"))) is False
    session = run(store.get_by_id("s1"))
    assert session.status is SessionStatus.STOPPED
    assert [e.message for e in session.logs] == ["Auto-apply session started", "stopped"]


def test_set_status_respects_owner(store):
    run(store.create(_session()))
    assert run(store.set_status("s1", SessionStatus.STOPPED, owner_id="intruder")) is False
    assert run(store.is_running("s1")) is True


def test_terminal_session_rejects_background_writes(store):
    run(store.create(_session()))
    run(store.append_jobs("s1", _jobs("https://x/1")))
    run(store.set_status("s1", SessionStatus.ERROR))
    before = run(store.get_by_id("s1"))

    assert run(store.append_log("s1", LogEntry.info("late"))) is False
    assert run(store.append_jobs("s1", _jobs("https://x/9"))) == []
    assert run(store.update_job_status("s1", "https://x/1", JobStatus.APPLIED)) is False
    assert run(store.increment_counters("s1", {"applications_submitted": 1})) is False

    after = run(store.get_by_id("s1"))
    assert after.to_document() == before.to_document()


def test_is_running_unknown_session(store):
    assert run(store.is_running("missing")) is False
