"""Domain models for AutoApply."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


def utc_now() -> str:
    """ISO-8601 UTC timestamp with a fixed width, so strings sort chronologically."""
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


class SessionStatus(str, Enum):
    RUNNING = "running"
    STOPPED = "stopped"
    COMPLETED = "completed"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return self is not SessionStatus.RUNNING


class LogSeverity(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class JobStatus(str, Enum):
    FOUND = "found"
    APPLIED = "applied"
    SKIPPED = "skipped"
    ERROR = "error"


# ---- search side ----


@dataclass(frozen=True)
class SalaryRange:
    min: float = 0
    max: float = 0


@dataclass(frozen=True)
class SearchCriteria:
    """Immutable snapshot of what a session searches for."""

    job_titles: tuple[str, ...]
    locations: tuple[str, ...]
    salary_range: SalaryRange = field(default_factory=SalaryRange)
    exclude_companies: tuple[str, ...] = ()
    include_remote: bool = True


@dataclass(frozen=True)
class JobListing:
    """A listing as returned by a job board search."""

    source: str
    title: str
    company: str
    location: str
    url: str


@dataclass(frozen=True)
class UserProfile:
    """The applicant details used to fill application forms."""

    user_id: str
    name: str
    email: str
    title: str = ""
    phone: str = ""
    skills: tuple[str, ...] = ()
    experience: tuple[str, ...] = ()
    education: tuple[str, ...] = ()
    resume_path: str = ""
    created_at: str = field(default_factory=utc_now)
    updated_at: str = field(default_factory=utc_now)

    @property
    def first_name(self) -> str:
        parts = self.name.split()
        return parts[0] if parts else ""

    @property
    def last_name(self) -> str:
        return " ".join(self.name.split()[1:])

    def to_document(self) -> dict[str, Any]:
        return {
            "userId": self.user_id,
            "name": self.name,
            "email": self.email,
            "title": self.title,
            "phone": self.phone,
            "skills": list(self.skills),
            "experience": list(self.experience),
            "education": list(self.education),
            "resumePath": self.resume_path,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


@dataclass(frozen=True)
class ApplyOutcome:
    """Result of one ``apply`` call: applied, skipped(reason) or error(detail)."""

    status: JobStatus
    detail: str = ""

    @classmethod
    def applied(cls) -> "ApplyOutcome":
        return cls(JobStatus.APPLIED)

    @classmethod
    def skipped(cls, reason: str) -> "ApplyOutcome":
        return cls(JobStatus.SKIPPED, reason)

    @classmethod
    def error(cls, detail: str) -> "ApplyOutcome":
        return cls(JobStatus.ERROR, detail)


# ---- session document ----


@dataclass(frozen=True)
class LogEntry:
    message: str
    severity: LogSeverity = LogSeverity.INFO
    time: str = field(default_factory=utc_now)

    @classmethod
    def info(cls, message: str) -> "LogEntry":
        return cls(message, LogSeverity.INFO)

    @classmethod
    def success(cls, message: str) -> "LogEntry":
        return cls(message, LogSeverity.SUCCESS)

    @classmethod
    def warning(cls, message: str) -> "LogEntry":
        return cls(message, LogSeverity.WARNING)

    @classmethod
    def error(cls, message: str) -> "LogEntry":
        return cls(message, LogSeverity.ERROR)

    def to_document(self) -> dict[str, Any]:
        return {"time": self.time, "message": self.message, "type": self.severity.value}


@dataclass
class FoundJob:
    """A discovered listing embedded in a session, keyed by its URL."""

    source: str
    title: str
    company: str
    location: str
    url: str
    status: JobStatus = JobStatus.FOUND
    found_at: str = field(default_factory=utc_now)
    updated_at: str = ""

    @classmethod
    def from_listing(cls, listing: JobListing) -> "FoundJob":
        return cls(
            source=listing.source,
            title=listing.title,
            company=listing.company,
            location=listing.location,
            url=listing.url,
        )

    def to_listing(self) -> JobListing:
        return JobListing(self.source, self.title, self.company, self.location, self.url)

    def to_document(self) -> dict[str, Any]:
        doc: dict[str, Any] = {
            "source": self.source,
            "title": self.title,
            "company": self.company,
            "location": self.location,
            "url": self.url,
            "status": self.status.value,
            "foundAt": self.found_at,
        }
        if self.updated_at:
            doc["updatedAt"] = self.updated_at
        return doc


@dataclass
class AutomationSession:
    """One run of the automation workflow for one owner."""

    id: str
    user_id: str
    criteria: SearchCriteria
    status: SessionStatus = SessionStatus.RUNNING
    jobs_found: int = 0
    applications_submitted: int = 0
    applications_skipped: int = 0
    start_time: str = field(default_factory=utc_now)
    last_update_time: str = field(default_factory=utc_now)
    logs: list[LogEntry] = field(default_factory=list)
    jobs: list[FoundJob] = field(default_factory=list)

    @property
    def is_running(self) -> bool:
        return self.status is SessionStatus.RUNNING

    def to_document(self) -> dict[str, Any]:
        c = self.criteria
        return {
            "_id": self.id,
            "userId": self.user_id,
            "status": self.status.value,
            "jobTitles": list(c.job_titles),
            "locations": list(c.locations),
            "salaryRange": {"min": c.salary_range.min, "max": c.salary_range.max},
            "excludeCompanies": list(c.exclude_companies),
            "includeRemote": c.include_remote,
            "jobsFound": self.jobs_found,
            "applicationsSubmitted": self.applications_submitted,
            "applicationsSkipped": self.applications_skipped,
            "startTime": self.start_time,
            "lastUpdateTime": self.last_update_time,
            "logs": [entry.to_document() for entry in self.logs],
            "jobs": [job.to_document() for job in self.jobs],
        }


# ---- routine records ----


@dataclass
class JobApplication:
    """A manually tracked job application."""

    id: int
    user_id: str
    job_title: str
    company_name: str
    location: str = ""
    status: str = "applied"
    application_date: str = ""
    description: str = ""
    position_type: str = ""
    skills: str = ""
    requirements: str = ""
    salary: str = ""
    url: str = ""
    notes: str = ""
    created_at: str = field(default_factory=utc_now)
    updated_at: str = field(default_factory=utc_now)

    def to_document(self) -> dict[str, Any]:
        return {
            "_id": self.id,
            "user": self.user_id,
            "jobTitle": self.job_title,
            "companyName": self.company_name,
            "location": self.location,
            "status": self.status,
            "applicationDate": self.application_date,
            "description": self.description,
            "positionType": self.position_type,
            "skills": self.skills,
            "requirements": self.requirements,
            "salary": self.salary,
            "url": self.url,
            "notes": self.notes,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


MASKED_PASSWORD = "••••••••••"


@dataclass
class PortalCredential:
    """Login details for a job portal; the password is stored hashed."""

    id: int
    user_id: str
    portal_name: str
    username: str
    password_hash: str
    url: str = ""
    notes: str = ""
    created_at: str = field(default_factory=utc_now)
    updated_at: str = field(default_factory=utc_now)

    def to_document(self) -> dict[str, Any]:
        return {
            "_id": self.id,
            "userId": self.user_id,
            "portalName": self.portal_name,
            "username": self.username,
            "password": MASKED_PASSWORD,
            "url": self.url,
            "notes": self.notes,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
