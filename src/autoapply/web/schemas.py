"""Request bodies accepted by the HTTP API (camelCase on the wire)."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class _Body(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class SalaryRangeBody(_Body):
    min: float = 0
    max: float = 0


class StartRequest(_Body):
    job_titles: list[str] | None = Field(default=None, alias="jobTitles")
    locations: list[str] | None = None
    salary_range: SalaryRangeBody = Field(default_factory=SalaryRangeBody, alias="salaryRange")
    exclude_companies: list[str] | None = Field(default=None, alias="excludeCompanies")
    include_remote: bool = Field(default=True, alias="includeRemote")


class ProfileRequest(_Body):
    name: str = ""
    email: str = ""
    title: str = ""
    phone: str = ""
    skills: list[str] | str = Field(default_factory=list)
    experience: list[str] | str = Field(default_factory=list)
    education: list[str] | str = Field(default_factory=list)
    resume_path: str = Field(default="", alias="resumePath")


class JobApplicationRequest(_Body):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    job_title: str | None = Field(default=None, alias="jobTitle")
    company_name: str | None = Field(default=None, alias="companyName")
    location: str | None = None
    status: str | None = None
    application_date: str | None = Field(default=None, alias="applicationDate")
    description: str | None = None
    position_type: str | None = Field(default=None, alias="positionType")
    skills: list[str] | str | None = None
    requirements: str | None = None
    salary: str | None = None
    url: str | None = None
    notes: str | None = None


class CredentialRequest(_Body):
    portal_name: str = Field(default="", alias="portalName")
    username: str = ""
    password: str = ""
    url: str = ""
    notes: str = ""


class SettingsRequest(_Body):
    dark_mode: bool = Field(default=False, alias="darkMode")
    email_notifications: bool = Field(default=True, alias="emailNotifications")
    auto_apply_preferences: dict[str, Any] | None = Field(default=None, alias="autoApplyPreferences")
