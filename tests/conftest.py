"""Shared test fixtures."""

from __future__ import annotations

import asyncio
from typing import Any, Callable

import pytest

from autoapply.exceptions import NavigationError
from autoapply.models import ApplyOutcome, JobListing, UserProfile
from autoapply.sources.base import JobSource
from autoapply.storage.database import Database
from autoapply.storage.profiles import ProfileStore
from autoapply.storage.sessions import SessionStore


@pytest.fixture()
def tmp_settings_yaml(tmp_path):
    """Write a minimal settings.yaml and return its path."""
    content = """\
database_path: "{db}"
headless: false
sources:
  - " LinkedIn "
  - indeed
max_result_pages: 2
simulation_mode: true
log_level: debug
job_titles:
  - "Backend Engineer"
locations:
  - "Remote"
exclude_companies:
  - "BadCorp"
salary_min: 90000
""".format(db=str(tmp_path / ".state" / "test.db"))
    p = tmp_path / "settings.yaml"
    p.write_text(content)
    return p


@pytest.fixture()
def db():
    database = Database(":memory:")
    yield database
    database.close()


@pytest.fixture()
def store(db):
    return SessionStore(db)


@pytest.fixture()
def profiles(db):
    return ProfileStore(db)


def make_profile(user_id: str = "user-1", **overrides: Any) -> UserProfile:
    fields: dict[str, Any] = {
        "user_id": user_id,
        "name": "Ada Lovelace",
        "email": "ada@example.com",
        "phone": "555-0100",
    }
    fields.update(overrides)
    return UserProfile(**fields)


def listing(company: str, url: str, source: str = "Stub", title: str = "Backend Engineer") -> JobListing:
    return JobListing(source=source, title=title, company=company, location="Remote", url=url)


def _no_browser():
    raise AssertionError("stub sources never open a browser")


class StubSource(JobSource):
    """Scripted job source that records every call it receives."""

    name = "stub"
    display_name = "Stub"

    def __init__(
        self,
        display_name: str = "Stub",
        results: dict[tuple[str, str], Any] | None = None,
        outcomes: dict[str, Any] | None = None,
        on_call: Callable[[str], Any] | None = None,
    ) -> None:
        super().__init__(_no_browser)
        self.display_name = display_name
        self.results = results or {}
        self.outcomes = outcomes or {}
        self.on_call = on_call
        self.calls: list[tuple[str, str]] = []

    def search_url(self, title, location, *, include_remote, salary_min, page):
        return "about:blank"

    async def _record(self, kind: str, target: str) -> None:
        self.calls.append((kind, target))
        if self.on_call is not None:
            await self.on_call(kind)

    async def search(self, title, location, *, include_remote=False, salary_min=0):
        await self._record("search", f"{title}|{location}")
        result = self.results.get((title, location), [])
        if isinstance(result, Exception):
            raise result
        return list(result)

    async def apply(self, listing, profile):
        await self._record("apply", listing.url)
        outcome = self.outcomes.get(listing.url, ApplyOutcome.applied())
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class FakeBrowser:
    """In-memory stand-in for :class:`PlaywrightBrowser`.

    *present* is the set of selectors that currently exist on the page;
    *on_click* maps a selector to a callback that mutates the fake page.
    """

    def __init__(
        self,
        present: set[str] | None = None,
        pages: list[list[dict[str, str]]] | None = None,
        no_results: bool = False,
        auth_redirect: bool = False,
        fail_navigation: bool = False,
        on_click: dict[str, Callable[["FakeBrowser"], None]] | None = None,
    ) -> None:
        self.present = set(present or ())
        self.pages = list(pages or [])
        self.no_results = no_results
        self.auth_redirect = auth_redirect
        self.fail_navigation = fail_navigation
        self.on_click = on_click or {}
        self.visited: list[str] = []
        self.clicked: list[str] = []
        self.values: dict[str, str] = {}
        self.uploaded: list[tuple[str, str]] = []
        self.open_count = 0
        self.closed_count = 0

    async def __aenter__(self) -> "FakeBrowser":
        self.open_count += 1
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.closed_count += 1

    async def navigate(self, url: str, wait_until: str = "domcontentloaded") -> None:
        if self.fail_navigation:
            raise NavigationError(f"Failed to load {url}: net::ERR_CONNECTION_RESET")
        self.visited.append(url)

    async def exists(self, selector: str, *, timeout: float = 3_000) -> bool:
        return selector in self.present

    async def fill(self, selector: str, value: str) -> None:
        self.values[selector] = value

    async def click(self, selector: str, *, timeout: float = 5_000) -> None:
        self.clicked.append(selector)
        effect = self.on_click.get(selector)
        if effect is not None:
            effect(self)

    async def get_value(self, selector: str) -> str:
        return self.values.get(selector, "")

    async def upload_file(self, selector: str, path: str) -> None:
        self.uploaded.append((selector, path))

    async def evaluate(self, expression: str, arg: Any = None) -> Any:
        if arg is not None:
            return self.no_results
        return self.pages.pop(0) if self.pages else []

    async def switch_to_newest_page(self) -> bool:
        return False

    async def is_auth_redirect(self) -> bool:
        return self.auth_redirect


def run(coro):
    return asyncio.run(coro)
