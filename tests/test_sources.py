"""Tests for the job source adapters against a fake browser."""

from __future__ import annotations

import pytest

from autoapply.browser.base import BrowserPage
from autoapply.exceptions import NavigationError
from autoapply.models import JobStatus
from autoapply.sources.indeed import IndeedSource
from autoapply.sources.linkedin import LinkedInSource
from conftest import FakeBrowser, listing, make_profile, run

_LI_RESULTS = LinkedInSource.results_selector
_LI_APPLY = "button.jobs-apply-button"
_LI_EMAIL = "input[id*='email']"
_LI_NEXT = "button[aria-label='Continue to next step']"
_LI_SUBMIT = "button[aria-label='Submit application']"


def _card(n: int, suffix: str = "") -> dict[str, str]:
    return {
        "title": f"Engineer {n}",
        "company": "Acme",
        "location": "Remote",
        "url": f"https://www.linkedin.com/jobs/view/{n}/{suffix}",
    }


def _linkedin(browser: FakeBrowser, **kwargs) -> LinkedInSource:
    return LinkedInSource(lambda: browser, **kwargs)


def test_search_paginates_and_deduplicates():
    browser = FakeBrowser(
        present={_LI_RESULTS},
        pages=[[_card(1, "?trk=a"), _card(2)], [_card(1, "?trk=b"), _card(3)]],
    )
    results = run(_linkedin(browser, max_pages=2).search("Dev", "Remote", include_remote=True))

    assert [r.url for r in results] == [
        "https://www.linkedin.com/jobs/view/1",
        "https://www.linkedin.com/jobs/view/2",
        "https://www.linkedin.com/jobs/view/3",
    ]
    assert all(r.source == "LinkedIn" for r in results)
    assert "start=25" in browser.visited[1]
    assert browser.open_count == browser.closed_count == 1


def test_search_no_results_is_empty():
    browser = FakeBrowser(no_results=True)
    assert run(_linkedin(browser).search("Underwater Basket Weaver", "Mars")) == []


def test_search_missing_results_list_raises():
    browser = FakeBrowser()
    with pytest.raises(NavigationError):
        run(_linkedin(browser).search("Dev", "Remote"))
    assert browser.closed_count == 1


def test_search_skips_cards_without_title_or_url():
    browser = FakeBrowser(
        present={_LI_RESULTS},
        pages=[[_card(1), {"title": "", "url": "https://x/2"}, {"title": "No link", "url": ""}]],
    )
    results = run(_linkedin(browser).search("Dev", "Remote"))
    assert [r.title for r in results] == ["Engineer 1"]


def test_apply_without_easy_apply_is_skipped():
    browser = FakeBrowser()
    outcome = run(_linkedin(browser).apply(listing("Acme", "https://li/1"), make_profile()))
    assert outcome.status is JobStatus.SKIPPED
    assert outcome.detail == "No LinkedIn one-click apply button"


def test_apply_auth_redirect_is_error():
    browser = FakeBrowser(auth_redirect=True, present={_LI_APPLY})
    outcome = run(_linkedin(browser).apply(listing("Acme", "https://li/1"), make_profile()))
    assert outcome.status is JobStatus.ERROR
    assert "sign-in" in outcome.detail


def test_apply_navigation_failure_is_error():
    browser = FakeBrowser(fail_navigation=True)
    outcome = run(_linkedin(browser).apply(listing("Acme", "https://li/1"), make_profile()))
    assert outcome.status is JobStatus.ERROR
    assert "ERR_CONNECTION_RESET" in outcome.detail
    assert browser.closed_count == 1


def test_apply_single_step_submits():
    browser = FakeBrowser(present={_LI_APPLY, _LI_EMAIL, _LI_SUBMIT})
    outcome = run(_linkedin(browser).apply(listing("Acme", "https://li/1"), make_profile()))
    assert outcome.status is JobStatus.APPLIED
    assert browser.values[_LI_EMAIL] == "ada@example.com"
    assert browser.clicked == [_LI_APPLY, _LI_SUBMIT]


def test_apply_multi_step_with_resume(tmp_path):
    resume = tmp_path / "resume.pdf"
    resume.write_bytes(b"%PDF-1.4")

    def reveal_submit(page: FakeBrowser) -> None:
        page.present.discard(_LI_NEXT)
        page.present.add(_LI_SUBMIT)

    browser = FakeBrowser(
        present={_LI_APPLY, _LI_NEXT, "input[type='file']"},
        on_click={_LI_NEXT: reveal_submit},
    )
    profile = make_profile(resume_path=str(resume))
    outcome = run(_linkedin(browser).apply(listing("Acme", "https://li/1"), profile))

    assert outcome.status is JobStatus.APPLIED
    assert browser.clicked == [_LI_APPLY, _LI_NEXT, _LI_SUBMIT]
    assert browser.uploaded == [("input[type='file']", str(resume))]


def test_apply_simulation_never_submits():
    browser = FakeBrowser(present={_LI_APPLY, _LI_SUBMIT})
    source = _linkedin(browser, simulation=True)
    outcome = run(source.apply(listing("Acme", "https://li/1"), make_profile()))
    assert outcome.status is JobStatus.SKIPPED
    assert _LI_SUBMIT not in browser.clicked


def test_apply_form_without_buttons_is_error():
    browser = FakeBrowser(present={_LI_APPLY})
    outcome = run(_linkedin(browser).apply(listing("Acme", "https://li/1"), make_profile()))
    assert outcome.status is JobStatus.ERROR
    assert "step 1" in outcome.detail


def test_apply_form_step_limit():
    browser = FakeBrowser(present={_LI_APPLY, _LI_NEXT})
    outcome = run(_linkedin(browser, max_form_steps=3).apply(listing("Acme", "https://li/1"), make_profile()))
    assert outcome.status is JobStatus.ERROR
    assert browser.clicked.count(_LI_NEXT) == 3


def test_indeed_tracking_links_collapse_to_viewjob():
    source = IndeedSource(FakeBrowser)
    assert (
        source.normalise_url("https://www.indeed.com/rc/clk?jk=abc123&from=serp")
        == "https://www.indeed.com/viewjob?jk=abc123"
    )
    assert source.normalise_url("https://www.indeed.com/company/acme/jobs/dev-1#x") == (
        "https://www.indeed.com/company/acme/jobs/dev-1"
    )


def test_indeed_search_url_includes_salary():
    url = IndeedSource(FakeBrowser).search_url("Dev", "Remote", include_remote=False, salary_min=50_000, page=0)
    assert "salaryType=%2450%2C000" in url


def test_fake_browser_matches_page_protocol():
    assert isinstance(FakeBrowser(), BrowserPage)
