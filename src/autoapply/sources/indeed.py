"""Indeed: search result pages and the Indeed Apply flow."""

from __future__ import annotations

from urllib.parse import parse_qs, urlsplit

from autoapply.sources.base import JobSource
from autoapply.sources.query_builder import build_indeed_search_url, canonical_url
from autoapply.submission.form_filler import FormSelectors

_VIEW_JOB = "https://www.indeed.com/viewjob?jk={jk}"

_EXTRACT_CARDS = """
() => {
    const listings = [];
    for (const card of document.querySelectorAll('.job_seen_beacon')) {
        const link = card.querySelector('h2.jobTitle a, .jobTitle a');
        const company = card.querySelector('[data-testid="company-name"], .companyName');
        const location = card.querySelector('[data-testid="text-location"], .companyLocation');
        if (!link) continue;
        listings.push({
            title: link.textContent.trim(),
            company: company ? company.textContent.trim() : '',
            location: location ? location.textContent.trim() : '',
            url: link.href,
        });
    }
    return listings;
}
"""


class IndeedSource(JobSource):
    name = "indeed"
    display_name = "Indeed"

    results_selector = "#mosaic-provider-jobcards, .jobsearch-ResultsList"
    no_results_phrases = ("did not match any jobs", "no jobs found")
    extract_script = _EXTRACT_CARDS
    apply_selectors = (
        "button#indeedApplyButton",
        "button:has-text('Apply now')",
    )
    form = FormSelectors(
        first_name=("input[name='firstName']",),
        last_name=("input[name='lastName']",),
        full_name=("input[name='fullName']", "input[id*='name']"),
        email=("input[name='email']", "input[type='email']"),
        phone=("input[name='phoneNumber']", "input[type='tel']"),
        resume_input=("input[type='file']",),
        next_buttons=(
            "button:has-text('Continue')",
            "button:has-text('Review your application')",
        ),
        submit_buttons=("button:has-text('Submit your application')",),
    )

    def search_url(
        self, title: str, location: str, *, include_remote: bool, salary_min: float, page: int
    ) -> str:
        return build_indeed_search_url(
            title, location, include_remote=include_remote, salary_min=salary_min, page=page
        )

    def normalise_url(self, url: str) -> str:
        """Collapse tracking links (``/rc/clk?jk=...``) to the ``viewjob`` page."""
        if not url:
            return ""
        jk = parse_qs(urlsplit(url).query).get("jk")
        if jk:
            return _VIEW_JOB.format(jk=jk[0])
        return canonical_url(url)
