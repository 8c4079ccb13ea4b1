"""LinkedIn jobs: public search pages and the Easy Apply flow."""

from __future__ import annotations

from autoapply.sources.base import JobSource
from autoapply.sources.query_builder import build_linkedin_search_url, canonical_url
from autoapply.submission.form_filler import FormSelectors

_EXTRACT_CARDS = """
() => {
    const listings = [];
    const cards = document.querySelectorAll('.job-card-container, .base-card, li[data-occludable-job-id]');
    for (const card of cards) {
        const title = card.querySelector('.job-card-list__title, .base-search-card__title');
        const company = card.querySelector('.job-card-container__company-name, .base-search-card__subtitle');
        const location = card.querySelector('.job-card-container__metadata-item, .job-search-card__location');
        const link = card.querySelector('a.job-card-list__title, a.base-card__full-link, a[href*="/jobs/view/"]');
        if (!title || !link) continue;
        listings.push({
            title: title.textContent.trim(),
            company: company ? company.textContent.trim() : '',
            location: location ? location.textContent.trim() : '',
            url: link.href,
        });
    }
    return listings;
}
"""


class LinkedInSource(JobSource):
    name = "linkedin"
    display_name = "LinkedIn"

    results_selector = ".jobs-search__results-list, .jobs-search-results-list, ul.scaffold-layout__list-container"
    no_results_phrases = ("no matching jobs found", "we couldn't find a match", "no results found")
    extract_script = _EXTRACT_CARDS
    apply_selectors = (
        "button.jobs-apply-button",
        "button:has-text('Easy Apply')",
    )
    form = FormSelectors(
        first_name=("input[id*='first-name']", "input[name*='firstName']"),
        last_name=("input[id*='last-name']", "input[name*='lastName']"),
        email=("input[id*='email']", "input[type='email']"),
        phone=("input[id*='phoneNumber']", "input[type='tel']"),
        resume_input=("input[type='file']",),
        next_buttons=(
            "button[aria-label='Continue to next step']",
            "button[aria-label='Review your application']",
        ),
        submit_buttons=("button[aria-label='Submit application']",),
    )

    def search_url(
        self, title: str, location: str, *, include_remote: bool, salary_min: float, page: int
    ) -> str:
        return build_linkedin_search_url(
            title, location, include_remote=include_remote, salary_min=salary_min, page=page
        )

    def normalise_url(self, url: str) -> str:
        return canonical_url(url) if url else ""
