"""Abstract definition of a job board: search for listings, apply to one."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

from autoapply.browser.base import BrowserFactory, BrowserPage
from autoapply.exceptions import AdapterError, NavigationError
from autoapply.models import ApplyOutcome, JobListing, UserProfile
from autoapply.submission.form_filler import FormSelectors, complete_application, first_present

logger = logging.getLogger(__name__)


class JobSource(ABC):
    """Interface every job board adapter implements.

    Each ``search``/``apply`` call opens its own browser through the
    factory and closes it before returning, so sources hold no page state.
    """

    name: str = "generic"
    display_name: str = "Generic"

    # subclasses fill these in
    results_selector: str = ""
    no_results_phrases: tuple[str, ...] = ()
    extract_script: str = ""
    apply_selectors: tuple[str, ...] = ()
    form: FormSelectors = FormSelectors()

    def __init__(
        self,
        browser_factory: BrowserFactory,
        *,
        max_pages: int = 1,
        max_form_steps: int = 10,
        simulation: bool = False,
    ) -> None:
        self._browser_factory = browser_factory
        self._max_pages = max(1, max_pages)
        self._max_form_steps = max_form_steps
        self._simulation = simulation

    def __repr__(self) -> str:  # pragma: no cover - trivial
        return f"{self.__class__.__name__}(name={self.name!r})"

    @abstractmethod
    def search_url(
        self, title: str, location: str, *, include_remote: bool, salary_min: float, page: int
    ) -> str:
        """Return the results URL for one page of a title/location search."""

    def normalise_url(self, url: str) -> str:
        return url.strip()

    # ---- search ----

    async def search(
        self,
        title: str,
        location: str,
        *,
        include_remote: bool = False,
        salary_min: float = 0,
    ) -> list[JobListing]:
        """Scrape up to ``max_pages`` result pages.

        An empty result is a normal outcome; only navigation or selector
        failures raise :class:`AdapterError`.
        """
        collected: list[JobListing] = []
        async with self._browser_factory() as browser:
            for page in range(self._max_pages):
                url = self.search_url(
                    title,
                    location,
                    include_remote=include_remote,
                    salary_min=salary_min,
                    page=page,
                )
                await browser.navigate(url)
                if await self._shows_no_results(browser):
                    logger.info("%s: no matching jobs for %r in %r.", self.display_name, title, location)
                    break
                if not await browser.exists(self.results_selector, timeout=10_000):
                    if page > 0:
                        break
                    raise NavigationError(f"{self.display_name} results did not load for {url}")
                page_listings = self._to_listings(await browser.evaluate(self.extract_script))
                if not page_listings:
                    break
                collected.extend(page_listings)

        seen: set[str] = set()
        unique: list[JobListing] = []
        for listing in collected:
            if listing.url not in seen:
                seen.add(listing.url)
                unique.append(listing)
        logger.info("%s: %d listing(s) for %r in %r.", self.display_name, len(unique), title, location)
        return unique

    async def _shows_no_results(self, browser: BrowserPage) -> bool:
        if not self.no_results_phrases:
            return False
        return bool(
            await browser.evaluate(
                """
                (phrases) => {
                    const body = (document.body && document.body.innerText || '').toLowerCase();
                    return phrases.some(p => body.includes(p));
                }
                """,
                list(self.no_results_phrases),
            )
        )

    def _to_listings(self, raw: Any) -> list[JobListing]:
        listings: list[JobListing] = []
        for item in raw or []:
            url = self.normalise_url(str(item.get("url") or ""))
            title = str(item.get("title") or "").strip()
            if not url or not title:
                continue
            listings.append(
                JobListing(
                    source=self.display_name,
                    title=title,
                    company=str(item.get("company") or "").strip(),
                    location=str(item.get("location") or "").strip(),
                    url=url,
                )
            )
        return listings

    # ---- apply ----

    async def apply(self, listing: JobListing, profile: UserProfile) -> ApplyOutcome:
        """Apply to *listing*; failures come back as ``ApplyOutcome.error``."""
        try:
            async with self._browser_factory() as browser:
                await browser.navigate(listing.url)
                if await browser.is_auth_redirect():
                    return ApplyOutcome.error(f"{self.display_name} redirected to a sign-in page")
                button = await first_present(browser, self.apply_selectors, timeout=3_000)
                if button is None:
                    return ApplyOutcome.skipped(f"No {self.display_name} one-click apply button")
                await browser.click(button)
                await browser.switch_to_newest_page()
                return await complete_application(
                    browser,
                    profile,
                    self.form,
                    max_steps=self._max_form_steps,
                    simulation=self._simulation,
                )
        except AdapterError as exc:
            logger.warning("%s apply failed for %s: %s", self.display_name, listing.url, exc)
            return ApplyOutcome.error(str(exc))
