"""Builds the enabled job sources from settings."""

from __future__ import annotations

from functools import partial

from autoapply.browser.base import BrowserFactory
from autoapply.browser.playwright_adapter import PlaywrightBrowser
from autoapply.exceptions import ConfigurationError
from autoapply.settings import AppSettings
from autoapply.sources.base import JobSource
from autoapply.sources.indeed import IndeedSource
from autoapply.sources.linkedin import LinkedInSource

SOURCE_TYPES: dict[str, type[JobSource]] = {
    LinkedInSource.name: LinkedInSource,
    IndeedSource.name: IndeedSource,
}


def build_sources(
    settings: AppSettings, browser_factory: BrowserFactory | None = None
) -> list[JobSource]:
    """Instantiate ``settings.sources`` in order; every source gets its own browsers."""
    if browser_factory is None:
        browser_factory = partial(
            PlaywrightBrowser,
            headless=settings.headless,
            slow_mo=settings.slow_mo,
            timeout_ms=settings.navigation_timeout_ms,
        )
    unknown = [name for name in settings.sources if name not in SOURCE_TYPES]
    if unknown:
        raise ConfigurationError(
            f"Unknown job source(s) {unknown}; choose from {sorted(SOURCE_TYPES)}."
        )
    return [
        SOURCE_TYPES[name](
            browser_factory,
            max_pages=settings.max_result_pages,
            max_form_steps=settings.max_form_steps,
            simulation=settings.simulation_mode,
        )
        for name in settings.sources
    ]
