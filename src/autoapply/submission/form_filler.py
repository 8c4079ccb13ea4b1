"""Multi-step application form navigation shared by every job source."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from autoapply.browser.base import BrowserPage
from autoapply.models import ApplyOutcome, UserProfile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FormSelectors:
    """Candidate selectors per form control, tried in order."""

    first_name: tuple[str, ...] = ()
    last_name: tuple[str, ...] = ()
    full_name: tuple[str, ...] = ()
    email: tuple[str, ...] = ()
    phone: tuple[str, ...] = ()
    resume_input: tuple[str, ...] = ()
    next_buttons: tuple[str, ...] = ()
    submit_buttons: tuple[str, ...] = ()


async def first_present(
    browser: BrowserPage, selectors: tuple[str, ...], timeout: float = 1_500
) -> str | None:
    """Return the first selector that matches on the current page."""
    for sel in selectors:
        if await browser.exists(sel, timeout=timeout):
            return sel
    return None


async def _fill_if_empty(browser: BrowserPage, selectors: tuple[str, ...], value: str) -> bool:
    if not value or not selectors:
        return False
    sel = await first_present(browser, selectors, timeout=1_000)
    if sel is None:
        return False
    if (await browser.get_value(sel)).strip():
        return False
    await browser.fill(sel, value)
    logger.debug("Filled %s.", sel)
    return True


async def populate_contact_fields(
    browser: BrowserPage, profile: UserProfile, selectors: FormSelectors
) -> int:
    """Fill empty name/email/phone inputs visible on this step; returns how many."""
    filled = 0
    for sels, value in (
        (selectors.first_name, profile.first_name),
        (selectors.last_name, profile.last_name),
        (selectors.full_name, profile.name),
        (selectors.email, profile.email),
        (selectors.phone, profile.phone),
    ):
        if await _fill_if_empty(browser, sels, value):
            filled += 1
    return filled


async def upload_resume(
    browser: BrowserPage, profile: UserProfile, selectors: FormSelectors
) -> bool:
    """Attach the profile's resume when the step offers a file input."""
    if not profile.resume_path or not Path(profile.resume_path).is_file():
        return False
    sel = await first_present(browser, selectors.resume_input, timeout=1_000)
    if sel is None:
        return False
    await browser.upload_file(sel, profile.resume_path)
    logger.info("Uploaded resume via %s.", sel)
    return True


async def complete_application(
    browser: BrowserPage,
    profile: UserProfile,
    selectors: FormSelectors,
    *,
    max_steps: int = 10,
    simulation: bool = False,
) -> ApplyOutcome:
    """Walk an open application form to its submit button.

    Each step fills what it can, then presses submit if present, otherwise
    next. Navigation failures propagate as ``NavigationError``.
    """
    resume_uploaded = False
    for step in range(1, max_steps + 1):
        await populate_contact_fields(browser, profile, selectors)
        if not resume_uploaded:
            resume_uploaded = await upload_resume(browser, profile, selectors)

        submit = await first_present(browser, selectors.submit_buttons)
        if submit is not None:
            if simulation:
                logger.info("[Simulation] Would submit application.")
                return ApplyOutcome.skipped("simulation mode, application not submitted")
            await browser.click(submit)
            return ApplyOutcome.applied()

        next_button = await first_present(browser, selectors.next_buttons)
        if next_button is None:
            return ApplyOutcome.error(f"No next or submit button on form step {step}")
        await browser.click(next_button)

    return ApplyOutcome.error(f"Application form exceeded {max_steps} steps")
