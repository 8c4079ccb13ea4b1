"""Playwright-backed implementation of BrowserPage."""

from __future__ import annotations

import logging
from typing import Any

from playwright.async_api import Browser, BrowserContext, Page, async_playwright
from playwright.async_api import Error as PlaywrightError

from autoapply.exceptions import BrowserLaunchError, NavigationError

logger = logging.getLogger(__name__)

_AUTH_REDIRECT_FRAGMENTS: frozenset[str] = frozenset(
    {"/login", "/checkpoint", "/authwall", "/uas/login", "/account/login", "secure.indeed.com"}
)

# Masks the most common automation fingerprints before any page script runs.
_FINGERPRINT_PATCH = """
    Object.defineProperty(navigator, 'webdriver', { get: () => undefined });
    Object.defineProperty(navigator, 'languages', { get: () => ['en-US', 'en'] });
    Object.defineProperty(navigator, 'plugins', { get: () => [1, 2, 3] });
    window.chrome = { runtime: {} };
"""


class PlaywrightBrowser:
    """Chromium session owned by exactly one ``async with`` block.

    The browser is launched on entry and closed on every exit path, so no
    two job-source calls ever share a page.
    """

    def __init__(
        self,
        headless: bool = True,
        slow_mo: int = 50,
        timeout_ms: int = 30_000,
    ) -> None:
        self._headless = headless
        self._slow_mo = slow_mo
        self._timeout_ms = timeout_ms
        self._pw: Any = None
        self._browser: Browser | None = None
        self._context: BrowserContext | None = None
        self._page: Page | None = None

    @property
    def page(self) -> Page:
        assert self._page is not None, "Browser not launched; use 'async with'."
        return self._page

    # --- lifecycle ---

    async def __aenter__(self) -> "PlaywrightBrowser":
        try:
            self._pw = await async_playwright().start()
            self._browser = await self._pw.chromium.launch(
                headless=self._headless,
                slow_mo=self._slow_mo,
                args=[
                    "--disable-blink-features=AutomationControlled",
                    "--no-sandbox",
                    "--disable-dev-shm-usage",
                ],
            )
            self._context = await self._browser.new_context(
                viewport={"width": 1280, "height": 900},
                locale="en-US",
                user_agent=(
                    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
                    "AppleWebKit/537.36 (KHTML, like Gecko) "
                    "Chrome/120.0.0.0 Safari/537.36"
                ),
            )
            self._context.set_default_timeout(self._timeout_ms)
            await self._context.add_init_script(_FINGERPRINT_PATCH)
            self._page = await self._context.new_page()
        except Exception as exc:
            await self.close()
            raise BrowserLaunchError(f"Failed to start Playwright Chromium: {exc}") from exc
        logger.debug("Browser launched (headless=%s).", self._headless)
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def close(self) -> None:
        try:
            if self._context:
                await self._context.close()
            if self._browser:
                await self._browser.close()
        except PlaywrightError as exc:
            logger.warning("Error while closing browser: %s", exc)
        finally:
            if self._pw:
                await self._pw.stop()
            self._pw = self._browser = self._context = self._page = None
        logger.debug("Browser closed.")

    # --- navigation ---

    async def navigate(self, url: str, wait_until: str = "domcontentloaded") -> None:
        try:
            await self.page.goto(url, wait_until=wait_until)
        except PlaywrightError as exc:
            raise NavigationError(f"Failed to load {url}: {exc}") from exc

    async def switch_to_newest_page(self) -> bool:
        if self._context is None:
            return False
        pages = [p for p in self._context.pages if not p.is_closed()]
        if len(pages) <= 1 or pages[-1] is self._page:
            return False
        self._page = pages[-1]
        try:
            await self._page.wait_for_load_state("domcontentloaded")
        except PlaywrightError as exc:
            raise NavigationError(f"New tab did not load: {exc}") from exc
        return True

    # --- querying ---

    async def exists(self, selector: str, *, timeout: float = 3_000) -> bool:
        try:
            handle = await self.page.wait_for_selector(selector, timeout=timeout)
        except PlaywrightError:
            return False
        return handle is not None

    async def get_value(self, selector: str) -> str:
        try:
            return await self.page.input_value(selector, timeout=2_000)
        except PlaywrightError:
            return ""

    # --- interaction ---

    async def fill(self, selector: str, value: str) -> None:
        try:
            await self.page.fill(selector, value)
        except PlaywrightError as exc:
            raise NavigationError(f"Could not fill {selector}: {exc}") from exc

    async def click(self, selector: str, *, timeout: float = 5_000) -> None:
        try:
            await self.page.click(selector, timeout=timeout)
        except PlaywrightError as exc:
            raise NavigationError(f"Could not click {selector}: {exc}") from exc

    async def upload_file(self, selector: str, path: str) -> None:
        try:
            await self.page.set_input_files(selector, path)
        except PlaywrightError as exc:
            raise NavigationError(f"Could not upload {path}: {exc}") from exc

    async def evaluate(self, expression: str, arg: Any = None) -> Any:
        try:
            if arg is not None:
                return await self.page.evaluate(expression, arg)
            return await self.page.evaluate(expression)
        except PlaywrightError as exc:
            raise NavigationError(f"Page script failed: {exc}") from exc

    # --- state ---

    async def is_auth_redirect(self) -> bool:
        current = self.page.url.lower()
        return any(frag in current for frag in _AUTH_REDIRECT_FRAGMENTS)
