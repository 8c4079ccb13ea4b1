"""What a job source needs from a browser, independent of Playwright."""

from __future__ import annotations

from typing import Any, AsyncContextManager, Callable, Protocol, runtime_checkable


@runtime_checkable
class BrowserPage(Protocol):
    """The page a job source drives during one ``search`` or ``apply`` call.

    Implementations raise :class:`~autoapply.exceptions.NavigationError`
    for anything that goes wrong on the page.
    """

    async def navigate(self, url: str, wait_until: str = "domcontentloaded") -> None: ...

    async def exists(self, selector: str, *, timeout: float = 3_000) -> bool:
        """Whether *selector* shows up within *timeout* milliseconds."""
        ...

    async def fill(self, selector: str, value: str) -> None: ...

    async def click(self, selector: str, *, timeout: float = 5_000) -> None: ...

    async def get_value(self, selector: str) -> str:
        """Current value of an input; empty when it cannot be read."""
        ...

    async def upload_file(self, selector: str, path: str) -> None: ...

    async def evaluate(self, expression: str, arg: Any = None) -> Any:
        """Evaluate a JS function on the page, passing *arg* when given."""
        ...

    async def switch_to_newest_page(self) -> bool:
        """Move to a tab opened by the previous click; ``False`` if there is none."""
        ...

    async def is_auth_redirect(self) -> bool:
        """Whether the site bounced us to a sign-in or checkpoint page."""
        ...


# Each call opens a fresh page, closed when its ``async with`` block exits.
BrowserFactory = Callable[[], AsyncContextManager[BrowserPage]]
