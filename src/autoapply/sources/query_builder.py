"""Pure-function search URL builders for the supported job boards."""

from __future__ import annotations

from urllib.parse import quote, urlencode, urlsplit, urlunsplit

LINKEDIN_SEARCH = "https://www.linkedin.com/jobs/search/"
INDEED_SEARCH = "https://www.indeed.com/jobs"

LINKEDIN_PAGE_SIZE = 25
INDEED_PAGE_SIZE = 10

# ---- lookup tables ----

# (minimum yearly salary, LinkedIn f_SB2 code), ascending
_LINKEDIN_SALARY_CODES: tuple[tuple[int, str], ...] = (
    (40_000, "1"),
    (60_000, "2"),
    (80_000, "3"),
    (100_000, "4"),
    (120_000, "5"),
    (140_000, "6"),
    (160_000, "7"),
    (180_000, "8"),
    (200_000, "9"),
)

_LINKEDIN_REMOTE_CODE = "2"
_INDEED_REMOTE_FILTER = "0kf:attr(DSQF7);"


def linkedin_salary_code(salary_min: float) -> str:
    """Return the highest LinkedIn salary bracket not above *salary_min* (``""`` if none)."""
    code = ""
    for threshold, bracket in _LINKEDIN_SALARY_CODES:
        if salary_min >= threshold:
            code = bracket
    return code


def build_linkedin_search_url(
    title: str,
    location: str,
    *,
    include_remote: bool = False,
    salary_min: float = 0,
    page: int = 0,
) -> str:
    """Build a LinkedIn jobs search URL for one title/location pair."""
    params: dict[str, str] = {"keywords": title, "location": location}
    if include_remote:
        params["f_WT"] = _LINKEDIN_REMOTE_CODE
    salary_code = linkedin_salary_code(salary_min)
    if salary_code:
        params["f_SB2"] = salary_code
    params["sortBy"] = "DD"
    if page > 0:
        params["start"] = str(page * LINKEDIN_PAGE_SIZE)
    return f"{LINKEDIN_SEARCH}?{urlencode(params, quote_via=quote)}"


def build_indeed_search_url(
    title: str,
    location: str,
    *,
    include_remote: bool = False,
    salary_min: float = 0,
    page: int = 0,
) -> str:
    """Build an Indeed search URL for one title/location pair."""
    params: dict[str, str] = {"q": title, "l": location}
    if include_remote:
        params["sc"] = _INDEED_REMOTE_FILTER
    if salary_min > 0:
        params["salaryType"] = f"${int(salary_min):,}"
    params["sort"] = "date"
    if page > 0:
        params["start"] = str(page * INDEED_PAGE_SIZE)
    return f"{INDEED_SEARCH}?{urlencode(params, quote_via=quote)}"


def canonical_url(url: str, keep_query: tuple[str, ...] = ()) -> str:
    """Strip tracking parameters and fragments so one listing has one URL.

    Query keys named in *keep_query* survive (Indeed identifies jobs by ``jk``).
    """
    parts = urlsplit(url.strip())
    query = ""
    if keep_query and parts.query:
        kept = [
            pair
            for pair in parts.query.split("&")
            if pair.split("=", 1)[0] in keep_query
        ]
        query = "&".join(kept)
    path = parts.path.rstrip("/") or "/"
    return urlunsplit((parts.scheme.lower(), parts.netloc.lower(), path, query, ""))
