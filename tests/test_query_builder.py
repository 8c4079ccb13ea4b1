"""Tests for URL generation."""

from __future__ import annotations

from urllib.parse import parse_qs, urlparse

from autoapply.sources.query_builder import (
    build_indeed_search_url,
    build_linkedin_search_url,
    canonical_url,
    linkedin_salary_code,
)


def _parse(url: str) -> dict[str, list[str]]:
    return parse_qs(urlparse(url).query)


def test_linkedin_basic_url():
    url = build_linkedin_search_url("Backend Engineer", "Remote")
    assert url.startswith("https://www.linkedin.com/jobs/search/?")
    params = _parse(url)
    assert params["keywords"] == ["Backend Engineer"]
    assert params["location"] == ["Remote"]
    assert params["sortBy"] == ["DD"]
    assert "f_WT" not in params
    assert "start" not in params


def test_linkedin_remote_salary_and_paging():
    params = _parse(
        build_linkedin_search_url("Dev", "Berlin", include_remote=True, salary_min=95_000, page=2)
    )
    assert params["f_WT"] == ["2"]
    assert params["f_SB2"] == ["3"]
    assert params["start"] == ["50"]


def test_linkedin_salary_brackets():
    assert linkedin_salary_code(0) == ""
    assert linkedin_salary_code(39_999) == ""
    assert linkedin_salary_code(40_000) == "1"
    assert linkedin_salary_code(250_000) == "9"


def test_indeed_url():
    params = _parse(
        build_indeed_search_url("Data Analyst", "Austin, TX", include_remote=True, salary_min=70_000, page=1)
    )
    assert params["q"] == ["Data Analyst"]
    assert params["l"] == ["Austin, TX"]
    assert params["sc"] == ["0kf:attr(DSQF7);"]
    assert params["salaryType"] == ["$70,000"]
    assert params["sort"] == ["date"]
    assert params["start"] == ["10"]


def test_indeed_url_without_optional_filters():
    params = _parse(build_indeed_search_url("Dev", "NYC"))
    assert "sc" not in params
    assert "salaryType" not in params


def test_canonical_url_strips_tracking():
    url = "HTTPS://www.LinkedIn.com/jobs/view/123/?refId=abc&trk=public#top"
    assert canonical_url(url) == "https://www.linkedin.com/jobs/view/123"


def test_canonical_url_keeps_named_query_keys():
    url = "https://www.indeed.com/viewjob?jk=abc&from=serp"
    assert canonical_url(url, keep_query=("jk",)) == "https://www.indeed.com/viewjob?jk=abc"


def test_fractional_salary_minimum():
    params = _parse(build_indeed_search_url("Dev", "NYC", salary_min=50_000.5))
    assert params["salaryType"] == ["$50,000"]
    assert linkedin_salary_code(59_999.99) == "1"
