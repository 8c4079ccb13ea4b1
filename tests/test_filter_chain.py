"""Tests for the listing filter chain."""

from __future__ import annotations

from autoapply.evaluation.filter_chain import CompanyExclusionFilter, ListingFilter, build_filter_chain
from autoapply.models import SearchCriteria
from conftest import listing


def _criteria(*excluded: str) -> SearchCriteria:
    return SearchCriteria(job_titles=("Dev",), locations=("Remote",), exclude_companies=excluded)


def test_no_filters():
    assert build_filter_chain(_criteria()) is None


def test_blank_terms_ignored():
    assert build_filter_chain(_criteria("", "   ")) is None


def test_company_excluded_case_insensitive():
    chain = build_filter_chain(_criteria("BadCorp"))
    assert chain is not None
    assert chain.evaluate(listing("badcorp Holdings", "https://x/1")) == "excluded_company:badcorp"


def test_company_excluded_by_substring():
    chain = build_filter_chain(_criteria("corp"))
    assert chain.evaluate(listing("MegaCorp", "https://x/1")) is not None


def test_company_not_excluded():
    chain = build_filter_chain(_criteria("BadCorp"))
    assert chain.evaluate(listing("GoodCorp", "https://x/2")) is None


class _RejectAll(ListingFilter):
    def reject_reason(self, listing):
        return "rejected"


def test_successor_consulted_after_accept():
    head = CompanyExclusionFilter(["BadCorp"])
    head.then(_RejectAll())
    assert head.evaluate(listing("GoodCorp", "https://x/3")) == "rejected"
    assert head.evaluate(listing("BadCorp", "https://x/4")) == "excluded_company:badcorp"
