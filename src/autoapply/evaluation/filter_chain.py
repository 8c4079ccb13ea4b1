"""Listing filters applied before an apply attempt, linked as a chain."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Iterable

from autoapply.models import JobListing, SearchCriteria

logger = logging.getLogger(__name__)


class ListingFilter(ABC):
    """One link of the chain; the first link that objects decides."""

    def __init__(self) -> None:
        self._successor: ListingFilter | None = None

    def then(self, successor: ListingFilter) -> ListingFilter:
        """Attach *successor* and return it, so links can be chained fluently."""
        self._successor = successor
        return successor

    def evaluate(self, listing: JobListing) -> str | None:
        """Return why *listing* must not be applied to, or ``None`` when every link accepts it."""
        link: ListingFilter | None = self
        while link is not None:
            reason = link.reject_reason(listing)
            if reason is not None:
                return reason
            link = link._successor
        return None

    @abstractmethod
    def reject_reason(self, listing: JobListing) -> str | None:
        ...


class CompanyExclusionFilter(ListingFilter):
    """Case-insensitive substring match of the company name against excluded terms."""

    def __init__(self, excluded: Iterable[str]) -> None:
        super().__init__()
        self.terms = tuple(t.strip().lower() for t in excluded if t and t.strip())

    def reject_reason(self, listing: JobListing) -> str | None:
        company = listing.company.lower()
        matched = next((t for t in self.terms if t in company), None)
        if matched is None:
            return None
        logger.debug("%s excluded by term %r.", listing.company, matched)
        return f"excluded_company:{matched}"


def build_filter_chain(criteria: SearchCriteria) -> ListingFilter | None:
    """Head of the chain for *criteria*, or ``None`` when nothing would be rejected."""
    links: list[ListingFilter] = []
    exclusion = CompanyExclusionFilter(criteria.exclude_companies)
    if exclusion.terms:
        links.append(exclusion)
    if not links:
        return None
    for current, following in zip(links, links[1:]):
        current.then(following)
    return links[0]
