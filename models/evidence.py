"""Query, search-result and price models for the evidence pipeline."""

from __future__ import annotations

import datetime as dt
import logging
from datetime import date
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

EvidenceCategory = Literal["recent", "weekly", "monthly", "earnings"]

CATEGORIES: tuple[EvidenceCategory, ...] = ("recent", "weekly", "monthly", "earnings")

MAX_QUERIES_PER_WINDOW = 5
MAX_EARNINGS_QUERIES = 3


def _bounded(values: list[str], limit: int) -> list[str]:
    cleaned = [v.strip() for v in values if isinstance(v, str) and v.strip()]
    return cleaned[:limit]


class QuerySet(BaseModel):
    """Categorised search queries for one (ticker, as-of date) pair.

    Lists longer than their bound are truncated rather than rejected.
    """

    model_config = ConfigDict(frozen=True)

    recent: list[str] = Field(
        default_factory=list,
        description=(
            "At most 5 queries about the last 24-48 hours: earnings releases, "
            "rating changes, M&A, breaking company news."
        ),
    )
    weekly: list[str] = Field(
        default_factory=list,
        description=(
            "At most 5 queries about the last 7 days: developing stories, "
            "competitor and sector news."
        ),
    )
    monthly: list[str] = Field(
        default_factory=list,
        description=(
            "At most 5 queries about the last 30 days: regulatory changes, "
            "product launches, sentiment shifts."
        ),
    )
    earnings: list[str] = Field(
        default_factory=list,
        description=(
            "At most 3 queries about the latest earnings call: guidance, "
            "management commentary, reported figures."
        ),
    )

    @field_validator("recent", "weekly", "monthly")
    @classmethod
    def _cap_window(cls, value: list[str]) -> list[str]:
        return _bounded(value, MAX_QUERIES_PER_WINDOW)

    @field_validator("earnings")
    @classmethod
    def _cap_earnings(cls, value: list[str]) -> list[str]:
        return _bounded(value, MAX_EARNINGS_QUERIES)

    def for_category(self, category: EvidenceCategory) -> list[str]:
        return list(getattr(self, category))


class SearchResultItem(BaseModel):
    """One search hit. Unknown provider fields are preserved."""

    model_config = ConfigDict(extra="allow")

    title: str = ""
    url: str | None = None
    content: str = ""
    score: float = 0.0
    published_date: str | None = None
    source: str | None = None

    @field_validator("title", "content", "score", mode="before")
    @classmethod
    def _null_to_default(cls, value, info):
        if value is None:
            return cls.model_fields[info.field_name].default
        return value


class ImageItem(BaseModel):
    model_config = ConfigDict(extra="allow")

    url: str = ""
    title: str | None = None
    source: str | None = None
    description: str | None = None


class SearchResponse(BaseModel):
    """A provider response after dedup and date filtering."""

    model_config = ConfigDict(extra="allow")

    results: list[SearchResultItem] = Field(default_factory=list)
    images: list[ImageItem] | None = None

    @field_validator("results", mode="before")
    @classmethod
    def _drop_invalid_results(cls, value):
        # Malformed hits are dropped one by one; the rest of the response stands.
        if not isinstance(value, list):
            return value
        kept = []
        for item in value:
            try:
                kept.append(SearchResultItem.model_validate(item))
            except ValidationError as exc:
                logger.debug("Dropping malformed search result: %s", exc.errors()[:1])
        return kept

    @field_validator("images", mode="before")
    @classmethod
    def _coerce_image_strings(cls, value):
        # Tavily returns bare URL strings unless image descriptions are requested.
        if isinstance(value, list):
            return [{"url": v} if isinstance(v, str) else v for v in value]
        return value


class QueryOutcome(BaseModel):
    """Result slot for one query. Failed queries carry ``response=None``."""

    query: str
    response: SearchResponse | None = None
    succeeded: bool


class EvidenceBundle(BaseModel):
    """Per-category query outcomes collected for one as-of date."""

    recent: list[QueryOutcome] = Field(default_factory=list)
    weekly: list[QueryOutcome] = Field(default_factory=list)
    monthly: list[QueryOutcome] = Field(default_factory=list)
    earnings: list[QueryOutcome] = Field(default_factory=list)

    def outcomes(self, category: EvidenceCategory) -> list[QueryOutcome]:
        return getattr(self, category)

    @property
    def result_count(self) -> int:
        """Total number of surviving search results across all categories."""
        return sum(
            len(o.response.results)
            for category in CATEGORIES
            for o in self.outcomes(category)
            if o.response is not None
        )

    def for_prompt(self, category: EvidenceCategory) -> list[dict]:
        """Compact payload for a model prompt: successful queries only."""
        payload = []
        for outcome in self.outcomes(category):
            if outcome.response is None:
                continue
            payload.append(
                {
                    "query": outcome.query,
                    "results": [
                        {
                            "title": r.title,
                            "url": r.url,
                            "content": r.content,
                            "published_date": r.published_date,
                        }
                        for r in outcome.response.results
                    ],
                }
            )
        return payload


class PriceQuote(BaseModel):
    """One day's close price."""

    date: dt.date
    close: float


class FetchedEvidence(BaseModel):
    """Output of ``EvidenceFetcher.fetch``: search evidence plus a price series."""

    ticker: str
    as_of: date | None = None
    bundle: EvidenceBundle
    prices: list[PriceQuote]
