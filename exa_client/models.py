from datetime import datetime, timezone
from typing import List, Literal, Optional

import httpx
from pydantic import BaseModel, Field, model_validator

from .exceptions import EmptyIdentifierListError, EmptyQueryError, InvalidFilterError

SearchType = Literal["neural", "keyword", "auto"]


def is_absolute_http_url(value: str) -> bool:
    try:
        url = httpx.URL(value)
    except httpx.InvalidURL:
        return False
    return url.scheme in ("http", "https") and bool(url.host)


def _parse_iso_date(field: str, value: str) -> datetime:
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as e:
        raise InvalidFilterError(field, f"expected an ISO 8601 date, got {value!r}") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


# --- Request models ---
# Every optional field defaults to None and is left out of the request body,
# so the service applies its own default.

class RequestModel(BaseModel):
    class Config:
        populate_by_name = True
        # Misspelled options fail loudly instead of being dropped.
        extra = "forbid"

    def to_payload(self) -> dict:
        """Wire body: camelCase keys, unset fields absent."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def check(self) -> None:
        """Re-runs local validation. Called by the client right before dispatch."""


class TextOptions(RequestModel):
    # Service default: full page text.
    max_characters: Optional[int] = Field(alias="maxCharacters", default=None)
    # Service default: False.
    include_html_tags: Optional[bool] = Field(alias="includeHtmlTags", default=None)


class HighlightsOptions(RequestModel):
    # Service default: 5 sentences per snippet.
    num_sentences: Optional[int] = Field(alias="numSentences", default=None)
    # Service default: 1 snippet per url.
    highlights_per_url: Optional[int] = Field(alias="highlightsPerUrl", default=None)
    # Service default: the search query.
    query: Optional[str] = None


class SummaryOptions(RequestModel):
    query: Optional[str] = None


class ContentsOptions(RequestModel):
    """Which page contents to return alongside search / find-similar results."""
    text: Optional[TextOptions] = None
    highlights: Optional[HighlightsOptions] = None
    summary: Optional[SummaryOptions] = None


class _ResultFilters(RequestModel):
    """Filters shared by search and find-similar."""
    # Service default: 10.
    num_results: Optional[int] = Field(alias="numResults", default=None)
    include_domains: Optional[List[str]] = Field(alias="includeDomains", default=None)
    exclude_domains: Optional[List[str]] = Field(alias="excludeDomains", default=None)
    start_crawl_date: Optional[str] = Field(alias="startCrawlDate", default=None)
    end_crawl_date: Optional[str] = Field(alias="endCrawlDate", default=None)
    start_published_date: Optional[str] = Field(alias="startPublishedDate", default=None)
    end_published_date: Optional[str] = Field(alias="endPublishedDate", default=None)
    include_text: Optional[List[str]] = Field(alias="includeText", default=None)
    exclude_text: Optional[List[str]] = Field(alias="excludeText", default=None)
    # Content type, e.g. "news", "research paper", "pdf".
    category: Optional[str] = None
    contents: Optional[ContentsOptions] = None

    def _check_filters(self) -> None:
        if self.num_results is not None and self.num_results <= 0:
            raise InvalidFilterError("num_results", f"must be a positive integer, got {self.num_results}")
        if self.include_domains is not None and self.exclude_domains is not None:
            raise InvalidFilterError(
                "include_domains", "include_domains and exclude_domains cannot be combined"
            )
        if self.category is not None and not self.category.strip():
            raise InvalidFilterError("category", "must not be blank")
        self._check_date_range("start_crawl_date", "end_crawl_date")
        self._check_date_range("start_published_date", "end_published_date")

    def _check_date_range(self, start_field: str, end_field: str) -> None:
        start_raw = getattr(self, start_field)
        end_raw = getattr(self, end_field)
        start = _parse_iso_date(start_field, start_raw) if start_raw is not None else None
        end = _parse_iso_date(end_field, end_raw) if end_raw is not None else None
        if start and end and start > end:
            raise InvalidFilterError(start_field, f"{start_raw} is after {end_field} {end_raw}")


class SearchRequest(_ResultFilters):
    """
    Free-text search.

    >>> SearchRequest(query="Rust programming", num_results=5).to_payload()
    {'numResults': 5, 'query': 'Rust programming'}
    """
    query: str
    # Service default: "auto".
    type: Optional[SearchType] = None
    use_autoprompt: Optional[bool] = Field(alias="useAutoprompt", default=None)

    @model_validator(mode="after")
    def check_on_construction(self) -> "SearchRequest":
        self.check()
        return self

    def check(self) -> None:
        if not self.query or not self.query.strip():
            raise EmptyQueryError("query")
        self._check_filters()


class FindSimilarRequest(_ResultFilters):
    """Pages similar to the one at `url`."""
    url: str
    exclude_source_domain: Optional[bool] = Field(alias="excludeSourceDomain", default=None)

    @model_validator(mode="after")
    def check_on_construction(self) -> "FindSimilarRequest":
        self.check()
        return self

    def check(self) -> None:
        if not self.url or not self.url.strip():
            raise EmptyQueryError("url")
        if not is_absolute_http_url(self.url):
            raise InvalidFilterError("url", f"expected an absolute http(s) URL, got {self.url!r}")
        self._check_filters()


class ContentsRequest(RequestModel):
    """Full contents for URLs or ids returned by a previous search."""
    ids: List[str]
    text: Optional[TextOptions] = None
    highlights: Optional[HighlightsOptions] = None
    summary: Optional[SummaryOptions] = None

    @model_validator(mode="after")
    def check_on_construction(self) -> "ContentsRequest":
        self.check()
        return self

    def check(self) -> None:
        if not self.ids:
            raise EmptyIdentifierListError()
        for position, identifier in enumerate(self.ids):
            if not identifier or not identifier.strip():
                raise EmptyIdentifierListError(f"'ids[{position}]' must be a non-empty identifier")


# --- Response models ---
# Unknown fields are ignored so newer API versions keep parsing.

class ResponseModel(BaseModel):
    class Config:
        populate_by_name = True


class SearchResult(ResponseModel):
    """One ranked hit. `score` is passed through as-is."""
    title: str
    url: str
    score: float
    id: Optional[str] = None
    published_date: Optional[str] = Field(alias="publishedDate", default=None)
    author: Optional[str] = None
    text: Optional[str] = None
    highlights: Optional[List[str]] = None
    highlight_scores: Optional[List[float]] = Field(alias="highlightScores", default=None)
    summary: Optional[str] = None


class SearchResponse(ResponseModel):
    results: List[SearchResult]
    # Query rewritten by autoprompt, when it was enabled.
    autoprompt_string: Optional[str] = Field(alias="autopromptString", default=None)
    # Date filter inferred by autoprompt, if any.
    auto_date: Optional[str] = Field(alias="autoDate", default=None)
    resolved_search_type: Optional[str] = Field(alias="resolvedSearchType", default=None)
    request_id: Optional[str] = Field(alias="requestId", default=None)


class FindSimilarResponse(ResponseModel):
    results: List[SearchResult]
    request_id: Optional[str] = Field(alias="requestId", default=None)


class ContentsResult(ResponseModel):
    url: str
    title: str
    id: Optional[str] = None
    text: Optional[str] = None
    highlights: Optional[List[str]] = None
    highlight_scores: Optional[List[float]] = Field(alias="highlightScores", default=None)
    summary: Optional[str] = None
    author: Optional[str] = None
    published_date: Optional[str] = Field(alias="publishedDate", default=None)


class ContentsResponse(ResponseModel):
    results: List[ContentsResult]
    request_id: Optional[str] = Field(alias="requestId", default=None)
