"""
A typed client for the Exa search API.
This package contains the client builder, sync and async clients, request and
response models, and the exception hierarchy.
"""
from .builder import DEFAULT_TIMEOUT, EXA_API_BASE_URL, ClientConfig, ExaClientBuilder
from .client import AsyncExa, Exa
from .config import builder_from_env
from .exceptions import (
    APIError,
    BadRequestError,
    ConfigError,
    EmptyIdentifierListError,
    EmptyQueryError,
    ExaError,
    InvalidBaseUrlError,
    InvalidFilterError,
    InvalidTimeoutError,
    MalformedBodyError,
    MissingCredentialError,
    MissingFieldError,
    ParseError,
    RateLimitError,
    RequestValidationError,
    ServerError,
    TransportError,
    UnauthorizedError,
)
from .models import (
    ContentsOptions,
    ContentsRequest,
    ContentsResponse,
    ContentsResult,
    FindSimilarRequest,
    FindSimilarResponse,
    HighlightsOptions,
    SearchRequest,
    SearchResponse,
    SearchResult,
    SearchType,
    SummaryOptions,
    TextOptions,
)

__all__ = [
    "Exa",
    "AsyncExa",
    "ExaClientBuilder",
    "ClientConfig",
    "builder_from_env",
    "EXA_API_BASE_URL",
    "DEFAULT_TIMEOUT",
    "SearchRequest",
    "SearchResponse",
    "SearchResult",
    "SearchType",
    "FindSimilarRequest",
    "FindSimilarResponse",
    "ContentsRequest",
    "ContentsResponse",
    "ContentsResult",
    "ContentsOptions",
    "TextOptions",
    "HighlightsOptions",
    "SummaryOptions",
    "ExaError",
    "ConfigError",
    "MissingCredentialError",
    "InvalidBaseUrlError",
    "InvalidTimeoutError",
    "RequestValidationError",
    "EmptyQueryError",
    "EmptyIdentifierListError",
    "InvalidFilterError",
    "TransportError",
    "APIError",
    "UnauthorizedError",
    "RateLimitError",
    "BadRequestError",
    "ServerError",
    "ParseError",
    "MissingFieldError",
    "MalformedBodyError",
]
