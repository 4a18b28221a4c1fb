from typing import Any, Optional

import httpx


class ExaError(Exception):
    """Base exception for every error raised by the exa client."""
    kind: str = "exa"


# --- Configuration ---

class ConfigError(ExaError):
    """Raised by the builder when the accumulated configuration is invalid."""
    kind = "config"


class MissingCredentialError(ConfigError):
    kind = "config.missing_credential"

    def __init__(self, message: str = "API key is required and must not be empty.") -> None:
        super().__init__(message)


class InvalidBaseUrlError(ConfigError):
    kind = "config.invalid_base_url"

    def __init__(self, url: Any, reason: str = "expected an absolute http(s) URL") -> None:
        self.url = url
        super().__init__(f"Invalid base URL {url!r}: {reason}")


class InvalidTimeoutError(ConfigError):
    kind = "config.invalid_timeout"

    def __init__(self, timeout: Any) -> None:
        self.timeout = timeout
        super().__init__(f"Timeout must be a positive number of seconds, got {timeout!r}")


# --- Local request validation ---

class RequestValidationError(ExaError):
    """
    Raised before any network activity when a request model is not valid.
    Must not subclass ValueError, or pydantic wraps it into its own ValidationError.
    """
    kind = "validation"


class EmptyQueryError(RequestValidationError):
    kind = "validation.empty_query"

    def __init__(self, field: str = "query") -> None:
        self.field = field
        super().__init__(f"'{field}' must be a non-empty string")


class EmptyIdentifierListError(RequestValidationError):
    kind = "validation.empty_identifier_list"

    def __init__(self, message: str = "'ids' must contain at least one non-empty identifier") -> None:
        super().__init__(message)


class InvalidFilterError(RequestValidationError):
    kind = "validation.invalid_filter"

    def __init__(self, field: str, reason: str) -> None:
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid value for '{field}': {reason}")


# --- Transport ---

class TransportError(ExaError):
    """
    The request never produced an HTTP response (connection refused, DNS,
    timeout, protocol error). The httpx exception is kept untouched in `cause`.
    """
    kind = "transport"

    def __init__(self, cause: httpx.RequestError) -> None:
        self.cause = cause
        super().__init__(f"Transport failure: {type(cause).__name__}: {cause}")

    @property
    def is_timeout(self) -> bool:
        return isinstance(self.cause, httpx.TimeoutException)


# --- API responses ---

class APIError(ExaError):
    """
    Raised when the API answers with a non-2xx status.
    """
    kind = "api"

    def __init__(
        self,
        message: str,
        *,
        request: Optional[httpx.Request] = None,
        response: Optional[httpx.Response] = None,
    ):
        self.request = request
        self.response = response
        self.status: Optional[int] = response.status_code if response is not None else None
        status_part = f" (Status: {self.status})" if self.status is not None else ""
        super().__init__(f"{message}{status_part}")


class UnauthorizedError(APIError):
    """401/403: the API key was rejected."""
    kind = "api.unauthorized"


class RateLimitError(APIError):
    """429: too many requests. The client never retries on its own."""
    kind = "api.rate_limited"

    def __init__(
        self,
        message: str,
        *,
        retry_after: Optional[float] = None,
        request: Optional[httpx.Request] = None,
        response: Optional[httpx.Response] = None,
    ):
        self.retry_after = retry_after
        super().__init__(message, request=request, response=response)


class BadRequestError(APIError):
    """Any other 4xx. `message` and `code` come from the service payload when present."""
    kind = "api.bad_request"

    def __init__(
        self,
        message: Optional[str],
        *,
        code: Optional[str] = None,
        request: Optional[httpx.Request] = None,
        response: Optional[httpx.Response] = None,
    ):
        self.message = message
        self.code = code
        text = " - ".join(part for part in (code, message) if part) or "Bad request"
        super().__init__(text, request=request, response=response)


class ServerError(APIError):
    kind = "api.server_error"


# --- Response parsing ---

class ParseError(ExaError):
    """A 2xx response whose body could not be mapped onto the response model."""
    kind = "parse"


class MissingFieldError(ParseError):
    kind = "parse.missing_field"

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"Response is missing required field '{field}'")


class MalformedBodyError(ParseError):
    kind = "parse.malformed_body"
