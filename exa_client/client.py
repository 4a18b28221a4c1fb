import logging
import math
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Dict, List, Optional, Tuple, Type, TypeVar, Union

import httpx
from pydantic import ValidationError

from .builder import ClientConfig, ExaClientBuilder
from .exceptions import (
    APIError,
    BadRequestError,
    InvalidFilterError,
    MalformedBodyError,
    MissingFieldError,
    RateLimitError,
    ServerError,
    TransportError,
    UnauthorizedError,
)
from .models import (
    ContentsRequest,
    ContentsResponse,
    FindSimilarRequest,
    FindSimilarResponse,
    RequestModel,
    ResponseModel,
    SearchRequest,
    SearchResponse,
)

logger = logging.getLogger(__name__)

# --- Constants ---
API_KEY_HEADER = "x-api-key"
USER_AGENT = "exa-client-python/0.1.0"

SEARCH_PATH = "/search"
FIND_SIMILAR_PATH = "/findSimilar"
CONTENTS_PATH = "/contents"

RequestT = TypeVar("RequestT", bound=RequestModel)
ResponseT = TypeVar("ResponseT", bound=ResponseModel)


def _coerce_request(
    model: Type[RequestT],
    request: Any,
    primary_field: str,
    options: Dict[str, Any],
) -> RequestT:
    """
    Accepts either a ready request model or the primary argument plus keyword
    options, and returns a locally validated request model.
    """
    if primary_field in options:
        raise TypeError(
            f"'{primary_field}' was given both positionally and as a keyword option to {model.__name__}"
        )
    if isinstance(request, model):
        if options:
            raise TypeError(
                f"Keyword options cannot be combined with a {model.__name__} instance: {sorted(options)}"
            )
        request.check()
        return request
    try:
        return model(**{primary_field: request}, **options)
    except ValidationError as e:
        error = e.errors()[0]
        field = ".".join(str(part) for part in error["loc"]) or primary_field
        raise InvalidFilterError(field, error["msg"]) from e


def _headers(config: ClientConfig) -> Dict[str, str]:
    return {
        API_KEY_HEADER: config.api_key,
        "Content-Type": "application/json",
        "Accept": "application/json",
        "User-Agent": USER_AGENT,
    }


def _error_payload(response: httpx.Response) -> Tuple[Optional[str], Optional[str]]:
    """Returns (message, code) from an error body. The API uses either `message` or `error`."""
    try:
        data = response.json()
    except ValueError:
        text = response.text.strip()
        return (text[:500] or None), None

    if not isinstance(data, dict):
        return None, None
    message = data.get("message") or data.get("error")
    code = data.get("code")
    return (
        message if isinstance(message, str) else None,
        code if isinstance(code, str) else None,
    )


def _retry_after(response: httpx.Response) -> Optional[float]:
    value = response.headers.get("Retry-After")
    if not value:
        return None
    try:
        seconds = float(value)
    except ValueError:
        pass
    else:
        return max(seconds, 0.0) if math.isfinite(seconds) else None
    try:
        when = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    return max((when - datetime.now(timezone.utc)).total_seconds(), 0.0)


def _error_for_status(response: httpx.Response) -> APIError:
    status = response.status_code
    request = response.request
    if status in (401, 403):
        message, _ = _error_payload(response)
        return UnauthorizedError(message or "Unauthorized: the API key was rejected", request=request, response=response)
    if status == 429:
        retry_after = _retry_after(response)
        logger.warning(f"Exa API rate limit hit (retry_after={retry_after})")
        return RateLimitError(
            "Rate limited due to too many requests.",
            retry_after=retry_after,
            request=request,
            response=response,
        )
    if status >= 500:
        return ServerError("Exa API server error", request=request, response=response)
    message, code = _error_payload(response)
    return BadRequestError(message, code=code, request=request, response=response)


def _parse_response(response: httpx.Response, model: Type[ResponseT]) -> ResponseT:
    if not response.is_success:
        raise _error_for_status(response)

    try:
        data = response.json()
    except ValueError as e:
        logger.error(f"Exa API returned a non-JSON body for {response.request.url}: {e}", exc_info=True)
        raise MalformedBodyError(f"Response body is not valid JSON: {e}") from e

    try:
        return model.model_validate(data)
    except ValidationError as e:
        logger.error(f"Failed to validate Exa API response as {model.__name__}: {e}", exc_info=True)
        for error in e.errors():
            if error["type"] == "missing":
                names = [part for part in error["loc"] if isinstance(part, str)]
                raise MissingFieldError(names[-1] if names else model.__name__) from e
        raise MalformedBodyError(f"Failed to parse {model.__name__}: {e}") from e


class _BaseExa:
    def __init__(self, config: ClientConfig) -> None:
        self._config = config
        self._headers = _headers(config)

    @classmethod
    def builder(cls) -> ExaClientBuilder:
        return ExaClientBuilder()

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def base_url(self) -> str:
        return self._config.base_url

    def _url(self, path: str) -> str:
        return f"{self._config.base_url}{path}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(base_url={self.base_url!r}, timeout={self._config.timeout!r})"


class Exa(_BaseExa):
    """
    Synchronous client for the Exa API.

    Immutable once built: one instance can be shared between threads. Every
    operation validates its request locally before any network activity and
    raises a subclass of `ExaError` on failure.
    """

    def __init__(self, config: ClientConfig, *, httpx_client: Optional[httpx.Client] = None):
        super().__init__(config)
        if httpx_client:
            self._client = httpx_client
            self._managed_client = False
        else:
            self._client = httpx.Client(timeout=config.timeout)
            self._managed_client = True

    def _post(self, path: str, request: RequestModel, model: Type[ResponseT]) -> ResponseT:
        url = self._url(path)
        logger.debug(f"POST {url}")
        try:
            response = self._client.post(
                url, json=request.to_payload(), headers=self._headers, timeout=self._config.timeout
            )
        except httpx.RequestError as e:
            logger.warning(f"Transport failure calling {url}: {e!r}")
            raise TransportError(e) from e
        return _parse_response(response, model)

    def search(self, request: Union[SearchRequest, str], **options: Any) -> SearchResponse:
        """
        Runs a search. Takes a `SearchRequest`, or the query text plus
        `SearchRequest` fields as keyword options:

            exa.search("Rust programming", num_results=5, type="neural")

        Raises:
            RequestValidationError: Before sending, for an empty query or bad filters.
            UnauthorizedError, RateLimitError, BadRequestError, ServerError: On non-2xx statuses.
            TransportError: When no response was received.
            ParseError: When a 2xx body does not match `SearchResponse`.
        """
        search_request = _coerce_request(SearchRequest, request, "query", options)
        return self._post(SEARCH_PATH, search_request, SearchResponse)

    def find_similar(self, request: Union[FindSimilarRequest, str], **options: Any) -> FindSimilarResponse:
        """Finds pages similar to a URL. Same error contract as `search`."""
        find_similar_request = _coerce_request(FindSimilarRequest, request, "url", options)
        return self._post(FIND_SIMILAR_PATH, find_similar_request, FindSimilarResponse)

    def get_contents(self, request: Union[ContentsRequest, List[str]], **options: Any) -> ContentsResponse:
        """Fetches contents for URLs or result ids, in request order."""
        contents_request = _coerce_request(ContentsRequest, request, "ids", options)
        return self._post(CONTENTS_PATH, contents_request, ContentsResponse)

    def close(self) -> None:
        """Closes the internal httpx client if this instance created it."""
        if self._managed_client and not self._client.is_closed:
            self._client.close()

    def __enter__(self) -> "Exa":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class AsyncExa(_BaseExa):
    """asyncio counterpart of `Exa`. Safe to share between tasks."""

    def __init__(self, config: ClientConfig, *, httpx_client: Optional[httpx.AsyncClient] = None):
        super().__init__(config)
        if httpx_client:
            self._client = httpx_client
            self._managed_client = False
        else:
            self._client = httpx.AsyncClient(timeout=config.timeout)
            self._managed_client = True

    async def _post(self, path: str, request: RequestModel, model: Type[ResponseT]) -> ResponseT:
        url = self._url(path)
        logger.debug(f"POST {url}")
        try:
            response = await self._client.post(
                url, json=request.to_payload(), headers=self._headers, timeout=self._config.timeout
            )
        except httpx.RequestError as e:
            logger.warning(f"Transport failure calling {url}: {e!r}")
            raise TransportError(e) from e
        return _parse_response(response, model)

    async def search(self, request: Union[SearchRequest, str], **options: Any) -> SearchResponse:
        search_request = _coerce_request(SearchRequest, request, "query", options)
        return await self._post(SEARCH_PATH, search_request, SearchResponse)

    async def find_similar(self, request: Union[FindSimilarRequest, str], **options: Any) -> FindSimilarResponse:
        find_similar_request = _coerce_request(FindSimilarRequest, request, "url", options)
        return await self._post(FIND_SIMILAR_PATH, find_similar_request, FindSimilarResponse)

    async def get_contents(self, request: Union[ContentsRequest, List[str]], **options: Any) -> ContentsResponse:
        contents_request = _coerce_request(ContentsRequest, request, "ids", options)
        return await self._post(CONTENTS_PATH, contents_request, ContentsResponse)

    async def aclose(self) -> None:
        """Closes the internal httpx client if this instance created it."""
        if self._managed_client and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self) -> "AsyncExa":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()
