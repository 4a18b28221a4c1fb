import logging
from datetime import timedelta
from typing import TYPE_CHECKING, NamedTuple, Optional, Union

import httpx

from .exceptions import InvalidBaseUrlError, InvalidTimeoutError, MissingCredentialError
from .models import is_absolute_http_url

if TYPE_CHECKING:
    from .client import AsyncExa, Exa

logger = logging.getLogger(__name__)

# --- Constants ---
EXA_API_BASE_URL = "https://api.exa.ai"
DEFAULT_TIMEOUT = 30.0


class ClientConfig(NamedTuple):
    """Validated, immutable client settings. Only `ExaClientBuilder` should create these."""
    api_key: str
    base_url: str = EXA_API_BASE_URL
    timeout: float = DEFAULT_TIMEOUT

    def __repr__(self) -> str:
        return f"ClientConfig(api_key='***', base_url={self.base_url!r}, timeout={self.timeout!r})"


class ExaClientBuilder:
    """
    Collects client settings and validates them all at once in `build()`.

        exa = ExaClientBuilder().with_api_key(key).with_timeout(10).build()

    Validation order: API key, then base URL, then timeout. Nothing here
    touches the network.
    """

    def __init__(self) -> None:
        self._api_key: Optional[str] = None
        self._base_url: Optional[str] = None
        self._timeout: Optional[Union[float, timedelta]] = None
        self._http_client: Optional[Union[httpx.Client, httpx.AsyncClient]] = None

    def with_api_key(self, api_key: str) -> "ExaClientBuilder":
        self._api_key = api_key
        return self

    def with_base_url(self, base_url: str) -> "ExaClientBuilder":
        self._base_url = base_url
        return self

    def with_timeout(self, timeout: Union[float, timedelta]) -> "ExaClientBuilder":
        """Per-request timeout, in seconds or as a timedelta."""
        self._timeout = timeout
        return self

    def with_http_client(self, http_client: Union[httpx.Client, httpx.AsyncClient]) -> "ExaClientBuilder":
        """
        Reuse an existing httpx client (connection pool, proxies, mock transport).
        The library will not close a client it did not create.
        """
        self._http_client = http_client
        return self

    def config(self) -> ClientConfig:
        """Validates the accumulated settings and returns the resulting `ClientConfig`."""
        if self._api_key is None or not str(self._api_key).strip():
            raise MissingCredentialError()
        # Sent verbatim as an HTTP header value.
        if not isinstance(self._api_key, str) or not self._api_key.isascii() or not self._api_key.isprintable():
            raise MissingCredentialError("API key must be printable ASCII.")

        base_url = EXA_API_BASE_URL
        if self._base_url is not None:
            if not isinstance(self._base_url, str) or not is_absolute_http_url(self._base_url):
                raise InvalidBaseUrlError(self._base_url)
            base_url = self._base_url.rstrip("/")

        timeout = DEFAULT_TIMEOUT
        if self._timeout is not None:
            timeout = _timeout_seconds(self._timeout)

        return ClientConfig(api_key=self._api_key, base_url=base_url, timeout=timeout)

    def build(self) -> "Exa":
        from .client import Exa

        config = self.config()
        if self._http_client is not None and not isinstance(self._http_client, httpx.Client):
            raise TypeError("build() needs an httpx.Client; use build_async() for httpx.AsyncClient")
        logger.debug(f"Building Exa client for {config.base_url} (timeout={config.timeout}s)")
        return Exa(config, httpx_client=self._http_client)

    def build_async(self) -> "AsyncExa":
        from .client import AsyncExa

        config = self.config()
        if self._http_client is not None and not isinstance(self._http_client, httpx.AsyncClient):
            raise TypeError("build_async() needs an httpx.AsyncClient; use build() for httpx.Client")
        logger.debug(f"Building AsyncExa client for {config.base_url} (timeout={config.timeout}s)")
        return AsyncExa(config, httpx_client=self._http_client)


def _timeout_seconds(timeout: Union[float, timedelta]) -> float:
    if isinstance(timeout, timedelta):
        seconds = timeout.total_seconds()
    elif isinstance(timeout, (int, float)) and not isinstance(timeout, bool):
        seconds = float(timeout)
    else:
        raise InvalidTimeoutError(timeout)
    # NaN fails this check as well.
    if not seconds > 0:
        raise InvalidTimeoutError(timeout)
    return seconds
