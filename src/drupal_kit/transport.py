"""Default HTTP transport built on httpx.

The transport only moves bytes: it never inspects status codes or bodies.
Interpreting the response is the decoder's job.
"""

import logging
from typing import Any

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from .exceptions import ConnectionError as DrupalConnectionError
from .exceptions import TimeoutError as DrupalTimeoutError
from .exceptions import TransportError
from .models.config import RetryConfig
from .protocols import TransportResponse

logger = logging.getLogger(__name__)


class HttpxTransport:
    """Transport backed by a pooled ``httpx.AsyncClient``.

    Example:
        >>> transport = HttpxTransport(timeout=10.0)
        >>> response = await transport.request("GET", "https://example.com/node/1?_format=json", {})
        >>> response.status_code
        200
    """

    def __init__(
        self,
        *,
        timeout: float = 30.0,
        verify_ssl: bool = True,
        max_connections: int = 10,
        retry_config: RetryConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.timeout = timeout
        self.retry_config = retry_config or RetryConfig()
        self._client = client or httpx.AsyncClient(
            timeout=timeout,
            verify=verify_ssl,
            limits=httpx.Limits(
                max_connections=max_connections,
                max_keepalive_connections=max_connections,
            ),
        )
        self._owns_client = client is None

    async def aclose(self) -> None:
        """Close the underlying client if this transport created it."""
        if self._owns_client:
            await self._client.aclose()

    def _create_retry_decorator(self) -> Any:
        """Create a retry decorator based on configuration.

        Returns:
            Configured tenacity retry decorator
        """
        retry_config = self.retry_config

        return retry(
            stop=stop_after_attempt(retry_config.max_attempts),
            wait=wait_exponential(
                multiplier=retry_config.exponential_base,
                min=retry_config.initial_wait,
                max=retry_config.max_wait,
            ),
            retry=retry_if_exception_type(TransportError),
            reraise=True,
        )

    async def request(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        body: str | bytes | None = None,
    ) -> TransportResponse:
        """Send one request and return the raw response.

        Args:
            method: HTTP method
            url: Absolute URL including query string
            headers: Request headers
            body: Request body, already serialized

        Returns:
            Status, lower-cased headers and body text

        Raises:
            ConnectionError: On connection failures
            TimeoutError: On request timeout
            TransportError: On any other protocol failure
        """

        @self._create_retry_decorator()  # type: ignore[untyped-decorator]
        async def _do_request() -> TransportResponse:
            logger.debug(f"{method} {url}")
            try:
                response = await self._client.request(method, url, headers=headers, content=body)
            except httpx.ConnectError as e:
                raise DrupalConnectionError(f"Failed to connect to {url}: {e}") from e
            except httpx.TimeoutException as e:
                raise DrupalTimeoutError(f"Request timed out after {self.timeout}s: {e}") from e
            except httpx.HTTPError as e:
                raise TransportError(f"{method} {url} failed: {e}") from e

            logger.debug(f"Response: {response.status_code}")
            return TransportResponse(
                status_code=response.status_code,
                body=response.text,
                headers={key.lower(): value for key, value in response.headers.items()},
            )

        return await _do_request()  # type: ignore[no-any-return]
