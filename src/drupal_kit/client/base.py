"""Shared plumbing for Drupal REST clients.

URL construction, header assembly and response interpretation live here
so that every operation reaches the server the same way.
"""

import logging
from typing import Any

import httpx

from ..decoder import decode_response
from ..models.entity import EntityTypeDescriptor, get_descriptor
from ..models.session import Session
from ..protocols import ConfigProvider, TransportResponse

logger = logging.getLogger(__name__)


class BaseClient:
    """Base class holding configuration and session state.

    Not intended to be used directly - use AsyncClient instead.
    """

    def __init__(self, config: ConfigProvider) -> None:
        """Initialize the base client.

        Args:
            config: Site URL, credentials and transport options
        """
        self.config = config
        self.base_url = config.get_base_url()
        self._session = Session()

        logger.info(f"Initialized Drupal client for {self.base_url}")

    @property
    def session(self) -> Session:
        """Current session; empty until login succeeds."""
        return self._session

    def _get_headers(
        self,
        extra_headers: dict[str, str] | None = None,
        content_type: str | None = "application/json",
    ) -> dict[str, str]:
        """Build request headers with session credentials.

        Args:
            extra_headers: Additional headers to include
            content_type: Body content type, None for bodiless requests

        Returns:
            Complete headers dictionary
        """
        headers = {"Accept": "application/json", **self._session.get_headers()}
        if content_type:
            headers["Content-Type"] = content_type

        if extra_headers:
            headers.update(extra_headers)

        return headers

    def _build_url(self, path: str, params: dict[str, Any] | None = None) -> str:
        """Build the full URL for a REST path.

        Every request asks for JSON through ``_format=json``. Query strings
        already present on ``path`` are kept.

        Args:
            path: Path relative to the site root (e.g. "node/1")
            params: Extra query parameters

        Returns:
            Complete URL
        """
        url = httpx.URL(f"{self.base_url}/{path.strip('/')}")
        return str(url.copy_merge_params({**(params or {}), "_format": "json"}))

    @staticmethod
    def _descriptor(entity_type: Any) -> EntityTypeDescriptor:
        return get_descriptor(entity_type)

    @staticmethod
    def _parse_response(response: TransportResponse) -> Any:
        """Decode a response body.

        A 204 No Content response (e.g. after DELETE) decodes to None.
        """
        if response.status_code == 204:
            return None
        return decode_response(response.body, status_code=response.status_code)

    @staticmethod
    def _session_cookie(response: TransportResponse) -> str | None:
        """Return the ``name=value`` part of the Set-Cookie header, if any."""
        set_cookie = next(
            (value for name, value in response.headers.items() if name.lower() == "set-cookie"),
            None,
        )
        if not set_cookie:
            return None
        return set_cookie.split(";")[0].strip()
