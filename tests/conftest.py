"""Pytest configuration and shared fixtures."""

import inspect
import json
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import httpx
import pytest

from drupal_kit import AsyncClient, DrupalConfig, TransportResponse

BASE_URL = "http://drupal.test"


@dataclass
class RecordedRequest:
    """One request seen by RecordingTransport."""

    method: str
    path: str
    params: dict[str, str]
    headers: dict[str, str]
    body: str | bytes | None

    @property
    def json(self) -> Any:
        return json.loads(self.body) if self.body is not None else None


class RecordingTransport:
    """Fake transport that records requests and answers through a handler.

    The handler receives the RecordedRequest and returns either a
    TransportResponse or any JSON-serializable value (sent with status 200).
    It may be a coroutine function and may raise.
    """

    def __init__(self, handler: Callable[[RecordedRequest], Any]) -> None:
        self.handler = handler
        self.requests: list[RecordedRequest] = []
        self.closed = False

    async def request(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        body: str | bytes | None = None,
    ) -> TransportResponse:
        parsed = httpx.URL(url)
        record = RecordedRequest(
            method=method,
            path=parsed.path.lstrip("/"),
            params=dict(parsed.params),
            headers=headers,
            body=body,
        )
        self.requests.append(record)

        result = self.handler(record)
        if inspect.isawaitable(result):
            result = await result
        if isinstance(result, TransportResponse):
            return result
        return TransportResponse(status_code=200, body=json.dumps(result))

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def drupal_config() -> DrupalConfig:
    """Create a test Drupal configuration.

    Returns:
        Test configuration with mock values
    """
    return DrupalConfig(
        base_url=BASE_URL,
        username="editor",
        password="secret",
        _env_file=None,
    )


@pytest.fixture
def make_client(drupal_config: DrupalConfig) -> Callable[..., tuple[AsyncClient, RecordingTransport]]:
    """Build a client wired to a RecordingTransport."""

    def factory(handler: Callable[[RecordedRequest], Any]) -> tuple[AsyncClient, RecordingTransport]:
        transport = RecordingTransport(handler)
        return AsyncClient(drupal_config, transport=transport), transport

    return factory


@pytest.fixture
def mock_node() -> dict:
    """Create a mock node as returned by Drupal.

    Returns:
        Node with tag and image references
    """
    return {
        "nid": [{"value": 1}],
        "type": [{"target_id": "article"}],
        "title": [{"value": "Test Article"}],
        "field_tags": [
            {"target_id": 4, "target_type": "taxonomy_term"},
            {"target_id": 5, "target_type": "taxonomy_term"},
        ],
        "field_image": [{"target_id": 9, "target_type": "file", "alt": "Cover"}],
    }
