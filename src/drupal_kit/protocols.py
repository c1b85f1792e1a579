"""Protocols for the client's replaceable collaborators.

Anything matching these shapes can be injected into AsyncClient, which is
how tests substitute recording fakes for the network.
"""

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from .models.config import RetryConfig


@dataclass(frozen=True)
class TransportResponse:
    """Raw outcome of one HTTP request.

    Header names may arrive in any case; readers match them case-insensitively.
    """

    status_code: int
    body: str
    headers: dict[str, str] = field(default_factory=dict)


@runtime_checkable
class Transport(Protocol):
    """Performs a single HTTP request.

    Implementations raise TransportError when no response was received and
    return every response, whatever its status, otherwise.
    """

    async def request(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        body: str | bytes | None = None,
    ) -> TransportResponse: ...

    async def aclose(self) -> None: ...


@runtime_checkable
class ConfigProvider(Protocol):
    """Configuration consumed by AsyncClient."""

    def get_base_url(self) -> str: ...

    def get_credentials(self) -> tuple[str, str]: ...

    @property
    def timeout(self) -> float: ...

    @property
    def verify_ssl(self) -> bool: ...

    @property
    def max_connections(self) -> int: ...

    @property
    def max_concurrency(self) -> int: ...

    @property
    def retry(self) -> RetryConfig: ...
