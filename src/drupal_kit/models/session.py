"""Authenticated session state.

A Session is created empty, replaced once by login and then only read.
"""

from pydantic import BaseModel, ConfigDict


class Session(BaseModel):
    """Cookie and CSRF token returned by a login exchange.

    Attributes:
        cookie: ``name=value`` pair from the Set-Cookie header
        csrf_token: Anti-forgery token required for unsafe methods
    """

    model_config = ConfigDict(frozen=True)

    cookie: str | None = None
    csrf_token: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.csrf_token is not None

    def get_headers(self) -> dict[str, str]:
        """Return the headers that carry this session."""
        headers: dict[str, str] = {}
        if self.cookie:
            headers["Cookie"] = self.cookie
        if self.csrf_token:
            headers["X-CSRF-Token"] = self.csrf_token
        return headers
