"""Exception hierarchy for drupal-kit.

All errors raised by the client derive from DrupalError so callers can
catch the whole family with a single except clause, or pick out the
specific failure they care about.
"""

from typing import Any


class DrupalError(Exception):
    """Base exception for all drupal-kit errors.

    Attributes:
        message: Human readable error description
        details: Additional structured context about the error
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


class ConfigurationError(DrupalError):
    """Raised when the client configuration is invalid."""


# Transport errors


class TransportError(DrupalError):
    """Raised when an HTTP request could not be completed at all."""


class ConnectionError(TransportError):
    """Raised when the connection to the Drupal site fails."""


class TimeoutError(TransportError):
    """Raised when a request exceeds the configured timeout."""


# Response errors


class MalformedResponseError(DrupalError):
    """Raised when a response body cannot be parsed as JSON.

    Attributes:
        body_excerpt: Leading part of the offending body
    """

    def __init__(self, body_excerpt: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(f"Malformed response: {body_excerpt}", details=details)
        self.body_excerpt = body_excerpt


class RemoteError(DrupalError):
    """Raised when Drupal answers with a JSON error envelope.

    Drupal reports many failures as ``{"message": "..."}`` bodies, sometimes
    with a 2xx status, so this is detected from the body and not the status.

    Attributes:
        status_code: HTTP status of the response, if known
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details=details)
        self.status_code = status_code


class AuthenticationError(DrupalError):
    """Raised when login succeeds at the HTTP level but yields no session."""


# Entity errors


class MissingEntityTypeError(DrupalError):
    """Raised when an entity type name is not in the registry.

    Attributes:
        entity_type: The unknown name
    """

    def __init__(self, entity_type: str) -> None:
        super().__init__(f"Unknown entity type: {entity_type!r}")
        self.entity_type = entity_type


class PayloadError(DrupalError):
    """Raised when an entity payload cannot be persisted as given."""


class ExportError(DrupalError):
    """Raised when a paginated export fails part way through.

    The items collected before the failure are kept so callers can tell a
    prefix from a complete export. The underlying failure is the ``__cause__``.

    Attributes:
        results: Items accumulated before the failing page
        page: Page number that failed
    """

    def __init__(self, message: str, results: list[Any], page: int) -> None:
        super().__init__(message, details={"page": page, "accumulated": len(results)})
        self.results = results
        self.page = page
