"""drupal-kit: An async Python client for the Drupal REST API.

This package provides:
- Session login with cookie and CSRF token handling
- Reading, saving and deleting nodes, media, taxonomy terms, users,
  files and paragraphs
- Nested saves that upload files and create inline child entities first
- Concurrent expansion of entity references
- Paginated loading of REST export views
"""

from .__version__ import __version__
from .client import AsyncClient
from .config_provider import ConfigFactory, create_config, load_config
from .decoder import decode_response
from .exceptions import (
    AuthenticationError,
    ConfigurationError,
    DrupalError,
    ExportError,
    MalformedResponseError,
    MissingEntityTypeError,
    PayloadError,
    RemoteError,
    TransportError,
)
from .models import (
    ENTITY_TYPES,
    DrupalConfig,
    EntityType,
    EntityTypeDescriptor,
    PendingFile,
    RetryConfig,
    Session,
    get_descriptor,
    inline_entity,
    pending_file,
)
from .operations import export_view, stream_view
from .protocols import ConfigProvider, Transport, TransportResponse
from .transport import HttpxTransport

__all__ = [
    "__version__",
    # Client
    "AsyncClient",
    # Configuration
    "DrupalConfig",
    "RetryConfig",
    "ConfigFactory",
    "create_config",
    "load_config",
    # Entities
    "ENTITY_TYPES",
    "EntityType",
    "EntityTypeDescriptor",
    "get_descriptor",
    "PendingFile",
    "inline_entity",
    "pending_file",
    "Session",
    # Export
    "export_view",
    "stream_view",
    # Transport
    "decode_response",
    "HttpxTransport",
    "ConfigProvider",
    "Transport",
    "TransportResponse",
    # Exceptions
    "DrupalError",
    "ConfigurationError",
    "TransportError",
    "MalformedResponseError",
    "RemoteError",
    "AuthenticationError",
    "MissingEntityTypeError",
    "PayloadError",
    "ExportError",
]
