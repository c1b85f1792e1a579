"""Client classes for drupal-kit."""

from .async_client import AsyncClient
from .base import BaseClient

__all__ = ["AsyncClient", "BaseClient"]
