"""Data models for drupal-kit."""

from .config import DrupalConfig, RetryConfig
from .entity import ENTITY_TYPES, EntityType, EntityTypeDescriptor, get_descriptor
from .reference import (
    PENDING_FILE_UPLOAD,
    PendingFile,
    inline_entity,
    is_reference_item,
    pending_file,
)
from .session import Session

__all__ = [
    "DrupalConfig",
    "RetryConfig",
    "ENTITY_TYPES",
    "EntityType",
    "EntityTypeDescriptor",
    "get_descriptor",
    "PENDING_FILE_UPLOAD",
    "PendingFile",
    "inline_entity",
    "is_reference_item",
    "pending_file",
    "Session",
]
