"""Operations built on top of the client.

This module contains the nested save engine, reference expansion and
paginated export helpers.
"""

from .export import ExportCursor, export_view, fetch_page, stream_view
from .persistence import EntityPersister
from .references import ReferenceResolver, run_fail_fast, split_reference_fields

__all__ = [
    "EntityPersister",
    "ExportCursor",
    "ReferenceResolver",
    "export_view",
    "fetch_page",
    "run_fail_fast",
    "split_reference_fields",
    "stream_view",
]
