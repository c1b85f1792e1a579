"""Reference expansion for loaded entities.

Fetches the entities that reference items point at and attaches them to
the items as ``resolved_data``. Fetches run concurrently and stop at the
first failure.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Iterable
from typing import TYPE_CHECKING, Any

from ..models.reference import RESOLVED_DATA, TARGET_ID, TARGET_TYPE, reference_items

if TYPE_CHECKING:
    from ..client.async_client import AsyncClient

logger = logging.getLogger(__name__)


def split_reference_fields(fields: Iterable[str]) -> dict[str, set[str]]:
    """Group dotted field paths by their first segment.

    Example:
        >>> split_reference_fields(["field_tags", "field_blocks.field_image"])
        {'field_tags': set(), 'field_blocks': {'field_image'}}
    """
    grouped: dict[str, set[str]] = {}
    for path in fields:
        head, _, rest = path.partition(".")
        nested = grouped.setdefault(head, set())
        if rest:
            nested.add(rest)
    return grouped


async def run_fail_fast(awaitables: Iterable[Awaitable[Any]]) -> None:
    """Run awaitables concurrently, aborting all of them on the first error.

    Raises:
        Exception: The first failure, after the remaining tasks are cancelled
    """
    tasks = [asyncio.ensure_future(aw) for aw in awaitables]
    if not tasks:
        return

    try:
        await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
    finally:
        pending = [task for task in tasks if not task.done()]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    errors = [task.exception() for task in tasks if not task.cancelled()]
    first_error = next((error for error in errors if error is not None), None)
    if first_error is not None:
        raise first_error


class ReferenceResolver:
    """Loads referenced entities into a parent entity's field data.

    Field names may be dotted (``"field_blocks.field_image"``) to expand
    references of the referenced entities as well.

    Example:
        >>> resolver = ReferenceResolver(client, max_concurrency=5)
        >>> await resolver.resolve(node, {"field_tags"})
        >>> node["field_tags"][0]["resolved_data"]["name"]
        [{'value': 'news'}]
    """

    def __init__(self, client: AsyncClient, max_concurrency: int = 5) -> None:
        self.client = client
        self.max_concurrency = max_concurrency

    async def resolve(self, entity: dict[str, Any], fields: Iterable[str]) -> dict[str, Any]:
        """Attach referenced entities to every reference item of ``fields``.

        Item order and field positions are left untouched. The entity is
        modified in place and also returned.

        Args:
            entity: Loaded entity payload
            fields: Field names (or dotted paths) to expand

        Returns:
            The same entity

        Raises:
            DrupalError: The first failure among the fetches
        """
        semaphore = asyncio.Semaphore(self.max_concurrency)
        await self._resolve(entity, split_reference_fields(fields), semaphore)
        return entity

    async def _resolve(
        self,
        entity: dict[str, Any],
        fields: dict[str, set[str]],
        semaphore: asyncio.Semaphore,
    ) -> None:
        jobs = []
        for field_name, nested in fields.items():
            for item in reference_items(entity.get(field_name)):
                if item.get(TARGET_ID) is None:
                    continue
                jobs.append(self._resolve_item(item, nested, semaphore))

        if jobs:
            logger.debug(f"Resolving {len(jobs)} references in {sorted(fields)}")
        await run_fail_fast(jobs)

    async def _resolve_item(
        self,
        item: dict[str, Any],
        nested: set[str],
        semaphore: asyncio.Semaphore,
    ) -> None:
        async with semaphore:
            referenced = await self.client.entity_get(item[TARGET_TYPE], item[TARGET_ID])

        # Semaphore is released before the nested fan-out
        if nested and isinstance(referenced, dict):
            await self._resolve(referenced, split_reference_fields(nested), semaphore)

        item[RESOLVED_DATA] = referenced
