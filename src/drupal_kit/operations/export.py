"""Paginated export of Drupal REST export views.

REST export views return one JSON list per ``page=N`` request. These
helpers walk the pages in order until a stop condition is met, optionally
expanding references on every item.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator, Callable, Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from ..exceptions import DrupalError, ExportError, MalformedResponseError

if TYPE_CHECKING:
    from ..client.async_client import AsyncClient

logger = logging.getLogger(__name__)

ItemCallback = Callable[[Any, int], None]


@dataclass
class ExportCursor:
    """Progress of one export call."""

    page: int
    results: list[Any] = field(default_factory=list)
    more: bool = True


def _check_page_range(start_page: int, end_page: int | None) -> None:
    if start_page < 0:
        raise ValueError(f"start_page must be >= 0, got {start_page}")
    if end_page is not None and end_page < start_page:
        raise ValueError(f"end_page ({end_page}) must not be before start_page ({start_page})")


async def fetch_page(client: AsyncClient, path: str, page: int) -> list[Any]:
    """Fetch one page of a REST export view.

    Raises:
        MalformedResponseError: If the page is not a JSON list
    """
    data = await client.request("GET", path, params={"page": page})
    if not isinstance(data, list):
        raise MalformedResponseError(
            repr(data)[:500], details={"path": path, "page": page}
        )
    return data


def _is_last_page(page: int, items: list[Any], paginated: bool, end_page: int | None) -> bool:
    if not paginated or not items:
        return True
    return end_page is not None and page >= end_page


async def export_view(
    client: AsyncClient,
    path: str,
    *,
    paginated: bool = True,
    start_page: int = 0,
    end_page: int | None = None,
    per_item_callback: ItemCallback | None = None,
    reference_fields: Iterable[str] | None = None,
) -> list[Any]:
    """Load all items of a REST export view.

    Pages are fetched one after another starting at ``start_page``. The
    export stops after the first page when ``paginated`` is False, after
    ``end_page`` (inclusive) when given, or at the first empty page.

    Items of a page are handled one at a time: references in
    ``reference_fields`` are expanded, then ``per_item_callback`` is called
    with the item and its zero-based index across all pages, then the item
    is appended to the result. Items that are not JSON objects are passed
    through without reference expansion.

    Args:
        client: Logged-in client
        path: View path, may already carry a query string
        paginated: Keep requesting pages until a stop condition is met
        start_page: First page number
        end_page: Last page number to fetch, None for no limit
        per_item_callback: Called as ``callback(item, index)``
        reference_fields: Fields to expand on every item

    Returns:
        All items in page order

    Raises:
        ExportError: On the first failure; ``results`` holds the items
            emitted before the failure and ``__cause__`` the error

    Example:
        >>> def show(item, index):
        ...     print(index, item["title"][0]["value"])
        >>> items = await export_view(client, "api/articles", per_item_callback=show)
    """
    _check_page_range(start_page, end_page)
    fields = list(reference_fields or ())
    cursor = ExportCursor(page=start_page)

    while cursor.more:
        try:
            items = await fetch_page(client, path, cursor.page)
            for item in items:
                if fields and isinstance(item, dict):
                    await client.resolve_references(item, fields)
                if per_item_callback is not None:
                    per_item_callback(item, len(cursor.results))
                cursor.results.append(item)
        except DrupalError as e:
            logger.error(f"Loading rest export {path} failed at page {cursor.page}: {e}")
            raise ExportError(
                f"Export of {path} failed at page {cursor.page}: {e}",
                results=cursor.results,
                page=cursor.page,
            ) from e

        logger.info(f"Loaded page {cursor.page} of {path} ({len(items)} items)")
        cursor.more = not _is_last_page(cursor.page, items, paginated, end_page)
        cursor.page += 1

    return cursor.results


async def stream_view(
    client: AsyncClient,
    path: str,
    *,
    paginated: bool = True,
    start_page: int = 0,
    end_page: int | None = None,
    reference_fields: Iterable[str] | None = None,
) -> AsyncGenerator[Any, None]:
    """Async generator version of export_view.

    Yields items one at a time without keeping earlier pages in memory.
    Stop conditions match export_view; errors propagate unwrapped.

    Example:
        >>> async for article in stream_view(client, "api/articles"):
        ...     print(article["nid"][0]["value"])
    """
    _check_page_range(start_page, end_page)
    fields = list(reference_fields or ())
    page = start_page

    while True:
        items = await fetch_page(client, path, page)

        for item in items:
            if fields and isinstance(item, dict):
                await client.resolve_references(item, fields)
            yield item

        if _is_last_page(page, items, paginated, end_page):
            break

        page += 1
