"""Tests for paginated REST export loading."""

import pytest

from drupal_kit import ExportError, MalformedResponseError, TransportError, TransportResponse


def paged(pages: list[list[dict]]):
    """Handler serving ``pages[n]`` for ``page=n`` and empty pages beyond."""

    def handler(request):
        if request.path.startswith("taxonomy/term/"):
            return {"tid": [{"value": int(request.path.rsplit("/", 1)[1])}]}
        page = int(request.params["page"])
        return pages[page] if page < len(pages) else []

    return handler


def article(n: int) -> dict:
    return {"nid": n, "field_tags": [{"target_type": "taxonomy_term", "target_id": n * 10}]}


class TestExportView:
    """Test cases for export_view."""

    async def test_stops_at_first_empty_page(self, make_client) -> None:
        """Test that pages are concatenated until an empty page arrives."""
        client, transport = make_client(paged([[article(1), article(2)], [article(3)], []]))

        items = await client.export_view("api/articles")

        assert [item["nid"] for item in items] == [1, 2, 3]
        assert [r.params["page"] for r in transport.requests] == ["0", "1", "2"]
        assert all(r.path == "api/articles" for r in transport.requests)
        assert all(r.params["_format"] == "json" for r in transport.requests)

    async def test_not_paginated_fetches_once(self, make_client) -> None:
        """Test that paginated=False issues exactly one request."""
        client, transport = make_client(paged([[article(1)], [article(2)]]))

        items = await client.export_view("api/articles", paginated=False)

        assert [item["nid"] for item in items] == [1]
        assert len(transport.requests) == 1

    async def test_not_paginated_empty_page(self, make_client) -> None:
        """Test that a single empty page returns an empty list."""
        client, transport = make_client(paged([]))

        assert await client.export_view("api/articles", paginated=False) == []
        assert len(transport.requests) == 1

    async def test_start_and_end_page(self, make_client) -> None:
        """Test that start_page and end_page bound the fetched pages."""
        pages = [[article(n)] for n in range(6)]
        client, transport = make_client(paged(pages))

        items = await client.export_view("api/articles", start_page=2, end_page=4)

        assert [item["nid"] for item in items] == [2, 3, 4]
        assert [r.params["page"] for r in transport.requests] == ["2", "3", "4"]

    async def test_empty_page_before_end_page(self, make_client) -> None:
        """Test that an empty page ends the export even before end_page."""
        client, transport = make_client(paged([[article(1)]]))

        items = await client.export_view("api/articles", end_page=10)

        assert len(items) == 1
        assert len(transport.requests) == 2

    async def test_keeps_existing_query_string(self, make_client) -> None:
        """Test that view paths with a query string get page appended."""
        client, transport = make_client(paged([[article(1)]]))

        await client.export_view("api/articles?type=blog")

        assert transport.requests[0].params == {"type": "blog", "page": "0", "_format": "json"}

    async def test_callback_indices(self, make_client) -> None:
        """Test that the callback sees 0..N-1 across pages of sizes [2, 2, 0]."""
        client, _ = make_client(paged([[article(1), article(2)], [article(3), article(4)], []]))
        seen = []

        items = await client.export_view(
            "api/articles", per_item_callback=lambda item, index: seen.append((index, item["nid"]))
        )

        assert seen == [(0, 1), (1, 2), (2, 3), (3, 4)]
        assert len(items) == 4

    async def test_callback_sees_resolved_references(self, make_client) -> None:
        """Test that references are attached before the callback runs."""
        client, _ = make_client(paged([[article(1), article(2)]]))
        resolved = []

        def callback(item, index):
            resolved.append(item["field_tags"][0]["resolved_data"]["tid"][0]["value"])

        await client.export_view(
            "api/articles", reference_fields=["field_tags"], per_item_callback=callback
        )

        assert resolved == [10, 20]

    async def test_items_resolved_sequentially(self, make_client) -> None:
        """Test that item N is fully resolved before item N+1 starts."""
        client, transport = make_client(paged([[article(1), article(2), article(3)]]))

        await client.export_view("api/articles", paginated=False, reference_fields=["field_tags"])

        assert [r.path for r in transport.requests] == [
            "api/articles",
            "taxonomy/term/10",
            "taxonomy/term/20",
            "taxonomy/term/30",
        ]

    async def test_failure_keeps_prefix(self, make_client) -> None:
        """Test that a failing page raises ExportError carrying earlier items."""
        base = paged([[article(1), article(2)], [article(3)]])

        def handler(request):
            if request.params.get("page") == "1":
                raise TransportError("connection reset")
            return base(request)

        client, _ = make_client(handler)

        with pytest.raises(ExportError) as exc_info:
            await client.export_view("api/articles")

        assert exc_info.value.page == 1
        assert [item["nid"] for item in exc_info.value.results] == [1, 2]
        assert isinstance(exc_info.value.__cause__, TransportError)

    async def test_malformed_page(self, make_client) -> None:
        """Test that an unparseable page aborts the export."""
        client, _ = make_client(lambda request: TransportResponse(200, "<html>oops</html>"))

        with pytest.raises(ExportError) as exc_info:
            await client.export_view("api/articles")

        assert exc_info.value.results == []
        assert isinstance(exc_info.value.__cause__, MalformedResponseError)

    async def test_non_list_page(self, make_client) -> None:
        """Test that a page that is not a list is rejected."""
        client, _ = make_client(lambda request: {"rows": []})

        with pytest.raises(ExportError) as exc_info:
            await client.export_view("api/articles")

        assert isinstance(exc_info.value.__cause__, MalformedResponseError)

    async def test_scalar_rows_skip_reference_expansion(self, make_client) -> None:
        """Test that rows which are not objects pass through unexpanded."""
        client, transport = make_client(paged([["a", "b"], [None, 3]]))

        items = await client.export_view("api/ids", reference_fields=["field_tags"])

        assert items == ["a", "b", None, 3]
        assert [r.params["page"] for r in transport.requests] == ["0", "1", "2"]

    async def test_invalid_page_range(self, make_client) -> None:
        """Test that end_page before start_page is rejected."""
        client, transport = make_client(paged([]))

        with pytest.raises(ValueError):
            await client.export_view("api/articles", start_page=3, end_page=1)

        assert transport.requests == []


class TestStreamView:
    """Test cases for stream_view."""

    async def test_yields_all_items(self, make_client) -> None:
        """Test streaming across pages until an empty one."""
        client, transport = make_client(paged([[article(1)], [article(2), article(3)]]))

        nids = [item["nid"] async for item in client.stream_view("api/articles")]

        assert nids == [1, 2, 3]
        assert len(transport.requests) == 3

    async def test_stops_when_consumer_stops(self, make_client) -> None:
        """Test that later pages are not fetched if iteration ends early."""
        client, transport = make_client(paged([[article(1), article(2)], [article(3)]]))

        async for item in client.stream_view("api/articles"):
            if item["nid"] == 1:
                break

        assert len(transport.requests) == 1

    async def test_errors_propagate(self, make_client) -> None:
        """Test that failures are raised unwrapped."""

        def handler(request):
            raise TransportError("down")

        client, _ = make_client(handler)

        with pytest.raises(TransportError):
            async for _ in client.stream_view("api/articles"):
                pass

    async def test_scalar_rows_skip_reference_expansion(self, make_client) -> None:
        """Test that streamed rows which are not objects pass through unexpanded."""
        client, transport = make_client(paged([["a", article(1)]]))

        items = [
            item async for item in client.stream_view("api/mixed", reference_fields=["field_tags"])
        ]

        assert items[0] == "a"
        assert items[1]["field_tags"][0]["resolved_data"] == {"tid": [{"value": 10}]}
        assert [r.path for r in transport.requests] == [
            "api/mixed",
            "taxonomy/term/10",
            "api/mixed",
        ]
