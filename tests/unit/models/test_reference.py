"""Tests for reference item helpers."""

import pytest

from drupal_kit import PayloadError, PendingFile, RemoteError, inline_entity, pending_file
from drupal_kit.models.reference import (
    extract_id,
    is_pending,
    outgoing_payload,
    reference_items,
    scalar_value,
)


class TestBuilders:
    """Test cases for reference item builders."""

    def test_inline_entity(self) -> None:
        """Test building an inline child reference."""
        item = inline_entity("taxonomy", {"name": [{"value": "news"}]})

        assert item == {"target_type": "taxonomy_term", "inline_data": {"name": [{"value": "news"}]}}
        assert is_pending(item)

    def test_inline_entity_with_id(self) -> None:
        """Test that an existing id is kept on the item."""
        item = inline_entity("paragraph", {"type": [{"target_id": "text"}]}, target_id=3)

        assert item["target_id"] == 3

    def test_pending_file(self) -> None:
        """Test building a pending file upload."""
        item = pending_file("a.txt", b"hello")

        assert item["target_type"] == "file_upload"
        assert item["inline_data"] == PendingFile(filename="a.txt", content=b"hello")

    def test_pending_file_coerce_from_dict(self) -> None:
        """Test that plain mappings are accepted as pending files."""
        file = PendingFile.coerce({"filename": "a.txt", "content": b"hi"})

        assert file.filename == "a.txt"

    def test_pending_file_coerce_invalid(self) -> None:
        """Test that incomplete file data raises PayloadError."""
        with pytest.raises(PayloadError):
            PendingFile.coerce({"content": b"hi"})


class TestFieldValues:
    """Test cases for field value helpers."""

    def test_reference_items_keeps_order(self) -> None:
        """Test that reference items come back in list order."""
        value = [
            {"target_type": "node", "target_id": 2},
            {"value": "plain"},
            {"target_type": "node", "target_id": 1},
        ]

        assert [item["target_id"] for item in reference_items(value)] == [2, 1]

    def test_reference_items_on_scalar(self) -> None:
        """Test that scalar fields have no reference items."""
        assert reference_items("text") == []

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ([{"value": 5}], 5),
            ([{"target_id": "article"}], "article"),
            (["article"], "article"),
            ("article", "article"),
            ([], None),
            (None, None),
        ],
    )
    def test_scalar_value(self, value: object, expected: object) -> None:
        """Test reducing Drupal field shapes to a scalar."""
        assert scalar_value(value) == expected

    def test_extract_id(self) -> None:
        """Test reading the identifier field from a response."""
        assert extract_id({"fid": [{"value": 12}]}, "fid") == 12

    def test_extract_id_missing(self) -> None:
        """Test that a response without the identifier is an error."""
        with pytest.raises(RemoteError, match="'nid'"):
            extract_id({"title": [{"value": "x"}]}, "nid")

    def test_outgoing_payload_strips_client_keys(self) -> None:
        """Test that inline and resolved data are not sent."""
        payload = {
            "title": [{"value": "x"}],
            "field_tags": [
                {"target_type": "taxonomy_term", "target_id": 4, "inline_data": {}, "resolved_data": {}},
            ],
            "status": True,
        }

        body = outgoing_payload(payload)

        assert body == {
            "title": [{"value": "x"}],
            "field_tags": [{"target_type": "taxonomy_term", "target_id": 4}],
            "status": True,
        }
        assert "inline_data" in payload["field_tags"][0]
