"""Reference items embedded in entity field data.

Drupal field values are lists. Entity reference fields hold items like
``{"target_type": "taxonomy_term", "target_id": 4}``. The client extends
that shape with two extra keys:

- ``inline_data``: a payload (or a PendingFile) that must be saved before
  the parent, after which ``target_id`` is filled in
- ``resolved_data``: the referenced entity, attached on read

Neither key is sent to the server.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError

from ..exceptions import PayloadError, RemoteError
from .entity import EntityType

TARGET_TYPE = "target_type"
TARGET_ID = "target_id"
INLINE_DATA = "inline_data"
RESOLVED_DATA = "resolved_data"

# target_type of an item whose inline_data is raw file content
PENDING_FILE_UPLOAD = "file_upload"

_CLIENT_ONLY_KEYS = (INLINE_DATA, RESOLVED_DATA)


class PendingFile(BaseModel):
    """File content awaiting upload.

    Attributes:
        filename: Name sent in the Content-Disposition header
        content: Raw file bytes
    """

    model_config = ConfigDict(frozen=True)

    filename: str
    content: bytes

    @classmethod
    def coerce(cls, value: Any) -> "PendingFile":
        """Accept a PendingFile or a ``{"filename", "content"}`` mapping.

        Raises:
            PayloadError: If the value does not describe a file
        """
        if isinstance(value, cls):
            return value
        try:
            return cls.model_validate(value)
        except ValidationError as e:
            raise PayloadError(f"Invalid pending file: {e}") from e


def is_reference_item(value: Any) -> bool:
    """Return True if a field item points at another entity."""
    return isinstance(value, dict) and TARGET_TYPE in value


def is_pending(item: dict[str, Any]) -> bool:
    """Return True if an item carries inline data to save first."""
    return item.get(INLINE_DATA) is not None


def reference_items(field_value: Any) -> list[dict[str, Any]]:
    """Return the reference items of a field value, in order."""
    if not isinstance(field_value, list):
        return []
    return [item for item in field_value if is_reference_item(item)]


def inline_entity(
    target_type: EntityType | str,
    payload: dict[str, Any],
    target_id: int | str | None = None,
) -> dict[str, Any]:
    """Build a reference item whose target is saved together with the parent.

    Example:
        >>> tag = inline_entity("taxonomy_term", {"vid": [{"target_id": "tags"}]})
        >>> tag["target_type"]
        'taxonomy_term'
    """
    item: dict[str, Any] = {
        TARGET_TYPE: EntityType.from_name(target_type).value,
        INLINE_DATA: payload,
    }
    if target_id is not None:
        item[TARGET_ID] = target_id
    return item


def pending_file(filename: str, content: bytes) -> dict[str, Any]:
    """Build a reference item for a file uploaded when the parent is saved."""
    return {
        TARGET_TYPE: PENDING_FILE_UPLOAD,
        INLINE_DATA: PendingFile(filename=filename, content=content),
    }


def scalar_value(field_value: Any) -> Any:
    """Reduce a Drupal field value to its first scalar.

    Handles the shapes Drupal uses: ``[{"value": x}]``,
    ``[{"target_id": x}]``, ``[x]`` and bare scalars.
    """
    if isinstance(field_value, list):
        if not field_value:
            return None
        field_value = field_value[0]
    if isinstance(field_value, dict):
        if "value" in field_value:
            return field_value["value"]
        return field_value.get(TARGET_ID)
    return field_value


def extract_id(data: Any, id_field: str) -> Any:
    """Read an entity identifier out of a decoded response.

    Raises:
        RemoteError: If the response carries no such identifier
    """
    entity_id = scalar_value(data.get(id_field)) if isinstance(data, dict) else None
    if entity_id is None:
        raise RemoteError(f"Response carries no {id_field!r} identifier")
    return entity_id


def outgoing_payload(payload: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of a payload fit for sending.

    Reference items lose their client-only keys; everything else is kept
    as is.
    """
    body: dict[str, Any] = {}
    for field_name, field_value in payload.items():
        if isinstance(field_value, list):
            body[field_name] = [
                {k: v for k, v in item.items() if k not in _CLIENT_ONLY_KEYS}
                if is_reference_item(item)
                else item
                for item in field_value
            ]
        else:
            body[field_name] = field_value
    return body
