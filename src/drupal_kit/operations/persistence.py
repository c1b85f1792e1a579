"""Nested entity persistence.

Saving an entity first persists everything its field data depends on:
pending file uploads and inline child entities. Each dependency's new
identifier is written back into the referencing item before the parent
itself is sent.

Saves are not transactional. When any step fails, children created so far
stay on the server and the payload keeps the identifiers already written
into it. Re-validate a payload before retrying a failed save with it.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ..exceptions import DrupalError, PayloadError
from ..models.entity import EntityType, EntityTypeDescriptor, get_descriptor
from ..models.reference import (
    INLINE_DATA,
    PENDING_FILE_UPLOAD,
    TARGET_ID,
    TARGET_TYPE,
    PendingFile,
    extract_id,
    is_pending,
    outgoing_payload,
    reference_items,
    scalar_value,
)

if TYPE_CHECKING:
    from ..client.async_client import AsyncClient

logger = logging.getLogger(__name__)


class EntityPersister:
    """Saves entities together with their inline dependencies.

    Dependencies are handled strictly in order: fields in payload order,
    items in list order, each one finished before the next starts.
    """

    def __init__(self, client: AsyncClient) -> None:
        self.client = client

    async def save(
        self,
        entity_type: EntityType | str,
        entity_id: int | str | None,
        payload: dict[str, Any],
    ) -> Any:
        """Save an entity after persisting its dependencies.

        Args:
            entity_type: Entity type name
            entity_id: Existing id to update, or None to create
            payload: Field data; reference items are rewritten in place

        Returns:
            Decoded server representation of the saved entity

        Raises:
            MissingEntityTypeError: If an entity type is unknown
            PayloadError: If a dependency cannot be persisted as given
            DrupalError: The first transport or response failure
        """
        descriptor = get_descriptor(entity_type)

        for field_name, field_value in payload.items():
            for item in reference_items(field_value):
                if is_pending(item):
                    await self._persist_dependency(descriptor, payload, field_name, item)

        return await self._write(descriptor, entity_id, payload)

    async def _persist_dependency(
        self,
        parent: EntityTypeDescriptor,
        payload: dict[str, Any],
        field_name: str,
        item: dict[str, Any],
    ) -> None:
        if item[TARGET_TYPE] == PENDING_FILE_UPLOAD:
            file = PendingFile.coerce(item[INLINE_DATA])
            path = self.upload_path(parent, payload, field_name)
            uploaded = await self.client.file_upload(file, path)

            file_descriptor = get_descriptor(EntityType.FILE)
            item[TARGET_ID] = extract_id(uploaded, file_descriptor.id_field)
            # The upload produced a saved file entity; nothing left to send
            item[TARGET_TYPE] = file_descriptor.name.value
            del item[INLINE_DATA]
            return

        target = get_descriptor(item[TARGET_TYPE])
        inline_data = item[INLINE_DATA]
        if not isinstance(inline_data, dict):
            raise PayloadError(
                f"Inline data for {target.name.value} in {field_name!r} must be a mapping"
            )

        saved = await self.save(target.name, item.get(TARGET_ID), inline_data)
        item[TARGET_ID] = extract_id(saved, target.id_field)

    @staticmethod
    def upload_path(
        descriptor: EntityTypeDescriptor,
        payload: dict[str, Any],
        field_name: str,
    ) -> str:
        """Return the ``{entity_type}/{bundle}/{field}`` upload path.

        Entity types without bundles use their own name as the bundle.

        Raises:
            PayloadError: If the payload does not name its bundle
        """
        if descriptor.bundle_field is None:
            bundle = descriptor.name.value
        else:
            bundle = scalar_value(payload.get(descriptor.bundle_field))
            if bundle is None:
                raise PayloadError(
                    f"Cannot upload into {field_name!r}: payload has no "
                    f"{descriptor.bundle_field!r} value"
                )

        return f"{descriptor.name.value}/{bundle}/{field_name}"

    async def _write(
        self,
        descriptor: EntityTypeDescriptor,
        entity_id: int | str | None,
        payload: dict[str, Any],
    ) -> Any:
        if entity_id is not None:
            method, path = "PATCH", descriptor.item_path(entity_id)
        elif descriptor.create_path is not None:
            method, path = "POST", descriptor.create_path
        else:
            raise PayloadError(f"Entities of type {descriptor.name.value} cannot be created")

        try:
            result = await self.client.request(method, path, json=outgoing_payload(payload))
        except DrupalError as e:
            logger.error(f"Saving {descriptor.name.value}/{entity_id}: {e}")
            raise

        if entity_id is None:
            logger.info(f"Created {descriptor.name.value} entity")
        else:
            logger.info(f"Updated {descriptor.name.value}/{entity_id}")
        return result
