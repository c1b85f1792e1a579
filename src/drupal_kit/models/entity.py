"""Entity type registry.

Maps every supported Drupal entity type to the REST paths and identifier
field it uses. The table is fixed at import time and read-only afterwards.
"""

from enum import Enum
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict

from ..exceptions import MissingEntityTypeError


class EntityType(str, Enum):
    """Entity types the client knows how to read and write."""

    NODE = "node"
    MEDIA = "media"
    TAXONOMY_TERM = "taxonomy_term"
    FILE = "file"
    USER = "user"
    PARAGRAPH = "paragraph"

    @classmethod
    def _missing_(cls, value: object) -> "EntityType | None":
        # Short name used by older configurations
        if value == "taxonomy":
            return cls.TAXONOMY_TERM
        return None

    @classmethod
    def from_name(cls, name: "EntityType | str") -> "EntityType":
        """Look up an entity type by name.

        Raises:
            MissingEntityTypeError: If the name is not registered
        """
        try:
            return cls(name)
        except ValueError:
            raise MissingEntityTypeError(str(name)) from None


class EntityTypeDescriptor(BaseModel):
    """REST routing details for one entity type.

    Attributes:
        name: Entity type
        entity_path: Read/update/delete path with an ``{id}`` placeholder
        create_path: Path for POSTing new entities, None if not creatable
        id_field: Field carrying the entity's identifier in responses
        bundle_field: Field holding the bundle, None if the type has none
    """

    model_config = ConfigDict(frozen=True)

    name: EntityType
    entity_path: str
    create_path: str | None = None
    id_field: str
    bundle_field: str | None = None

    def item_path(self, entity_id: int | str) -> str:
        return self.entity_path.format(id=entity_id)


ENTITY_TYPES: MappingProxyType[EntityType, EntityTypeDescriptor] = MappingProxyType(
    {
        EntityType.NODE: EntityTypeDescriptor(
            name=EntityType.NODE,
            entity_path="node/{id}",
            create_path="node",
            id_field="nid",
            bundle_field="type",
        ),
        EntityType.MEDIA: EntityTypeDescriptor(
            name=EntityType.MEDIA,
            entity_path="media/{id}/edit",
            create_path="entity/media",
            id_field="mid",
            bundle_field="bundle",
        ),
        EntityType.TAXONOMY_TERM: EntityTypeDescriptor(
            name=EntityType.TAXONOMY_TERM,
            entity_path="taxonomy/term/{id}",
            create_path="taxonomy/term",
            id_field="tid",
            bundle_field="vid",
        ),
        EntityType.FILE: EntityTypeDescriptor(
            name=EntityType.FILE,
            entity_path="entity/file/{id}",
            id_field="fid",
        ),
        EntityType.USER: EntityTypeDescriptor(
            name=EntityType.USER,
            entity_path="user/{id}",
            create_path="entity/user",
            id_field="uid",
        ),
        EntityType.PARAGRAPH: EntityTypeDescriptor(
            name=EntityType.PARAGRAPH,
            entity_path="entity/paragraph/{id}",
            create_path="entity/paragraph",
            id_field="id",
            bundle_field="type",
        ),
    }
)


def get_descriptor(entity_type: EntityType | str) -> EntityTypeDescriptor:
    """Return the registry entry for an entity type.

    Args:
        entity_type: Enum member or its string name

    Raises:
        MissingEntityTypeError: If the name is not registered
    """
    return ENTITY_TYPES[EntityType.from_name(entity_type)]
