"""Asynchronous client for the Drupal REST API.

This module provides login, entity reads and writes, file uploads and
REST export view loading on top of a pluggable HTTP transport.
"""

import json as jsonlib
import logging
from collections.abc import AsyncGenerator, Iterable
from typing import Any

from ..exceptions import AuthenticationError, DrupalError
from ..models.entity import EntityType
from ..models.reference import PendingFile
from ..models.session import Session
from ..operations.export import ItemCallback, export_view, stream_view
from ..operations.persistence import EntityPersister
from ..operations.references import ReferenceResolver
from ..protocols import ConfigProvider, Transport
from ..transport import HttpxTransport
from .base import BaseClient

logger = logging.getLogger(__name__)

EntityId = int | str


class AsyncClient(BaseClient):
    """Asynchronous client for a Drupal site.

    Call ``login()`` once before any other operation; the session it
    establishes is then shared, read-only, by every request.

    Example:
        ```python
        import asyncio
        from drupal_kit import AsyncClient, DrupalConfig

        async def main():
            config = DrupalConfig(
                base_url="https://example.com",
                username="editor",
                password="secret",
            )

            async with AsyncClient(config) as client:
                await client.login()
                node = await client.node_get(1, reference_fields=["field_tags"])
                print(node["title"])

        asyncio.run(main())
        ```
    """

    def __init__(self, config: ConfigProvider, transport: Transport | None = None) -> None:
        """Initialize the client.

        Args:
            config: Configuration provider (typically DrupalConfig)
            transport: HTTP transport (defaults to an httpx-backed one)
        """
        super().__init__(config)

        self._transport: Transport = transport or HttpxTransport(
            timeout=config.timeout,
            verify_ssl=config.verify_ssl,
            max_connections=config.max_connections,
            retry_config=config.retry,
        )
        self._owns_transport = transport is None

        self._persister = EntityPersister(self)
        self._resolver = ReferenceResolver(self, max_concurrency=config.max_concurrency)

    async def __aenter__(self) -> "AsyncClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit - closes the client."""
        await self.close()

    async def close(self) -> None:
        """Close the transport if this client created it."""
        if self._owns_transport:
            await self._transport.aclose()
            logger.info("Closed Drupal client")

    async def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: Any = None,
        content: bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """Make a request and decode its JSON body.

        Args:
            method: HTTP method
            path: Path relative to the site root
            params: URL query parameters
            json: Value to send as a JSON body
            content: Raw body, used when ``json`` is None
            headers: Additional headers

        Returns:
            Decoded response body, None for 204 responses

        Raises:
            TransportError: When no response was received
            MalformedResponseError: If the body is not JSON
            RemoteError: If the body is an error envelope
        """
        if json is not None:
            body: str | bytes | None = jsonlib.dumps(json)
            request_headers = self._get_headers(headers)
        else:
            body = content
            request_headers = self._get_headers(
                headers, content_type="application/json" if content is not None else None
            )

        url = self._build_url(path, params)
        response = await self._transport.request(method, url, request_headers, body)
        return self._parse_response(response)

    # Session

    async def login(self) -> Session:
        """Log in with the configured credentials.

        Stores the session cookie (when the server sets one) and the CSRF
        token for all later requests. Must complete before any other
        operation is started.

        Returns:
            The new session

        Raises:
            RemoteError: If Drupal rejects the credentials
            AuthenticationError: If the response carries no CSRF token
        """
        name, password = self.config.get_credentials()
        url = self._build_url("user/login")
        response = await self._transport.request(
            "POST",
            url,
            self._get_headers(),
            jsonlib.dumps({"name": name, "pass": password}),
        )

        data = self._parse_response(response)
        csrf_token = data.get("csrf_token") if isinstance(data, dict) else None
        if not csrf_token:
            raise AuthenticationError(f"Login as {name!r} returned no CSRF token")

        self._session = Session(cookie=self._session_cookie(response), csrf_token=csrf_token)
        logger.info(f"Logged in to {self.base_url} as {name}")
        return self._session

    # Entities

    async def entity_get(
        self,
        entity_type: EntityType | str,
        entity_id: EntityId,
        *,
        reference_fields: Iterable[str] | None = None,
    ) -> Any:
        """Load one entity.

        Args:
            entity_type: Entity type name
            entity_id: Entity identifier
            reference_fields: Fields whose references are loaded into
                ``resolved_data`` (dotted paths reach deeper)

        Returns:
            Decoded entity

        Raises:
            MissingEntityTypeError: If the entity type is unknown
        """
        descriptor = self._descriptor(entity_type)
        entity = await self.request("GET", descriptor.item_path(entity_id))

        if reference_fields and isinstance(entity, dict):
            await self.resolve_references(entity, reference_fields)
        return entity

    async def entity_save(
        self,
        entity_type: EntityType | str,
        entity_id: EntityId | None,
        payload: dict[str, Any],
    ) -> Any:
        """Create or update an entity, persisting inline dependencies first.

        Pending file uploads and inline child entities in ``payload`` are
        saved in field order and their new ids written into the payload
        before the entity itself is sent (PATCH with an id, POST without).

        Warning:
            Not transactional. On failure the payload keeps the ids written
            so far and already created children are not removed. Retrying a
            failed create may create the parent twice.

        Args:
            entity_type: Entity type name
            entity_id: Id to update, or None to create
            payload: Field data

        Returns:
            Decoded entity as saved by the server
        """
        return await self._persister.save(entity_type, entity_id, payload)

    async def entity_delete(self, entity_type: EntityType | str, entity_id: EntityId) -> Any:
        """Delete an entity.

        Returns:
            Decoded response body, usually None
        """
        descriptor = self._descriptor(entity_type)
        result = await self.request("DELETE", descriptor.item_path(entity_id))
        logger.info(f"Deleted {descriptor.name.value}/{entity_id}")
        return result

    async def resolve_references(
        self, entity: dict[str, Any], fields: Iterable[str]
    ) -> dict[str, Any]:
        """Load the entities referenced from ``fields`` into ``entity``.

        Fetches run concurrently, bounded by ``max_concurrency``; the first
        failure cancels the rest and is raised.
        """
        return await self._resolver.resolve(entity, fields)

    # Files

    async def file_upload(self, file: PendingFile, entity_path: str) -> Any:
        """Upload raw file content for a file field.

        Args:
            file: Name and content of the file
            entity_path: ``{entity_type}/{bundle}/{field_name}`` of the
                field the file is meant for

        Returns:
            Decoded file entity
        """
        headers = {
            "Content-Type": "application/octet-stream",
            "Content-Disposition": f'file; filename="{file.filename}"',
        }
        try:
            result = await self.request(
                "POST",
                f"file/upload/{entity_path}",
                content=file.content,
                headers=headers,
            )
        except DrupalError as e:
            logger.error(f"Uploading {entity_path}: {e}")
            raise

        logger.info(f"Uploaded {file.filename} to {entity_path}")
        return result

    # REST export views

    async def export_view(
        self,
        path: str,
        *,
        paginated: bool = True,
        start_page: int = 0,
        end_page: int | None = None,
        per_item_callback: ItemCallback | None = None,
        reference_fields: Iterable[str] | None = None,
    ) -> list[Any]:
        """Load every item of a REST export view.

        See drupal_kit.operations.export.export_view.
        """
        return await export_view(
            self,
            path,
            paginated=paginated,
            start_page=start_page,
            end_page=end_page,
            per_item_callback=per_item_callback,
            reference_fields=reference_fields,
        )

    def stream_view(
        self,
        path: str,
        *,
        paginated: bool = True,
        start_page: int = 0,
        end_page: int | None = None,
        reference_fields: Iterable[str] | None = None,
    ) -> AsyncGenerator[Any, None]:
        """Iterate over the items of a REST export view page by page."""
        return stream_view(
            self,
            path,
            paginated=paginated,
            start_page=start_page,
            end_page=end_page,
            reference_fields=reference_fields,
        )

    # Per-type shortcuts

    async def node_get(self, node_id: EntityId, **kwargs: Any) -> Any:
        return await self.entity_get(EntityType.NODE, node_id, **kwargs)

    async def node_save(self, node_id: EntityId | None, payload: dict[str, Any]) -> Any:
        return await self.entity_save(EntityType.NODE, node_id, payload)

    async def media_get(self, media_id: EntityId, **kwargs: Any) -> Any:
        return await self.entity_get(EntityType.MEDIA, media_id, **kwargs)

    async def media_save(self, media_id: EntityId | None, payload: dict[str, Any]) -> Any:
        return await self.entity_save(EntityType.MEDIA, media_id, payload)

    async def taxonomy_get(self, term_id: EntityId, **kwargs: Any) -> Any:
        return await self.entity_get(EntityType.TAXONOMY_TERM, term_id, **kwargs)

    async def taxonomy_save(self, term_id: EntityId | None, payload: dict[str, Any]) -> Any:
        return await self.entity_save(EntityType.TAXONOMY_TERM, term_id, payload)

    async def user_get(self, user_id: EntityId, **kwargs: Any) -> Any:
        return await self.entity_get(EntityType.USER, user_id, **kwargs)

    async def user_save(self, user_id: EntityId | None, payload: dict[str, Any]) -> Any:
        return await self.entity_save(EntityType.USER, user_id, payload)

    async def file_get(self, file_id: EntityId, **kwargs: Any) -> Any:
        return await self.entity_get(EntityType.FILE, file_id, **kwargs)

    async def file_save(self, file_id: EntityId, payload: dict[str, Any]) -> Any:
        return await self.entity_save(EntityType.FILE, file_id, payload)

    async def paragraph_get(self, paragraph_id: EntityId, **kwargs: Any) -> Any:
        return await self.entity_get(EntityType.PARAGRAPH, paragraph_id, **kwargs)

    async def paragraph_save(self, paragraph_id: EntityId | None, payload: dict[str, Any]) -> Any:
        return await self.entity_save(EntityType.PARAGRAPH, paragraph_id, payload)
